"""
Layout simulation state.

Nodes live in an arena addressed by dense integer index: positions,
velocities and footprints are parallel lists, and edges are stored as index
pairs so the pairwise inner loops never touch string keys.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutNode:
    """A table to be positioned: unique name plus footprint."""
    name: str
    width: float
    height: float


@dataclass(frozen=True)
class LayoutEdge:
    """Directed foreign-key edge between two named tables."""
    source: str
    target: str
    strength: float = 1.0
    kind: str = "FK"


@dataclass
class LayoutState:
    """Mutable simulation state for one set of nodes."""
    names: List[str]
    widths: List[float]
    heights: List[float]
    xs: List[float]
    ys: List[float]
    vxs: List[float]
    vys: List[float]
    edges: List[Tuple[int, int]] = field(default_factory=list)
    edge_strengths: List[float] = field(default_factory=list)
    index: Dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        if not self.index:
            self.index = {name: i for i, name in enumerate(self.names)}

    @classmethod
    def from_nodes(
        cls,
        nodes: Iterable[LayoutNode],
        edges: Iterable[LayoutEdge] = (),
        positions: Optional[Dict[str, Tuple[float, float]]] = None,
    ) -> "LayoutState":
        """
        Build a state from nodes and edges.

        Edges whose endpoints are not in the node set are dropped. Nodes
        without an entry in ``positions`` start at the origin; all
        velocities start at zero.
        """
        nodes = list(nodes)
        positions = positions or {}
        names = [node.name for node in nodes]
        xs = [float(positions.get(name, (0.0, 0.0))[0]) for name in names]
        ys = [float(positions.get(name, (0.0, 0.0))[1]) for name in names]

        state = cls(
            names=names,
            widths=[float(node.width) for node in nodes],
            heights=[float(node.height) for node in nodes],
            xs=xs,
            ys=ys,
            vxs=[0.0] * len(nodes),
            vys=[0.0] * len(nodes),
        )

        dropped = 0
        for edge in edges:
            i = state.index.get(edge.source)
            j = state.index.get(edge.target)
            if i is None or j is None:
                dropped += 1
                continue
            state.edges.append((i, j))
            state.edge_strengths.append(edge.strength)

        if dropped and logger.isEnabledFor(logging.DEBUG):
            logger.debug("Dropped %d edges referencing unknown tables", dropped)

        return state

    def __len__(self) -> int:
        return len(self.names)

    def position(self, name: str) -> Tuple[float, float]:
        i = self.index[name]
        return (self.xs[i], self.ys[i])

    def set_position(self, name: str, x: float, y: float):
        i = self.index[name]
        self.xs[i] = x
        self.ys[i] = y

    def speed(self, i: int) -> float:
        return math.sqrt(self.vxs[i] * self.vxs[i] + self.vys[i] * self.vys[i])

    def max_speed(self) -> float:
        return max((self.speed(i) for i in range(len(self.names))), default=0.0)

    def positions(self) -> Dict[str, Tuple[float, float]]:
        """Snapshot of positions keyed by name."""
        return {name: (self.xs[i], self.ys[i]) for i, name in enumerate(self.names)}

    def scale_velocities(self, factor: float):
        for i in range(len(self.names)):
            self.vxs[i] *= factor
            self.vys[i] *= factor
