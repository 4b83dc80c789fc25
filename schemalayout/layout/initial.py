"""
Connectivity classification and initial placement.

Isolated tables go into a fixed, alphabetical row at the top of the canvas
and never take part in the simulation. Connected tables are seeded on
expanding rings around the canvas centre, most-connected first, with a
small random jitter to break symmetry.
"""

import logging
import math
import random
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .config import CanvasConfig
from .state import LayoutEdge, LayoutState

logger = logging.getLogger(__name__)


def classify_connectivity(
    names: Sequence[str],
    edges: Iterable[LayoutEdge],
) -> Tuple[List[str], List[str]]:
    """
    Split table names into connected and unconnected groups.

    A table is connected iff it is an endpoint of at least one edge whose
    endpoints both exist. Connected names keep their input order;
    unconnected names are sorted for a deterministic row.

    Returns:
        (connected, unconnected)
    """
    known = set(names)
    connected_set = set()
    for edge in edges:
        if edge.source in known and edge.target in known:
            connected_set.add(edge.source)
            connected_set.add(edge.target)

    connected = [name for name in names if name in connected_set]
    unconnected = sorted(name for name in names if name not in connected_set)
    return connected, unconnected


def layout_unconnected(
    names: Sequence[str],
    canvas: Optional[CanvasConfig] = None,
) -> Dict[str, Tuple[float, float]]:
    """Place unconnected tables in a single centred row, in the given order."""
    canvas = canvas or CanvasConfig()
    positions: Dict[str, Tuple[float, float]] = {}
    if not names:
        return positions

    total_width = (len(names) - 1) * canvas.unconnected_spacing
    start_x = max(canvas.boundary_padding, (canvas.width - total_width) / 2)

    for index, name in enumerate(names):
        positions[name] = (
            start_x + index * canvas.unconnected_spacing,
            canvas.unconnected_start_y,
        )

    logger.info("Positioned %d unconnected tables in the top row", len(names))
    return positions


def connectivity_scores(state: LayoutState) -> List[int]:
    """In-degree plus out-degree for every node in the state."""
    scores = [0] * len(state)
    for i, j in state.edges:
        scores[i] += 1
        scores[j] += 1
    return scores


def generate_initial_layout(
    state: LayoutState,
    canvas: Optional[CanvasConfig] = None,
    rng: Optional[random.Random] = None,
) -> LayoutState:
    """
    Seed connected node positions on connectivity-ranked rings.

    The node with rank ``k`` (0 = most connected) sits at angle
    ``2*pi*k/N`` on a ring of radius ``initial_radius + k*radius_step``,
    capped at a quarter of the smaller canvas side. Velocities are reset
    to zero.
    """
    canvas = canvas or CanvasConfig()
    rng = rng or random.Random()
    count = len(state)
    if count == 0:
        return state

    scores = connectivity_scores(state)
    # Stable sort keeps input order among equally connected nodes
    ranked = sorted(range(count), key=lambda i: -scores[i])

    center_x = canvas.width / 2
    center_y = canvas.unconnected_row_height + canvas.center_offset_y
    max_radius = min(canvas.width, canvas.height) / 4

    for rank, i in enumerate(ranked):
        angle = (rank * math.pi * 2) / count
        radius = min(canvas.initial_radius + rank * canvas.radius_step, max_radius)
        state.xs[i] = center_x + math.cos(angle) * radius + (rng.random() - 0.5) * canvas.jitter
        state.ys[i] = center_y + math.sin(angle) * radius + (rng.random() - 0.5) * canvas.jitter
        state.vxs[i] = 0.0
        state.vys[i] = 0.0

    logger.info("Initial layout: %d connected tables arranged by connectivity", count)
    return state
