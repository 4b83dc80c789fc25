"""
Schema to positions.

Builds layout nodes (with estimated footprints) and edges from a schema and
either reuses a saved layout or runs the three-phase engine.
"""

import logging
import random
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..schema.abstraction import Schema
from ..schema.extractor import extract_relationships, visible_properties
from ..schema.layout_file import SavedLayout
from .config import LayoutConfig
from .dimensions import TableDimensions, estimate_dimensions
from .events import LayoutObserver, LoggingObserver
from .force_directed import LayoutResult, ThreePhaseLayout
from .state import LayoutEdge, LayoutNode

logger = logging.getLogger(__name__)


def table_dimensions(
    schema: Schema,
    show_navigation: bool = False,
    include_inherited: bool = False,
) -> Dict[str, TableDimensions]:
    """Estimated footprint of every table in the schema."""
    names = schema.entity_names
    dimensions = {}
    for key, entity in schema.entities.items():
        props = visible_properties(entity, names, show_navigation, include_inherited)
        dimensions[key] = estimate_dimensions(entity.type, [(p.name, p.type) for p in props])
    return dimensions


def build_layout_graph(
    schema: Schema,
    show_navigation: bool = False,
    include_inherited: bool = False,
) -> Tuple[List[LayoutNode], List[LayoutEdge]]:
    """Layout nodes and foreign-key edges for a schema."""
    dimensions = table_dimensions(schema, show_navigation, include_inherited)
    nodes = [
        LayoutNode(name=name, width=dims.width, height=dims.height)
        for name, dims in dimensions.items()
    ]
    edges = [
        LayoutEdge(
            source=rel.source,
            target=rel.target,
            strength=rel.strength,
            kind=rel.kind.value,
        )
        for rel in extract_relationships(schema)
    ]
    return nodes, edges


def run_layout(
    schema: Schema,
    config: Optional[LayoutConfig] = None,
    seed: Optional[int] = None,
    observers: Optional[Sequence[LayoutObserver]] = None,
    show_navigation: bool = False,
    should_cancel: Optional[Callable[[], bool]] = None,
    include_inherited: bool = False,
) -> LayoutResult:
    """Run the three-phase engine on a schema."""
    nodes, edges = build_layout_graph(schema, show_navigation, include_inherited)
    if observers is None:
        observers = [LoggingObserver()]
    rng = random.Random(seed) if seed is not None else None
    return ThreePhaseLayout(
        nodes, edges,
        config=config,
        rng=rng,
        observers=observers,
        should_cancel=should_cancel,
    ).run()


def calculate_table_positions(
    schema: Schema,
    config: Optional[LayoutConfig] = None,
    saved_layout: Optional[SavedLayout] = None,
    snap: bool = True,
    seed: Optional[int] = None,
    observers: Optional[Sequence[LayoutObserver]] = None,
    show_navigation: bool = False,
    include_inherited: bool = False,
) -> Dict[str, Tuple[int, int]]:
    """
    Positions for every table of a schema.

    A saved layout, when present, is returned as stored (optionally grid
    snapped) and the engine does not run. Otherwise the layout is computed
    from scratch.
    """
    if saved_layout is not None and saved_layout.positions:
        logger.info(
            "Document %s: using saved positions (no auto-layout)",
            saved_layout.document or "<unnamed>",
        )
        return saved_layout.resolve(schema.entity_names, snap=snap)

    logger.info(
        "Document %s: no saved layout, auto-optimizing %d tables",
        schema.name or "<unnamed>", len(schema),
    )
    result = run_layout(
        schema, config=config, seed=seed,
        observers=observers, show_navigation=show_navigation,
        include_inherited=include_inherited,
    )
    return result.positions
