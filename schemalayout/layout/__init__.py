"""Three-phase force-directed layout engine."""

from .config import (
    CanvasConfig,
    EllipseConfig,
    LayoutConfig,
    PhaseConfig,
    SeparationPhaseConfig,
    SpacingPhaseConfig,
    load_layout_config,
)
from .dimensions import TableDimensions, estimate_dimensions
from .events import EventRecorder, LoggingObserver
from .force_directed import (
    LayoutResult,
    LayoutStage,
    PhaseReport,
    ThreePhaseLayout,
    compute_layout,
)
from .overlap import count_overlaps, emergency_separate, find_overlaps
from .pipeline import build_layout_graph, calculate_table_positions, run_layout
from .state import LayoutEdge, LayoutNode, LayoutState

__all__ = [
    "CanvasConfig",
    "EllipseConfig",
    "LayoutConfig",
    "PhaseConfig",
    "SeparationPhaseConfig",
    "SpacingPhaseConfig",
    "load_layout_config",
    "TableDimensions",
    "estimate_dimensions",
    "EventRecorder",
    "LoggingObserver",
    "LayoutResult",
    "LayoutStage",
    "PhaseReport",
    "ThreePhaseLayout",
    "compute_layout",
    "count_overlaps",
    "emergency_separate",
    "find_overlaps",
    "build_layout_graph",
    "calculate_table_positions",
    "run_layout",
    "LayoutEdge",
    "LayoutNode",
    "LayoutState",
]
