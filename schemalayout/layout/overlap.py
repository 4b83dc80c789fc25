"""
Overlap audit and emergency separation.

The auditor treats each table as its footprint centred on its position and
reports a pair as overlapping unless a clear gap wider than the tolerance
separates the boxes on at least one axis.

Emergency separation is a direct positional correction used when the force
model runs out of iterations. It runs outside the integration loop, ignoring
damping, temperature and velocities:
1. Centre push - pairs closer than half-widths plus the minimum table
   distance are pushed apart along their centre line by half the shortfall
   (plus padding) each
2. Axis shove - pairs that already meet that distance but still overlap
   are pushed apart along the axis of least penetration
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Tuple

from .config import EllipseConfig, SeparationPhaseConfig
from .state import LayoutState

logger = logging.getLogger(__name__)


@dataclass
class SeparationResult:
    """Outcome of an emergency separation run."""
    passes: int = 0
    moves: List[Tuple[str, str, float]] = field(default_factory=list)  # (a, b, distance moved)
    remaining: List[Tuple[str, str]] = field(default_factory=list)


def tables_overlap(state: LayoutState, i: int, j: int, tolerance: float) -> bool:
    """Check whether the boxes of nodes i and j overlap within tolerance."""
    half_w_i, half_h_i = state.widths[i] / 2, state.heights[i] / 2
    half_w_j, half_h_j = state.widths[j] / 2, state.heights[j] / 2

    left_i, right_i = state.xs[i] - half_w_i, state.xs[i] + half_w_i
    top_i, bottom_i = state.ys[i] - half_h_i, state.ys[i] + half_h_i
    left_j, right_j = state.xs[j] - half_w_j, state.xs[j] + half_w_j
    top_j, bottom_j = state.ys[j] - half_h_j, state.ys[j] + half_h_j

    return not (
        right_i + tolerance < left_j
        or right_j + tolerance < left_i
        or bottom_i + tolerance < top_j
        or bottom_j + tolerance < top_i
    )


def find_overlap_indices(state: LayoutState, tolerance: float) -> List[Tuple[int, int]]:
    """All overlapping index pairs (i < j), full pairwise scan."""
    pairs = []
    count = len(state)
    for i in range(count):
        for j in range(i + 1, count):
            if tables_overlap(state, i, j, tolerance):
                pairs.append((i, j))
    return pairs


def find_overlaps(state: LayoutState, tolerance: float) -> List[Tuple[str, str]]:
    """All overlapping pairs by table name."""
    return [
        (state.names[i], state.names[j])
        for i, j in find_overlap_indices(state, tolerance)
    ]


def count_overlaps(state: LayoutState, tolerance: float) -> int:
    """Number of overlapping pairs."""
    return len(find_overlap_indices(state, tolerance))


def log_overlapping_tables(state: LayoutState, tolerance: float):
    """Log each pair that still overlaps with its centre distance."""
    for i, j in find_overlap_indices(state, tolerance):
        dx = state.xs[j] - state.xs[i]
        dy = state.ys[j] - state.ys[i]
        logger.debug(
            "  Overlapping: %s <-> %s (distance: %.1f)",
            state.names[i], state.names[j], math.sqrt(dx * dx + dy * dy),
        )


def _separate_pair(
    state: LayoutState,
    i: int,
    j: int,
    ellipse: EllipseConfig,
    phase: SeparationPhaseConfig,
) -> float:
    """Move one overlapping pair apart. Returns the separation applied."""
    dx = state.xs[j] - state.xs[i]
    dy = state.ys[j] - state.ys[i]
    distance = math.sqrt(dx * dx + dy * dy)
    required = (state.widths[i] + state.widths[j]) / 2 + ellipse.min_table_distance

    if 0 < distance < required:
        separation = required - distance + phase.emergency_padding
        direction_x = dx / max(distance, 1)
        direction_y = dy / max(distance, 1)
        state.xs[i] -= direction_x * separation * 0.5
        state.ys[i] -= direction_y * separation * 0.5
        state.xs[j] += direction_x * separation * 0.5
        state.ys[j] += direction_y * separation * 0.5
        return separation

    # Centre distance is already sufficient (or undefined): shove along the
    # axis that needs the smaller correction to clear the tolerance gap
    penetration_x = (state.widths[i] + state.widths[j]) / 2 + phase.overlap_tolerance - abs(dx)
    penetration_y = (state.heights[i] + state.heights[j]) / 2 + phase.overlap_tolerance - abs(dy)

    if penetration_x <= penetration_y:
        separation = penetration_x + phase.emergency_padding
        sign = 1.0 if dx >= 0 else -1.0
        state.xs[i] -= sign * separation * 0.5
        state.xs[j] += sign * separation * 0.5
    else:
        separation = penetration_y + phase.emergency_padding
        sign = 1.0 if dy >= 0 else -1.0
        state.ys[i] -= sign * separation * 0.5
        state.ys[j] += sign * separation * 0.5
    return separation


def emergency_separate(
    state: LayoutState,
    ellipse: EllipseConfig,
    phase: SeparationPhaseConfig,
    max_passes: int = 1,
) -> SeparationResult:
    """
    Force overlapping tables apart by direct position correction.

    Each pass walks all pairs once and separates those the auditor reports.
    Passes repeat until no overlaps remain or ``max_passes`` is spent.
    """
    result = SeparationResult()
    tolerance = phase.overlap_tolerance
    count = len(state)

    while result.passes < max_passes:
        result.passes += 1
        moved = 0
        for i in range(count):
            for j in range(i + 1, count):
                if not tables_overlap(state, i, j, tolerance):
                    continue
                separation = _separate_pair(state, i, j, ellipse, phase)
                result.moves.append((state.names[i], state.names[j], separation))
                moved += 1
                if logger.isEnabledFor(logging.DEBUG):
                    logger.debug(
                        "Emergency: separated %s and %s by %.1f",
                        state.names[i], state.names[j], separation,
                    )
        if moved == 0:
            break

    result.remaining = find_overlaps(state, tolerance)
    return result
