"""Fit the connected subgraph into the canvas and round coordinates."""

import logging
import math
from typing import Dict, Tuple

from .config import CanvasConfig
from .state import LayoutState

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def normalize_boundaries(
    state: LayoutState,
    canvas: CanvasConfig,
) -> Tuple[Dict[str, Tuple[int, int]], float]:
    """
    Shrink-fit and translate connected tables below the unconnected row.

    The bounding box of the node centres is scaled by
    ``min(scale_x, scale_y, 1)`` (never enlarged) and moved so its top-left
    corner sits at ``(padding, row_height + padding)``. The state is updated
    in place.

    Returns:
        (name -> rounded (x, y), applied scale)
    """
    if len(state) == 0:
        return {}, 1.0

    min_x, max_x = min(state.xs), max(state.xs)
    min_y, max_y = min(state.ys), max(state.ys)

    current_width = max_x - min_x
    current_height = max_y - min_y
    target_width = canvas.width - canvas.boundary_padding * 2
    target_height = canvas.height - canvas.unconnected_row_height - canvas.boundary_padding * 2

    scale_x = target_width / current_width if current_width > 0 else 1.0
    scale_y = target_height / current_height if current_height > 0 else 1.0
    scale = min(scale_x, scale_y, 1.0)

    origin_y = canvas.unconnected_row_height + canvas.boundary_padding
    positions: Dict[str, Tuple[int, int]] = {}
    for i, name in enumerate(state.names):
        x = canvas.boundary_padding + (state.xs[i] - min_x) * scale
        y = origin_y + (state.ys[i] - min_y) * scale
        state.xs[i] = x
        state.ys[i] = y
        positions[name] = (round_half_up(x), round_half_up(y))

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Boundary fit: bounds=(%.1f, %.1f)-(%.1f, %.1f) scale=%.3f",
            min_x, min_y, max_x, max_y, scale,
        )
    return positions, scale
