"""Tests for canvas normalization and rounding."""

import pytest

from schemalayout.layout.boundary import normalize_boundaries, round_half_up
from schemalayout.layout.config import CanvasConfig
from schemalayout.layout.state import LayoutNode, LayoutState


def _state(positions):
    nodes = [LayoutNode(name, 625, 300) for name in positions]
    return LayoutState.from_nodes(nodes, positions=positions)


class TestRoundHalfUp:

    @pytest.mark.parametrize("value,expected", [
        (2.5, 3),
        (3.5, 4),
        (2.4, 2),
        (-2.5, -2),
        (0.0, 0),
    ])
    def test_rounding(self, value, expected):
        assert round_half_up(value) == expected


class TestNormalizeBoundaries:

    def test_small_layout_is_translated_not_scaled(self):
        state = _state({"A": (5000.0, 2000.0), "B": (5500.0, 2600.0)})
        positions, scale = normalize_boundaries(state, CanvasConfig())

        assert scale == 1.0
        assert positions == {"A": (300, 675), "B": (800, 1275)}
        # State follows the normalized coordinates
        assert state.position("B") == (800.0, 1275.0)

    def test_wide_layout_is_shrunk(self):
        state = _state({"A": (0.0, 1000.0), "B": (40000.0, 1000.0)})
        positions, scale = normalize_boundaries(state, CanvasConfig())

        assert scale == pytest.approx(19400.0 / 40000.0)
        assert positions == {"A": (300, 675), "B": (19700, 675)}

    def test_results_within_canvas(self):
        canvas = CanvasConfig()
        state = _state({
            "A": (-8000.0, -3000.0),
            "B": (30000.0, 9000.0),
            "C": (100.0, 40000.0),
        })
        positions, scale = normalize_boundaries(state, canvas)

        assert scale < 1.0
        for x, y in positions.values():
            assert canvas.boundary_padding <= x <= canvas.width - canvas.boundary_padding
            assert (canvas.unconnected_row_height + canvas.boundary_padding
                    <= y <= canvas.height - canvas.boundary_padding)

    def test_single_table(self):
        state = _state({"Only": (12345.6, 7890.1)})
        positions, scale = normalize_boundaries(state, CanvasConfig())
        assert scale == 1.0
        assert positions == {"Only": (300, 675)}

    def test_empty_state(self):
        assert normalize_boundaries(LayoutState.from_nodes([]), CanvasConfig()) == ({}, 1.0)
