"""
Tests for the force model.

Tests cover:
- Elliptical repulsion (direction, collision penalty, coincident centres)
- Spring attraction around the ideal edge length
- Force accumulation symmetry
- Integration: damping, velocity clamp, temperature scaling, y floor
"""

import math

import pytest

from schemalayout.layout.config import EllipseConfig, PhaseConfig
from schemalayout.layout.forces import (
    FORCE_TO_VELOCITY,
    accumulate_forces,
    elliptical_repulsion,
    integrate,
    spring_attraction,
)
from schemalayout.layout.state import LayoutEdge, LayoutNode, LayoutState


def _pair_state(dx: float, dy: float = 0.0, width: float = 300.0) -> LayoutState:
    nodes = [LayoutNode("A", width, 200.0), LayoutNode("B", width, 200.0)]
    return LayoutState.from_nodes(
        nodes,
        [LayoutEdge("A", "B")],
        positions={"A": (1000.0, 1000.0), "B": (1000.0 + dx, 1000.0 + dy)},
    )


# =============================================================================
# Repulsion
# =============================================================================

class TestEllipticalRepulsion:

    def test_directed_from_i_to_j(self):
        state = _pair_state(1000.0)
        fx, fy = elliptical_repulsion(state, 0, 1, 0.04, 1.0, EllipseConfig())
        assert fx > 0
        assert fy == 0.0

    def test_coincident_centres_give_no_force(self):
        state = _pair_state(0.5)
        assert elliptical_repulsion(state, 0, 1, 12.0, 5.0, EllipseConfig()) == (0.0, 0.0)

    def test_far_field_value(self):
        # Beyond the ramp distance only the inverse-square term applies
        state = _pair_state(2000.0)
        fx, _ = elliptical_repulsion(state, 0, 1, 1.0, 1.0, EllipseConfig())
        assert fx == pytest.approx(150000.0 / (2000.0 - 300.0) ** 2)

    def test_collision_penalty_is_steep(self):
        ellipse = EllipseConfig()
        inside, _ = elliptical_repulsion(_pair_state(400.0), 0, 1, 1.0, 1.0, ellipse)
        outside, _ = elliptical_repulsion(_pair_state(600.0), 0, 1, 1.0, 1.0, ellipse)
        # minimum separation is 300 + 200 = 500
        assert inside > outside * 15

    def test_scales_with_strength_and_multiplier(self):
        ellipse = EllipseConfig()
        base, _ = elliptical_repulsion(_pair_state(900.0), 0, 1, 1.0, 1.0, ellipse)
        scaled, _ = elliptical_repulsion(_pair_state(900.0), 0, 1, 12.0, 5.0, ellipse)
        assert scaled == pytest.approx(base * 60.0)


# =============================================================================
# Attraction
# =============================================================================

class TestSpringAttraction:

    def test_stretched_edge_pulls_together(self):
        fx, fy = spring_attraction(_pair_state(1000.0), 0, 1, 1.0, 700.0)
        assert fx == pytest.approx(0.8 * 300.0)
        assert fy == 0.0

    def test_compressed_edge_pushes_apart(self):
        fx, _ = spring_attraction(_pair_state(500.0), 0, 1, 1.0, 700.0)
        assert fx == pytest.approx(-0.8 * 200.0)

    def test_rest_length_gives_no_force(self):
        fx, fy = spring_attraction(_pair_state(0.0, 700.0), 0, 1, 0.6, 700.0)
        assert fx == pytest.approx(0.0)
        assert fy == pytest.approx(0.0)


# =============================================================================
# Accumulation
# =============================================================================

class TestAccumulateForces:

    def test_equal_and_opposite(self):
        state = _pair_state(800.0, 300.0)
        fxs, fys = accumulate_forces(state, 0.04, 1.0, 1.0, 700.0, EllipseConfig())
        assert fxs[0] == pytest.approx(-fxs[1])
        assert fys[0] == pytest.approx(-fys[1])

    def test_positions_untouched(self):
        state = _pair_state(800.0)
        before = state.positions()
        accumulate_forces(state, 12.0, 5.0, 0.6, 700.0, EllipseConfig())
        assert state.positions() == before

    def test_edge_strength_weights_spring(self):
        nodes = [LayoutNode("A", 300, 200), LayoutNode("B", 300, 200)]
        positions = {"A": (0.0, 1000.0), "B": (5000.0, 1000.0)}
        single = LayoutState.from_nodes(nodes, [LayoutEdge("A", "B")], positions)
        double = LayoutState.from_nodes(nodes, [LayoutEdge("A", "B", 2.0)], positions)
        ellipse = EllipseConfig()

        fx_single, _ = accumulate_forces(single, 0.0, 1.0, 1.0, 700.0, ellipse)
        fx_double, _ = accumulate_forces(double, 0.0, 1.0, 1.0, 700.0, ellipse)
        assert fx_double[0] == pytest.approx(2 * fx_single[0])


# =============================================================================
# Integration
# =============================================================================

class TestIntegrate:

    def test_velocity_update(self):
        state = _pair_state(1000.0)
        phase = PhaseConfig()
        state.vxs[0] = 2.0
        movement = integrate(state, [100.0, 0.0], [0.0, 0.0], 100.0, phase, 0.0)

        expected = 2.0 * phase.damping + 100.0 * FORCE_TO_VELOCITY
        assert state.vxs[0] == pytest.approx(expected)
        assert state.xs[0] == pytest.approx(1000.0 + expected)
        assert movement == pytest.approx(expected)

    def test_velocity_clamped(self):
        state = _pair_state(1000.0)
        phase = PhaseConfig(max_velocity=88.0)
        integrate(state, [1e9, -1e9], [1e9, 0.0], 100.0, phase, 0.0)
        assert state.speed(0) == pytest.approx(88.0)
        assert state.speed(1) == pytest.approx(88.0)
        # Direction is preserved
        assert state.vxs[0] == pytest.approx(state.vys[0])

    def test_temperature_scales_displacement(self):
        state = _pair_state(1000.0)
        phase = PhaseConfig(initial_temperature=100.0)
        integrate(state, [10000.0, 0.0], [0.0, 0.0], 50.0, phase, 0.0)
        assert state.vxs[0] == pytest.approx(10.0)
        assert state.xs[0] == pytest.approx(1005.0)

    def test_y_floor(self):
        state = _pair_state(1000.0)
        state.ys[0] = 430.0
        integrate(state, [0.0, 0.0], [-1e9, 0.0], 100.0, PhaseConfig(), 425.0)
        assert state.ys[0] == 425.0

    def test_total_movement(self):
        state = _pair_state(1000.0)
        movement = integrate(state, [3000.0, 0.0], [4000.0, 0.0], 100.0, PhaseConfig(), 0.0)
        assert movement == pytest.approx(math.hypot(3.0, 4.0))
