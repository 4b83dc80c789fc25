"""
Force model for the layout simulation.

Two force sources act on connected tables:
1. Elliptical repulsion - every pair, tables modelled as ellipses whose
   semi-axes are half their footprint
2. Spring attraction - every edge, Hooke's law around an ideal length

All forces for an iteration are accumulated into separate arrays before
any position moves, so each pair contribution depends only on the previous
iteration's positions.
"""

import math
from typing import List, Tuple

from .config import EllipseConfig, PhaseConfig
from .state import LayoutState

# Forces are scaled into velocity by this factor during integration
FORCE_TO_VELOCITY = 0.001
SPRING_CONSTANT = 0.8
MIN_SURFACE_DISTANCE = 0.1


def elliptical_repulsion(
    state: LayoutState,
    i: int,
    j: int,
    separation_strength: float,
    force_multiplier: float,
    ellipse: EllipseConfig,
) -> Tuple[float, float]:
    """
    Repulsive force between nodes i and j, directed from i towards j.

    The caller subtracts the vector from i and adds it to j. Coincident
    centres (distance below 1) yield no force.
    """
    dx = state.xs[j] - state.xs[i]
    dy = state.ys[j] - state.ys[i]
    distance = math.sqrt(dx * dx + dy * dy)
    if distance < 1:
        return 0.0, 0.0

    semi_major_sum = state.widths[i] / 2 + state.widths[j] / 2
    min_separation = semi_major_sum + ellipse.min_table_distance
    surface_distance = max(MIN_SURFACE_DISTANCE, distance - semi_major_sum)

    force = (ellipse.repulsion_constant * separation_strength * force_multiplier) / (
        surface_distance * surface_distance
    )

    # Steep penalty once the centres are closer than the minimum separation
    if distance < min_separation:
        overlap_factor = min_separation / max(distance, 1)
        force *= ellipse.collision_multiplier * overlap_factor ** 2

    ramp_distance = min_separation * ellipse.force_ramp_distance
    if distance < ramp_distance:
        force *= 1.0 + ((ramp_distance - distance) / ramp_distance) ** 2

    return dx / distance * force, dy / distance * force


def spring_attraction(
    state: LayoutState,
    i: int,
    j: int,
    connection_strength: float,
    ideal_edge_length: float,
) -> Tuple[float, float]:
    """
    Spring force along edge i->j, directed from i towards j.

    Positive when the edge is stretched beyond its ideal length (pulls the
    ends together), negative when compressed. The caller adds the vector to
    i and subtracts it from j.
    """
    dx = state.xs[j] - state.xs[i]
    dy = state.ys[j] - state.ys[i]
    distance = math.sqrt(dx * dx + dy * dy)
    if distance < 1:
        return 0.0, 0.0

    force = SPRING_CONSTANT * connection_strength * (distance - ideal_edge_length)
    return dx / distance * force, dy / distance * force


def accumulate_forces(
    state: LayoutState,
    separation_strength: float,
    force_multiplier: float,
    connection_strength: float,
    ideal_edge_length: float,
    ellipse: EllipseConfig,
) -> Tuple[List[float], List[float]]:
    """Compute the net force on every node for one iteration."""
    count = len(state)
    fxs = [0.0] * count
    fys = [0.0] * count

    for i in range(count):
        for j in range(i + 1, count):
            fx, fy = elliptical_repulsion(
                state, i, j, separation_strength, force_multiplier, ellipse
            )
            fxs[i] -= fx
            fys[i] -= fy
            fxs[j] += fx
            fys[j] += fy

    for (i, j), strength in zip(state.edges, state.edge_strengths):
        fx, fy = spring_attraction(
            state, i, j, connection_strength * strength, ideal_edge_length
        )
        fxs[i] += fx
        fys[i] += fy
        fxs[j] -= fx
        fys[j] -= fy

    return fxs, fys


def integrate(
    state: LayoutState,
    fxs: List[float],
    fys: List[float],
    temperature: float,
    phase: PhaseConfig,
    min_y: float,
) -> float:
    """
    Apply forces with damping, velocity clamping and temperature scaling.

    Returns:
        Total displacement of all nodes this iteration
    """
    total_movement = 0.0
    temperature_factor = min(1.0, temperature / phase.initial_temperature)

    for i in range(len(state)):
        vx = state.vxs[i] * phase.damping + fxs[i] * FORCE_TO_VELOCITY
        vy = state.vys[i] * phase.damping + fys[i] * FORCE_TO_VELOCITY

        speed = math.sqrt(vx * vx + vy * vy)
        if speed > phase.max_velocity:
            vx = vx / speed * phase.max_velocity
            vy = vy / speed * phase.max_velocity

        state.vxs[i] = vx
        state.vys[i] = vy

        move_x = vx * temperature_factor
        move_y = vy * temperature_factor
        old_y = state.ys[i]
        state.xs[i] += move_x
        # Connected tables stay below the fixed unconnected row
        state.ys[i] = max(min_y, old_y + move_y)

        total_movement += math.sqrt(move_x * move_x + move_y * move_y)

    return total_movement
