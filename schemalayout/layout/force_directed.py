"""
Three-Phase Force-Directed Layout

Computes positions for an entity-relationship diagram with no manual input.
Connected tables go through three simulated-annealing phases over the same
force model (elliptical repulsion plus edge springs):

1. Topology - full connection strength, weak separation; tables cluster by
   connectivity
2. Spacing - separation strength ramps up every iteration while springs
   stay constant, making room without losing the clusters
3. Separation - strong separation, reduced springs; refuses to settle while
   overlaps remain by re-heating, and falls back to direct emergency
   separation late in the phase

Velocities are cut to 10% between phases. After phase 3 any remaining
overlaps are forced apart and the connected subgraph is fitted into the
canvas below a fixed row of unconnected tables.

The run is an explicit stage sequence; every stage handler takes and
returns the LayoutState. Diagnostics are published as events to observers
(see events.py). A layout is always produced, even when overlaps survive.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .boundary import normalize_boundaries, round_half_up
from .config import LayoutConfig, PhaseConfig
from .events import (
    BoundaryNormalized,
    EmergencySeparation,
    IterationCompleted,
    LayoutCancelled,
    LayoutEvent,
    LayoutObserver,
    LayoutStarted,
    OverlapsRemaining,
    PhaseCompleted,
    PhaseStarted,
    TemperatureReset,
)
from .forces import accumulate_forces, integrate
from .initial import classify_connectivity, generate_initial_layout, layout_unconnected
from .overlap import count_overlaps, emergency_separate, find_overlaps, log_overlapping_tables
from .state import LayoutEdge, LayoutNode, LayoutState

logger = logging.getLogger(__name__)

# Velocity retained across a phase boundary
COOLDOWN_FACTOR = 0.1


class LayoutStage(Enum):
    """Stages of a layout run."""
    PHASE1 = "phase1"
    COOLDOWN = "cooldown"
    PHASE2 = "phase2"
    PHASE3 = "phase3"
    EMERGENCY_FALLBACK = "emergency_fallback"
    BOUNDARY_NORMALIZE = "boundary_normalize"
    DONE = "done"


STAGE_SEQUENCE: Tuple[LayoutStage, ...] = (
    LayoutStage.PHASE1,
    LayoutStage.COOLDOWN,
    LayoutStage.PHASE2,
    LayoutStage.COOLDOWN,
    LayoutStage.PHASE3,
    LayoutStage.EMERGENCY_FALLBACK,
    LayoutStage.BOUNDARY_NORMALIZE,
    LayoutStage.DONE,
)


@dataclass
class PhaseReport:
    """Summary of one annealing phase."""
    stage: str
    iterations: int = 0
    converged: bool = False
    movement: float = 0.0
    temperature: float = 0.0
    resets: int = 0
    emergency_iterations: int = 0


@dataclass
class LayoutResult:
    """Final output of a layout run."""
    positions: Dict[str, Tuple[int, int]] = field(default_factory=dict)
    connected: List[str] = field(default_factory=list)
    unconnected: List[str] = field(default_factory=list)
    phases: Dict[str, PhaseReport] = field(default_factory=dict)
    remaining_overlaps: List[Tuple[str, str]] = field(default_factory=list)
    scale: float = 1.0
    cancelled: bool = False

    @property
    def overlap_free(self) -> bool:
        return not self.remaining_overlaps


class ThreePhaseLayout:
    """
    Run the three-phase layout for one set of tables and relationships.

    Args:
        nodes: Tables with their footprints
        edges: Relationships; edges naming unknown tables are dropped
        config: Phase and canvas parameters
        rng: Random source for the initial jitter (seed it for reproducible runs)
        observers: Callables receiving LayoutEvent instances
        should_cancel: Polled once per iteration; when it returns True the
            remaining iterations are skipped but a layout is still produced
    """

    def __init__(
        self,
        nodes: Iterable[LayoutNode],
        edges: Iterable[LayoutEdge] = (),
        config: Optional[LayoutConfig] = None,
        rng: Optional[random.Random] = None,
        observers: Sequence[LayoutObserver] = (),
        should_cancel: Optional[Callable[[], bool]] = None,
    ):
        self.config = config or LayoutConfig()
        self.rng = rng or random.Random()
        self.observers = list(observers)
        self.should_cancel = should_cancel

        unique: Dict[str, LayoutNode] = {}
        for node in nodes:
            unique.setdefault(node.name, node)
        self.nodes = list(unique.values())
        self.edges = list(edges)

        names = [node.name for node in self.nodes]
        self.connected, self.unconnected = classify_connectivity(names, self.edges)

        self._result = LayoutResult(
            connected=list(self.connected),
            unconnected=list(self.unconnected),
        )
        self._cancelled = False

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def run(self) -> LayoutResult:
        """Execute every stage and return the final positions."""
        canvas = self.config.canvas
        by_name = {node.name: node for node in self.nodes}
        state = LayoutState.from_nodes(
            [by_name[name] for name in self.connected], self.edges
        )

        self._emit(LayoutStarted(
            stage="layout",
            connected=len(self.connected),
            unconnected=len(self.unconnected),
            edges=len(state.edges),
        ))

        for name, (x, y) in layout_unconnected(self.unconnected, canvas).items():
            self._result.positions[name] = (round_half_up(x), round_half_up(y))

        generate_initial_layout(state, canvas, self.rng)

        handlers = {
            LayoutStage.PHASE1: self._run_phase1,
            LayoutStage.COOLDOWN: self._cooldown,
            LayoutStage.PHASE2: self._run_phase2,
            LayoutStage.PHASE3: self._run_phase3,
            LayoutStage.EMERGENCY_FALLBACK: self._emergency_fallback,
            LayoutStage.BOUNDARY_NORMALIZE: self._normalize,
        }
        for stage in STAGE_SEQUENCE:
            if stage is LayoutStage.DONE:
                break
            state = handlers[stage](state)

        self._result.cancelled = self._cancelled
        return self._result

    def _emit(self, event: LayoutEvent):
        for observer in self.observers:
            observer(event)

    def _check_cancel(self, stage: LayoutStage, iteration: int) -> bool:
        if self._cancelled:
            return True
        if self.should_cancel is not None and self.should_cancel():
            self._cancelled = True
            self._emit(LayoutCancelled(stage=stage.value, iteration=iteration))
            return True
        return False

    # ------------------------------------------------------------------
    # Stage handlers
    # ------------------------------------------------------------------

    def _run_phase1(self, state: LayoutState) -> LayoutState:
        """Topology: springs dominate, weak constant separation."""
        phase = self.config.phase1
        self._simulate(
            state,
            LayoutStage.PHASE1,
            phase,
            separation=lambda iteration: (phase.separation_strength, None),
            force_multiplier=1.0,
            ideal_edge_length=phase.ideal_edge_length,
        )
        return state

    def _cooldown(self, state: LayoutState) -> LayoutState:
        """Keep only a residual share of momentum for the next phase."""
        state.scale_velocities(COOLDOWN_FACTOR)
        return state

    def _run_phase2(self, state: LayoutState) -> LayoutState:
        """Spacing: separation ramps up multiplicatively each iteration."""
        phase = self.config.phase2
        multiplier = [1.0]

        def separation(iteration: int) -> Tuple[float, Optional[float]]:
            multiplier[0] = min(
                multiplier[0] * phase.separation_ramp_rate,
                phase.separation_max_multiplier,
            )
            return phase.separation_strength * multiplier[0], multiplier[0]

        self._simulate(
            state,
            LayoutStage.PHASE2,
            phase,
            separation=separation,
            force_multiplier=self.config.ellipse.separation_force_multiplier,
            ideal_edge_length=phase.ideal_edge_length,
        )
        return state

    def _simulate(
        self,
        state: LayoutState,
        stage: LayoutStage,
        phase: PhaseConfig,
        separation: Callable[[int], Tuple[float, Optional[float]]],
        force_multiplier: float,
        ideal_edge_length: float,
    ) -> PhaseReport:
        """Annealing loop shared by phases 1 and 2."""
        report = PhaseReport(stage=stage.value, temperature=phase.initial_temperature)
        self._result.phases[stage.value] = report
        if len(state) == 0:
            report.converged = True
            return report

        temperature = phase.initial_temperature
        self._emit(PhaseStarted(stage=stage.value, temperature=temperature))
        min_y = self.config.canvas.min_connected_y

        for iteration in range(phase.max_iterations):
            if self._check_cancel(stage, iteration):
                break

            strength, multiplier = separation(iteration)
            fxs, fys = accumulate_forces(
                state, strength, force_multiplier,
                phase.connection_strength, ideal_edge_length, self.config.ellipse,
            )
            movement = integrate(state, fxs, fys, temperature, phase, min_y)
            temperature *= phase.cooling_rate

            report.iterations = iteration + 1
            report.movement = movement
            report.temperature = temperature
            self._emit(IterationCompleted(
                stage=stage.value,
                iteration=iteration,
                temperature=temperature,
                movement=movement,
                max_speed=state.max_speed(),
                max_velocity=phase.max_velocity,
                separation_multiplier=multiplier,
            ))

            if movement < phase.convergence_threshold or temperature < phase.min_temperature:
                report.converged = True
                break

        self._emit(PhaseCompleted(
            stage=stage.value,
            iterations=report.iterations,
            converged=report.converged,
            movement=report.movement,
            temperature=report.temperature,
        ))
        return report

    def _run_phase3(self, state: LayoutState) -> LayoutState:
        """Separation: strong repulsion, re-heat while overlaps remain."""
        phase = self.config.phase3
        ellipse = self.config.ellipse
        stage = LayoutStage.PHASE3
        report = PhaseReport(stage=stage.value, temperature=phase.initial_temperature)
        self._result.phases[stage.value] = report
        if len(state) == 0:
            report.converged = True
            return state

        temperature = phase.initial_temperature
        self._emit(PhaseStarted(stage=stage.value, temperature=temperature))
        min_y = self.config.canvas.min_connected_y
        emergency_after = phase.max_iterations * phase.emergency_trigger_fraction
        # Springs keep phase 2's rest length
        ideal_edge_length = self.config.phase2.ideal_edge_length

        for iteration in range(phase.max_iterations):
            if self._check_cancel(stage, iteration):
                break

            # Counted before forces move anything; drives termination only
            overlap_count = count_overlaps(state, phase.overlap_tolerance)

            fxs, fys = accumulate_forces(
                state, phase.separation_strength, ellipse.phase3_force_multiplier,
                phase.connection_strength, ideal_edge_length, ellipse,
            )
            movement = integrate(state, fxs, fys, temperature, phase, min_y)
            temperature *= phase.cooling_rate

            report.iterations = iteration + 1
            report.movement = movement
            report.temperature = temperature
            self._emit(IterationCompleted(
                stage=stage.value,
                iteration=iteration,
                temperature=temperature,
                movement=movement,
                max_speed=state.max_speed(),
                max_velocity=phase.max_velocity,
                overlaps=overlap_count,
            ))

            # A cold but still moving layout keeps iterating
            if overlap_count == 0 and movement < phase.convergence_threshold:
                report.converged = True
                break

            if (overlap_count > 0 and temperature < phase.min_temperature
                    and report.resets < phase.max_temperature_resets):
                temperature = phase.initial_temperature * phase.temperature_reset_factor
                report.resets += 1
                self._emit(TemperatureReset(
                    stage=stage.value,
                    iteration=iteration,
                    reset=report.resets,
                    overlaps=overlap_count,
                    temperature=temperature,
                ))

            if overlap_count > 0 and iteration > emergency_after:
                separated = emergency_separate(state, ellipse, phase, max_passes=1)
                report.emergency_iterations += 1
                self._emit(EmergencySeparation(
                    stage=stage.value,
                    iteration=iteration,
                    overlaps=overlap_count,
                    moved_pairs=len(separated.moves),
                    passes=separated.passes,
                ))

        report.temperature = temperature
        self._emit(PhaseCompleted(
            stage=stage.value,
            iterations=report.iterations,
            converged=report.converged,
            movement=report.movement,
            temperature=temperature,
            resets=report.resets,
        ))
        return state

    def _emergency_fallback(self, state: LayoutState) -> LayoutState:
        """Force apart whatever phase 3 left overlapping."""
        phase = self.config.phase3
        stage = LayoutStage.EMERGENCY_FALLBACK
        remaining = find_overlaps(state, phase.overlap_tolerance)
        if not remaining:
            return state

        report = self._result.phases.get(LayoutStage.PHASE3.value)
        logger.warning(
            "Phase 3 left %d overlapping table pairs after %d iterations and %d resets; "
            "applying emergency separation",
            len(remaining),
            report.iterations if report else 0,
            report.resets if report else 0,
        )
        if logger.isEnabledFor(logging.DEBUG):
            log_overlapping_tables(state, phase.overlap_tolerance)
        self._emit(OverlapsRemaining(stage=stage.value, pairs=list(remaining)))

        separated = emergency_separate(
            state, self.config.ellipse, phase, max_passes=phase.emergency_max_passes
        )
        self._emit(EmergencySeparation(
            stage=stage.value,
            overlaps=len(remaining),
            moved_pairs=len(separated.moves),
            passes=separated.passes,
        ))

        self._result.remaining_overlaps = list(separated.remaining)
        if separated.remaining:
            logger.warning(
                "%d table pairs still overlap after %d emergency passes",
                len(separated.remaining), separated.passes,
            )
            self._emit(OverlapsRemaining(stage=stage.value, pairs=list(separated.remaining)))
        return state

    def _normalize(self, state: LayoutState) -> LayoutState:
        """Fit connected tables into the canvas; the unconnected row stays put."""
        positions, scale = normalize_boundaries(state, self.config.canvas)
        self._result.positions.update(positions)
        self._result.scale = scale
        self._emit(BoundaryNormalized(
            stage=LayoutStage.BOUNDARY_NORMALIZE.value,
            tables=len(self._result.positions),
            scale=scale,
        ))
        return state


def compute_layout(
    nodes: Iterable[LayoutNode],
    edges: Iterable[LayoutEdge] = (),
    config: Optional[LayoutConfig] = None,
    seed: Optional[int] = None,
    observers: Sequence[LayoutObserver] = (),
) -> LayoutResult:
    """Convenience wrapper: run the three-phase layout with an optional seed."""
    rng = random.Random(seed) if seed is not None else None
    return ThreePhaseLayout(nodes, edges, config=config, rng=rng, observers=observers).run()
