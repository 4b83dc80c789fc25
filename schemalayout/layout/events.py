"""
Structured diagnostics for layout runs.

The engine reports progress as event objects passed to observer callables
instead of writing log lines itself. ``LoggingObserver`` renders events to
the module logger; ``EventRecorder`` keeps them for inspection.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)


@dataclass
class LayoutEvent:
    """Base class for all layout events."""
    stage: str


@dataclass
class LayoutStarted(LayoutEvent):
    connected: int = 0
    unconnected: int = 0
    edges: int = 0


@dataclass
class PhaseStarted(LayoutEvent):
    temperature: float = 0.0


@dataclass
class IterationCompleted(LayoutEvent):
    iteration: int = 0
    temperature: float = 0.0
    movement: float = 0.0
    max_speed: float = 0.0
    max_velocity: float = 0.0
    overlaps: Optional[int] = None  # Phase 3 only
    separation_multiplier: Optional[float] = None  # Phase 2 only


@dataclass
class TemperatureReset(LayoutEvent):
    iteration: int = 0
    reset: int = 0
    overlaps: int = 0
    temperature: float = 0.0


@dataclass
class PhaseCompleted(LayoutEvent):
    iterations: int = 0
    converged: bool = False
    movement: float = 0.0
    temperature: float = 0.0
    resets: int = 0


@dataclass
class EmergencySeparation(LayoutEvent):
    iteration: Optional[int] = None  # None for the post-loop fallback
    overlaps: int = 0
    moved_pairs: int = 0
    passes: int = 0


@dataclass
class OverlapsRemaining(LayoutEvent):
    pairs: List[Tuple[str, str]] = field(default_factory=list)


@dataclass
class BoundaryNormalized(LayoutEvent):
    tables: int = 0
    scale: float = 1.0


@dataclass
class LayoutCancelled(LayoutEvent):
    iteration: int = 0


LayoutObserver = Callable[[LayoutEvent], None]

E = TypeVar("E", bound=LayoutEvent)


class EventRecorder:
    """Observer that stores every event it receives."""

    def __init__(self):
        self.events: List[LayoutEvent] = []

    def __call__(self, event: LayoutEvent):
        self.events.append(event)

    def of_type(self, event_type: Type[E], stage: Optional[str] = None) -> List[E]:
        """Events of one type, optionally limited to one stage."""
        return [
            e for e in self.events
            if isinstance(e, event_type) and (stage is None or e.stage == stage)
        ]


class LoggingObserver:
    """Observer that renders events as log records."""

    def __init__(self, log_every: int = 20):
        self.log_every = log_every

    def __call__(self, event: LayoutEvent):
        if isinstance(event, LayoutStarted):
            logger.info(
                "Auto-layout: %d connected, %d unconnected tables, %d relationships",
                event.connected, event.unconnected, event.edges,
            )
        elif isinstance(event, PhaseStarted):
            logger.info("%s: started (temperature=%.2f)", event.stage, event.temperature)
        elif isinstance(event, IterationCompleted):
            if not logger.isEnabledFor(logging.DEBUG) or event.iteration % self.log_every:
                return
            extra = ""
            if event.separation_multiplier is not None:
                extra = f" separation x{event.separation_multiplier:.2f}"
            if event.overlaps is not None:
                extra = f" overlaps={event.overlaps}"
            logger.debug(
                "%s - iteration %d: temp=%.2f movement=%.2f max_speed=%.2f%s",
                event.stage, event.iteration, event.temperature,
                event.movement, event.max_speed, extra,
            )
        elif isinstance(event, TemperatureReset):
            logger.debug(
                "%s: %d overlaps remain, temperature reset #%d at iteration %d",
                event.stage, event.overlaps, event.reset, event.iteration,
            )
        elif isinstance(event, PhaseCompleted):
            logger.info(
                "%s: %s after %d iterations (movement=%.2f, resets=%d)",
                event.stage,
                "converged" if event.converged else "stopped",
                event.iterations, event.movement, event.resets,
            )
        elif isinstance(event, EmergencySeparation):
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "%s: emergency separation moved %d pairs (%d overlaps, %d passes)",
                    event.stage, event.moved_pairs, event.overlaps, event.passes,
                )
        elif isinstance(event, OverlapsRemaining):
            for a, b in event.pairs:
                logger.debug("  Still overlapping: %s <-> %s", a, b)
        elif isinstance(event, BoundaryNormalized):
            logger.info("Normalized %d tables into canvas (scale %.2f)", event.tables, event.scale)
        elif isinstance(event, LayoutCancelled):
            logger.info("%s: cancelled at iteration %d", event.stage, event.iteration)
