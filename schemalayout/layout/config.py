"""
Layout Engine Configuration

Phase parameters for the three-phase force-directed layout, the elliptical
force field, and the canvas geometry. Defaults are tuned for tables a few
hundred canvas pixels wide.

Overrides can be loaded from YAML:
```yaml
phase1:
  max_iterations: 120
phase3:
  overlap_tolerance: 40
canvas:
  width: 24000
```
"""

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


@dataclass
class PhaseConfig:
    """Parameters shared by every simulated-annealing phase."""
    connection_strength: float = 1.0
    separation_strength: float = 0.04
    ideal_edge_length: float = 700.0
    max_iterations: int = 80
    cooling_rate: float = 0.96
    initial_temperature: float = 100.0
    min_temperature: float = 1.0
    damping: float = 0.85
    max_velocity: float = 88.0
    convergence_threshold: float = 5.0


@dataclass
class SpacingPhaseConfig(PhaseConfig):
    """Phase 2: separation strength ramps up every iteration."""
    separation_strength: float = 0.04  # Base strength, same as phase 1 end
    separation_ramp_rate: float = 1.08
    separation_max_multiplier: float = 40.0
    max_iterations: int = 200
    cooling_rate: float = 0.98
    initial_temperature: float = 80.0
    min_temperature: float = 0.2
    damping: float = 0.65
    max_velocity: float = 175.0
    convergence_threshold: float = 0.5


@dataclass
class SeparationPhaseConfig(PhaseConfig):
    """Phase 3: aggressive overlap elimination with temperature resets."""
    connection_strength: float = 0.6
    separation_strength: float = 12.0
    max_iterations: int = 300
    cooling_rate: float = 0.99
    initial_temperature: float = 100.0
    min_temperature: float = 0.05
    damping: float = 0.55
    max_velocity: float = 300.0
    convergence_threshold: float = 0.125
    overlap_tolerance: float = 50.0
    temperature_reset_factor: float = 0.8
    max_temperature_resets: int = 5
    emergency_trigger_fraction: float = 0.8  # Fraction of max_iterations
    emergency_max_passes: int = 200  # Passes for the final fallback
    emergency_padding: float = 10.0


@dataclass
class EllipseConfig:
    """Elliptical repulsion field parameters."""
    min_table_distance: float = 200.0
    collision_multiplier: float = 15.0
    force_ramp_distance: float = 2.5  # Multiple of the minimum separation
    separation_force_multiplier: float = 3.0  # Phase 2
    phase3_force_multiplier: float = 5.0
    repulsion_constant: float = 150000.0


@dataclass
class CanvasConfig:
    """Canvas geometry and the fixed row of unconnected tables."""
    width: float = 20000.0
    height: float = 15000.0
    unconnected_row_height: float = 375.0
    unconnected_spacing: float = 750.0
    unconnected_start_y: float = 200.0
    boundary_padding: float = 300.0
    row_clearance: float = 50.0  # Connected tables stay this far below the row
    center_offset_y: float = 750.0  # Initial ring centre below the row
    initial_radius: float = 500.0
    radius_step: float = 75.0
    jitter: float = 200.0  # Full width of the uniform jitter window

    @property
    def min_connected_y(self) -> float:
        """Lowest y a connected table may take during simulation."""
        return self.unconnected_row_height + self.row_clearance


@dataclass
class LayoutConfig:
    """Complete configuration for a layout run."""
    phase1: PhaseConfig = field(default_factory=PhaseConfig)
    phase2: SpacingPhaseConfig = field(default_factory=SpacingPhaseConfig)
    phase3: SeparationPhaseConfig = field(default_factory=SeparationPhaseConfig)
    ellipse: EllipseConfig = field(default_factory=EllipseConfig)
    canvas: CanvasConfig = field(default_factory=CanvasConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "LayoutConfig":
        """Build a config from nested override sections.

        Raises:
            ValueError: On unknown sections or keys
        """
        config = cls()
        if not data:
            return config
        if not isinstance(data, dict):
            raise ValueError("Layout configuration must be a mapping")

        section_names = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - section_names)
        if unknown:
            raise ValueError(f"Unknown layout configuration sections: {unknown}")

        for name, overrides in data.items():
            current = getattr(config, name)
            setattr(config, name, _apply_overrides(name, current, overrides))
        return config


def _apply_overrides(section: str, current, overrides: Optional[Dict[str, Any]]):
    """Return a copy of a section dataclass with overrides applied."""
    if not overrides:
        return current
    if not isinstance(overrides, dict):
        raise ValueError(f"Section '{section}' must be a mapping")

    valid = {f.name: f for f in fields(current)}
    unknown = sorted(set(overrides) - set(valid))
    if unknown:
        raise ValueError(f"Unknown keys in section '{section}': {unknown}")

    coerced = {}
    for key, value in overrides.items():
        default = getattr(current, key)
        try:
            # int fields stay int so iteration counts remain usable in range()
            coerced[key] = int(value) if isinstance(default, int) else float(value)
        except (TypeError, ValueError) as e:
            raise ValueError(
                f"Invalid value for '{section}.{key}': {value!r} (expected a number)"
            ) from e
    return replace(current, **coerced)


def load_layout_config(path: Union[str, Path]) -> LayoutConfig:
    """Load layout configuration overrides from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is a symlink or has invalid content
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Layout configuration file not found: {config_path}")

    # Refuse symlinks so a config path cannot be redirected elsewhere
    if config_path.is_symlink():
        raise ValueError(f"Layout configuration file cannot be a symlink: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise ValueError(f"Failed to parse layout configuration {config_path}: {e}") from e

    return LayoutConfig.from_dict(data)
