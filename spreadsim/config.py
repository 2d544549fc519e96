"""
Machine, Environment & Blend Configuration
==========================================
Immutable configuration shared read-only by every simulation stage:

  - SpreaderConfig: disk/vane geometry, inlet orifice, air properties,
    vertical outlet-angle scatter and integration settings
  - BlendComponent / Blend: fertilizer components and their mass shares

Units are SI throughout except the disk speed (rev/min), the vane tilt
and scatter angles (degrees) and the size-table diameters, which are
converted with ``diameter_scale`` (mm → m by default).
"""

import numpy as np
from dataclasses import dataclass, fields
from typing import Iterable, Mapping, Optional, Tuple

from .errors import ConfigurationError


# ── Environment Constants ─────────────────────────────────────────────────
GRAVITY              = 9.81        # m/s²
AIR_DENSITY          = 1.225       # kg/m³  (sea level, 15 °C)
AIR_VISCOSITY        = 1.81e-5     # Pa·s   dynamic viscosity of air

# ── Reference Spreader (dual-vane disk, 810 rpm) ──────────────────────────
DISK_SPEED_RPM       = 810.0       # rev/min
VANE_PITCH_RADIUS    = 0.05        # m  offset of the vane axis from the disk axis
VANE_TIP_RADIUS      = 0.395       # m
VANE_TILT_DEG        = 13.5        # degrees
FRICTION             = 0.3         # granule/vane and granule/disk
LAUNCH_HEIGHT        = 0.8         # m  vane height above ground
VERTICAL_ANGLE_SD    = 4.0         # degrees

# ── Numerics ──────────────────────────────────────────────────────────────
TIME_STEP            = 1e-3        # s
FRACTION_TOLERANCE   = 1e-6
FLIGHT_METHODS       = ('semi_implicit', 'constant_acceleration')


@dataclass(frozen=True)
class SpreaderConfig:
    """
    Geometry, environment and integration settings for one run.
    """
    disk_speed_rpm: float = DISK_SPEED_RPM
    vane_pitch_radius: float = VANE_PITCH_RADIUS
    vane_tip_radius: float = VANE_TIP_RADIUS
    vane_tilt_deg: float = VANE_TILT_DEG
    friction: float = FRICTION

    # Inlet orifice: circle in the absolute disk frame
    inlet_radius: float = 0.04        # m
    inlet_center_x: float = 0.12      # m
    inlet_center_y: float = 0.0       # m

    launch_height: float = LAUNCH_HEIGHT
    air_density: float = AIR_DENSITY
    air_viscosity: float = AIR_VISCOSITY
    gravity: float = GRAVITY
    vertical_angle_sd: float = VERTICAL_ANGLE_SD

    vane_dt: float = TIME_STEP
    flight_dt: float = TIME_STEP
    flight_method: str = 'semi_implicit'
    disk_max_steps: int = 10_000
    flight_max_steps: int = 100_000

    diameter_scale: float = 1e-3      # m per size-table unit (mm)
    seed: Optional[int] = None

    def __post_init__(self):
        positive = ('disk_speed_rpm', 'vane_tip_radius', 'inlet_radius',
                    'launch_height', 'air_viscosity', 'gravity',
                    'vane_dt', 'flight_dt', 'disk_max_steps',
                    'flight_max_steps', 'diameter_scale')
        for name in positive:
            if not getattr(self, name) > 0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)!r}")

        non_negative = ('vane_pitch_radius', 'friction', 'air_density',
                        'vertical_angle_sd')
        for name in non_negative:
            if not getattr(self, name) >= 0:
                raise ConfigurationError(f"{name} must be non-negative, got {getattr(self, name)!r}")

        if self.vane_pitch_radius >= self.vane_tip_radius:
            raise ConfigurationError(
                f"vane_pitch_radius ({self.vane_pitch_radius}) must be smaller "
                f"than vane_tip_radius ({self.vane_tip_radius})"
            )
        if not 0.0 <= self.vane_tilt_deg < 90.0:
            raise ConfigurationError(
                f"vane_tilt_deg must lie in [0, 90), got {self.vane_tilt_deg}"
            )
        if self.flight_method not in FLIGHT_METHODS:
            raise ConfigurationError(
                f"flight_method must be one of {FLIGHT_METHODS}, got {self.flight_method!r}"
            )

    @property
    def omega(self) -> float:
        """Disk angular speed (rad/s)."""
        return self.disk_speed_rpm * 2.0 * np.pi / 60.0

    @property
    def vane_tilt(self) -> float:
        """Vane tilt angle (rad)."""
        return np.radians(self.vane_tilt_deg)

    @property
    def exit_rp(self) -> float:
        """Vane-local coordinate at which the granule reaches the tip radius."""
        return np.sqrt(self.vane_tip_radius ** 2 - self.vane_pitch_radius ** 2)

    @classmethod
    def from_dict(cls, options: Mapping) -> 'SpreaderConfig':
        """Build a config from a plain mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(options) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration options: {sorted(unknown)}")
        return cls(**dict(options))


@dataclass(frozen=True)
class BlendComponent:
    """One fertilizer in the blend."""
    name: str
    density: float                    # kg/m³
    sphericity: float = 1.0           # (0, 1]
    weight_fraction: float = 1.0      # share of the total injected mass

    def __post_init__(self):
        if not self.density > 0:
            raise ConfigurationError(f"{self.name}: density must be positive")
        if not 0.0 < self.sphericity <= 1.0:
            raise ConfigurationError(f"{self.name}: sphericity must lie in (0, 1]")
        if self.weight_fraction < 0:
            raise ConfigurationError(f"{self.name}: negative weight fraction")


@dataclass(frozen=True)
class Blend:
    """
    Components of a blend and the total mass injected onto the disk.
    """
    components: Tuple[BlendComponent, ...]
    total_mass: float                 # kg

    def __post_init__(self):
        object.__setattr__(self, 'components', tuple(self.components))
        if not self.components:
            raise ConfigurationError("A blend needs at least one component")
        if not self.total_mass > 0:
            raise ConfigurationError(f"total_mass must be positive, got {self.total_mass!r}")

        names = [c.name for c in self.components]
        if len(set(names)) != len(names):
            raise ConfigurationError(f"Duplicate component names in blend: {names}")

        total = sum(c.weight_fraction for c in self.components)
        if abs(total - 1.0) > FRACTION_TOLERANCE:
            raise ConfigurationError(
                f"Weight fractions must sum to 1.0, got {total:.6f}"
            )

    def target_mass(self, component: BlendComponent) -> float:
        """Mass (kg) to sample for ``component``."""
        return self.total_mass * component.weight_fraction

    @classmethod
    def from_records(cls, records: Iterable[Mapping], total_mass: float) -> 'Blend':
        """Build a blend from mappings with BlendComponent field names."""
        return cls(tuple(BlendComponent(**dict(r)) for r in records), total_mass)
