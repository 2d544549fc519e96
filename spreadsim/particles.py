"""
Granule Definition
==================
A single fertilizer granule: the unit of output of a simulation run.

Mass and frontal area are derived from the diameter:

    mass = ρ · (π/3) · d³
    area = π · (d/2)²

The π/3 coefficient follows the analytical spreader model; the geometric
sphere volume would use π/6. Sphericity only enters the drag correlation,
never the frontal area.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Optional

from .config import BlendComponent


def granule_mass(diameter: float, density: float) -> float:
    """Granule mass (kg) for a diameter (m) and density (kg/m³)."""
    return density * (np.pi / 3.0) * diameter ** 3


def frontal_area(diameter: float) -> float:
    """Cross-sectional area (m²) presented to the air flow."""
    return np.pi * (diameter / 2.0) ** 2


@dataclass
class Granule:
    """
    One granule drawn from a blend component.
    """
    component: str
    diameter: float                   # m
    density: float                    # kg/m³
    sphericity: float = 1.0

    # Written back by the simulation driver
    landing_x: Optional[float] = field(default=None, compare=False)
    landing_y: Optional[float] = field(default=None, compare=False)
    failure: Optional[str] = field(default=None, compare=False)

    def __post_init__(self):
        if not self.diameter > 0:
            raise ValueError(f"Granule diameter must be positive, got {self.diameter!r}")

    @property
    def mass(self) -> float:
        """Mass (kg)."""
        return granule_mass(self.diameter, self.density)

    @property
    def area(self) -> float:
        """Frontal area (m²)."""
        return frontal_area(self.diameter)

    @classmethod
    def from_component(cls, component: BlendComponent, diameter: float) -> 'Granule':
        return cls(
            component=component.name,
            diameter=diameter,
            density=component.density,
            sphericity=component.sphericity,
        )

    @property
    def landed(self) -> bool:
        return self.landing_x is not None and self.failure is None

    @property
    def diameter_mm(self) -> float:
        """Diameter in mm."""
        return self.diameter * 1000
