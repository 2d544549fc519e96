"""
Aerodynamic Drag Model
======================
Reynolds-dependent drag of a non-spherical granule in still air.

Drag coefficient correlation for granular fertilizer (Stokes term plus a
shape term decaying with sphericity ψ):

    Cd = 30 / Re + 67.289 · exp(−5.03 · ψ)
    Re = d · |v| · ρ_air / μ_air

Drag enters the equations of motion through the intensity coefficient

    Ka = Cd · A · ρ_air / (2 m)        a_drag = −Ka · |v| · v

Ka is zero when Re is zero: no relative air flow (|v| = 0) or no air
(ρ_air = 0), in which case the flight is a pure projectile motion.
"""

import numpy as np

from .config import SpreaderConfig
from .particles import Granule


# Shape term of the correlation
SHAPE_COEFF = 67.289
SHAPE_EXPONENT = -5.03
STOKES_COEFF = 30.0


def reynolds_number(diameter: float, speed: float, air_density: float,
                    air_viscosity: float) -> float:
    """Particle Reynolds number."""
    return diameter * speed * air_density / air_viscosity


def drag_coefficient(reynolds: float, sphericity: float) -> float:
    """Cd for a granule of the given sphericity; requires Re > 0."""
    if reynolds <= 0:
        raise ValueError(f"Drag coefficient undefined for Re={reynolds!r}")
    return STOKES_COEFF / reynolds + SHAPE_COEFF * np.exp(SHAPE_EXPONENT * sphericity)


def drag_intensity(granule: Granule, speed: float, config: SpreaderConfig) -> float:
    """
    Drag intensity coefficient Ka (1/m) at the given speed.
    """
    re = reynolds_number(granule.diameter, speed, config.air_density, config.air_viscosity)
    if re <= 0:
        return 0.0
    cd = drag_coefficient(re, granule.sphericity)
    return cd * granule.area * config.air_density / (2.0 * granule.mass)


def acceleration(velocity: np.ndarray, granule: Granule,
                 config: SpreaderConfig) -> np.ndarray:
    """
    Total acceleration [ax, ay, az] (m/s²): drag opposing motion + gravity.
    """
    speed = np.linalg.norm(velocity)
    ka = drag_intensity(granule, speed, config)
    acc = -ka * speed * velocity
    acc[2] -= config.gravity
    return acc
