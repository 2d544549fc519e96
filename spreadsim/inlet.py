"""
Inlet Sampler
=============
Entry point of a granule onto the spinning disk: a uniform random point
inside the circular inlet orifice, converted to vane-local coordinates.

Vane-local frame:
  rv = distance from the disk axis
  ap = asin(rlv / rv)   angle between the radius vector and the vane axis
  rp = rv · cos(ap)     coordinate along the vane axis
  hp = θ − ap           angular position of the vane axis (θ = polar angle)

The granule rides on the trailing side of the vane axis, at perpendicular
offset rlv (the vane pitch radius).
"""

import numpy as np
from dataclasses import dataclass
from typing import Tuple

from .config import SpreaderConfig
from .errors import GeometryError


@dataclass(frozen=True)
class EntryPoint:
    """Granule state when it first touches the vane."""
    x: float
    y: float
    rv: float
    ap: float
    rp: float
    hp: float
    dr: float = 0.0


def sample_inlet_point(config: SpreaderConfig, rng: np.random.Generator) -> Tuple[float, float]:
    """Uniform random point (x, y) inside the inlet orifice."""
    r = config.inlet_radius * np.sqrt(rng.random())
    phi = 2.0 * np.pi * rng.random()
    return (config.inlet_center_x + r * np.cos(phi),
            config.inlet_center_y + r * np.sin(phi))


def entry_from_point(x: float, y: float, config: SpreaderConfig) -> EntryPoint:
    """
    Convert an absolute entry point to vane-local coordinates.

    Raises GeometryError when the point lies inside the vane pitch radius
    (no vane passes through it) or beyond the vane tip.
    """
    rv = float(np.hypot(x, y))
    rlv = config.vane_pitch_radius
    if rv < rlv or rv == 0.0:
        raise GeometryError(
            f"Entry radius {rv:.4f} m inside vane pitch radius {rlv:.4f} m")
    if rv >= config.vane_tip_radius:
        raise GeometryError(
            f"Entry radius {rv:.4f} m beyond vane tip radius {config.vane_tip_radius:.4f} m")

    ap = float(np.arcsin(rlv / rv))
    theta = float(np.arctan2(y, x))
    return EntryPoint(x=float(x), y=float(y), rv=rv, ap=ap,
                      rp=rv * np.cos(ap), hp=theta - ap)


def entry_from_vane(rv: float, hp: float, config: SpreaderConfig) -> EntryPoint:
    """Entry point given its distance from the axis and the vane angle hp (rad)."""
    if rv <= 0.0 or rv < config.vane_pitch_radius:
        raise GeometryError(
            f"Entry radius {rv:.4f} m inside vane pitch radius {config.vane_pitch_radius:.4f} m")
    theta = hp + np.arcsin(config.vane_pitch_radius / rv)
    return entry_from_point(rv * np.cos(theta), rv * np.sin(theta), config)


def sample_entry(config: SpreaderConfig, rng: np.random.Generator) -> EntryPoint:
    x, y = sample_inlet_point(config, rng)
    return entry_from_point(x, y, config)
