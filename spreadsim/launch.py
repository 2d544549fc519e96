"""
Launch Conditions
=================
Converts the vane-exit state into the initial position and velocity of the
ballistic flight.

At the tip radius R the vane axis makes the angle alv = asin(rlv / R) with
the radius vector. The absolute horizontal velocity is the along-vane
velocity plus the disk tip velocity ω·R:

    v_r = dr · cos(alv)                 (radial)
    v_t = ω·R + dr · sin(alv)           (along the rotation)
    hout = atan2(v_r, v_t)              horizontal outlet angle
    v    = v_r / sin(hout)              horizontal speed

The rising vane path lifts the granule: the mean vertical outlet angle is

    muzout = atan(tan z · sin(hout) / cos(alv))

and the actual angle zout is drawn from N(muzout, σ) to model the scatter
observed on real spreaders.

Coordinate system:
  x, y = disk plane (absolute, disk turning clockwise seen from above)
  z    = height above ground (up positive)
"""

import numpy as np
from dataclasses import dataclass

from .config import SpreaderConfig
from .disk import DiskState
from .errors import InvalidLaunchGeometry

DEGENERATE_TOLERANCE = 1e-9


@dataclass(frozen=True)
class LaunchConditions:
    """
    Initial state of the ballistic flight.
    """
    x: float
    y: float
    height: float                    # m above ground
    speed: float                     # m/s  horizontal outlet speed v
    outlet_speed: float              # m/s  3-D outlet speed vout
    direction_deg: float             # horizontal trajectory angle
    hout_deg: float                  # horizontal outlet angle
    zout_deg: float                  # vertical outlet angle (sampled)
    muzout_deg: float                # mean vertical outlet angle

    def initial_velocity_vector(self) -> np.ndarray:
        """
        Convert outlet speed + angles to [vx, vy, vz] vector.
        """
        direction = np.radians(self.direction_deg)
        zout = np.radians(self.zout_deg)

        vx = self.speed * np.cos(direction)
        vy = self.speed * np.sin(direction)
        vz = self.outlet_speed * np.sin(zout)
        return np.array([vx, vy, vz])

    def initial_position(self) -> np.ndarray:
        """Starting position [x, y, z]."""
        return np.array([self.x, self.y, self.height])


def mean_vertical_angle(hout: float, alv: float, tilt: float) -> float:
    """Mean vertical outlet angle (rad) for a vane rising at ``tilt``."""
    return float(np.arctan(np.tan(tilt) * np.sin(hout) / np.cos(alv)))


def compute_launch_conditions(exit_state: DiskState, config: SpreaderConfig,
                              rng: np.random.Generator = None,
                              zout_deg: float = None) -> LaunchConditions:
    """
    Launch state from the vane-exit state.

    Parameters
    ----------
    exit_state : DiskState
        Refined exit state (rv equal to the tip radius)
    config : SpreaderConfig
    rng : np.random.Generator
        Stream for the vertical-angle scatter; required unless ``zout_deg``
        is given
    zout_deg : float, optional
        Fixed vertical outlet angle (degrees), bypassing the scatter draw

    Raises
    ------
    InvalidLaunchGeometry
        Degenerate outlet angles or non-finite launch velocity.
    """
    R = config.vane_tip_radius
    alv = np.arcsin(config.vane_pitch_radius / R)
    hvane = np.degrees(exit_state.hp + alv)

    v_r = exit_state.dr * np.cos(alv)
    v_t = config.omega * R + exit_state.dr * np.sin(alv)
    hout = np.arctan2(v_r, v_t)
    if abs(np.sin(hout)) < DEGENERATE_TOLERANCE:
        raise InvalidLaunchGeometry(
            f"Horizontal outlet angle {np.degrees(hout):.3g}° is degenerate")
    v = v_r / np.sin(hout)

    muzout = mean_vertical_angle(hout, alv, config.vane_tilt)
    if zout_deg is not None:
        zout = np.radians(zout_deg)
    elif rng is None:
        raise ValueError("A random generator is required to sample the vertical outlet angle")
    else:
        zout = rng.normal(muzout, np.radians(config.vertical_angle_sd))

    if np.cos(zout) <= DEGENERATE_TOLERANCE:
        raise InvalidLaunchGeometry(
            f"Vertical outlet angle {np.degrees(zout):.3f}° is not within (-90°, 90°)")
    vout = v / np.cos(zout)

    launch = LaunchConditions(
        x=exit_state.x,
        y=exit_state.y,
        height=config.launch_height,
        speed=float(v),
        outlet_speed=float(vout),
        direction_deg=float(hvane + np.degrees(hout) - 90.0),
        hout_deg=float(np.degrees(hout)),
        zout_deg=float(np.degrees(zout)),
        muzout_deg=float(np.degrees(muzout)),
    )
    if not np.all(np.isfinite(launch.initial_velocity_vector())):
        raise InvalidLaunchGeometry("Launch velocity is not finite")
    return launch
