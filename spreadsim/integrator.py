"""
Ballistic Flight Integrator
===========================
Fixed-step integration of the granule flight from the vane exit until it
reaches the ground.

Two stepping methods are available (``SpreaderConfig.flight_method``):

1. **Semi-implicit Euler** (default) - velocity first, then position with
   the updated velocity:

       v_{n+1} = v_n + a_n·dt
       x_{n+1} = x_n + v_{n+1}·dt

   First order; without air the height error grows as ½·g·dt·t.

2. **Constant acceleration** - position from the previous step's velocity
   and acceleration:

       x_{n+1} = x_n + v_n·dt + ½·a_n·dt²
       v_{n+1} = v_n + a_n·dt

   Exact for constant acceleration, so without air it reproduces the
   closed-form parabola to rounding error.

The step that takes z below zero is replaced by the linearly interpolated
ground crossing (z = 0 exactly).

Output: FlightResult dataclass with full state history.
"""

import numpy as np
from dataclasses import dataclass
from typing import List

from .config import SpreaderConfig
from .drag_model import acceleration
from .errors import IntegrationTimeout
from .launch import LaunchConditions
from .particles import Granule


@dataclass(frozen=True)
class FlightState:
    """Snapshot of granule state at one instant."""
    time: float
    vx: float
    vy: float
    vz: float
    speed: float
    x: float
    y: float
    z: float


@dataclass
class FlightResult:
    """Complete flight output; the last sample is the landing point."""
    method: str               # 'semi_implicit' or 'constant_acceleration'
    dt: float

    # Arrays of shape (N,)
    time: np.ndarray
    x: np.ndarray
    y: np.ndarray
    z: np.ndarray
    vx: np.ndarray
    vy: np.ndarray
    vz: np.ndarray
    speed: np.ndarray

    @property
    def landing(self) -> FlightState:
        return FlightState(
            time=float(self.time[-1]),
            vx=float(self.vx[-1]), vy=float(self.vy[-1]), vz=float(self.vz[-1]),
            speed=float(self.speed[-1]),
            x=float(self.x[-1]), y=float(self.y[-1]), z=float(self.z[-1]),
        )

    @property
    def flight_time(self) -> float:
        """Total flight time (s)."""
        return float(self.time[-1])

    @property
    def horizontal_distance(self) -> float:
        """Horizontal distance from the launch point to the landing point (m)."""
        return float(np.hypot(self.x[-1] - self.x[0], self.y[-1] - self.y[0]))

    @property
    def max_height(self) -> float:
        """Maximum height reached (m)."""
        return float(np.max(self.z))


def _record_state(t, pos, vel):
    return t, pos.copy(), vel.copy(), float(np.linalg.norm(vel))


def _step_semi_implicit(pos, vel, acc, dt):
    new_vel = vel + acc * dt
    return pos + new_vel * dt, new_vel


def _step_constant_acceleration(pos, vel, acc, dt):
    return pos + vel * dt + 0.5 * acc * dt ** 2, vel + acc * dt


STEP_METHODS = {
    'semi_implicit': _step_semi_implicit,
    'constant_acceleration': _step_constant_acceleration,
}


def simulate_flight(granule: Granule, launch: LaunchConditions,
                    config: SpreaderConfig) -> FlightResult:
    """
    Integrate a granule's flight until it lands.

    Parameters
    ----------
    granule : Granule
    launch : LaunchConditions
    config : SpreaderConfig
        Provides air properties, gravity, ``flight_method``, ``flight_dt``
        and ``flight_max_steps``

    Raises
    ------
    IntegrationTimeout
        The ground is not reached within ``flight_max_steps`` steps.
    """
    dt = config.flight_dt
    step_fn = STEP_METHODS[config.flight_method]
    pos = launch.initial_position().astype(float)
    vel = launch.initial_velocity_vector().astype(float)

    history: List[tuple] = [_record_state(0.0, pos, vel)]

    for step in range(1, config.flight_max_steps + 1):
        acc = acceleration(vel, granule, config)
        new_pos, new_vel = step_fn(pos, vel, acc, dt)
        elapsed = step * dt

        if new_pos[2] <= 0.0:
            history.append(_interpolate_landing(history[-1], (elapsed, new_pos, new_vel)))
            break

        if not (np.all(np.isfinite(new_pos)) and np.all(np.isfinite(new_vel))):
            raise IntegrationTimeout(f"Flight state became non-finite at t={elapsed:.3f} s")

        pos, vel = new_pos, new_vel
        history.append(_record_state(elapsed, pos, vel))
    else:
        raise IntegrationTimeout(
            f"No ground impact after {config.flight_max_steps} steps "
            f"({config.flight_max_steps * dt:.1f} s)")

    return _build_result(history, config.flight_method, dt)


def _interpolate_landing(previous, current):
    """Ground crossing between the last sample above ground and the first below."""
    t0, p0, v0, _ = previous
    t1, p1, v1 = current
    w = abs(p0[2]) / (abs(p0[2]) + abs(p1[2]))
    pos = p0 + w * (p1 - p0)
    pos[2] = 0.0
    vel = v0 + w * (v1 - v0)
    return _record_state(t0 + w * (t1 - t0), pos, vel)


def _build_result(history, method, dt):
    """Convert history list to FlightResult."""
    times, positions, velocities, speeds = zip(*history)

    positions = np.array(positions)
    velocities = np.array(velocities)

    return FlightResult(
        method=method,
        dt=dt,
        time=np.array(times),
        x=positions[:, 0],
        y=positions[:, 1],
        z=positions[:, 2],
        vx=velocities[:, 0],
        vy=velocities[:, 1],
        vz=velocities[:, 2],
        speed=np.array(speeds),
    )
