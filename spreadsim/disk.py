"""
Disk Trajectory Solver
======================
Motion of a granule sliding along a vane of the spinning disk, from its
entry point to the vane tip.

The vane axis is offset from the disk axis by the pitch radius rlv and its
sliding path rises at the tilt angle z. With rp the (horizontal) coordinate
along the vane axis, centrifugal force, Coriolis load on the vane wall,
friction μ on disk face and vane wall, and gravity along the rising path
give a linear ODE:

    rp'' + 2·C·ω·rp' − A·ω²·rp = −F

    C = μ·cos z
    A = cos z·(cos z − μ·sin z)
    F = cos z·(g·(sin z + μ·cos z) + μ·ω²·rlv)

With rp(0) = rp0, rp'(0) = 0 and K = rp0 − F/(A·ω²), the closed form is

    rp(t) = r_eq + K·(λ2·e^(λ1·t) − λ1·e^(λ2·t)) / (λ2 − λ1)
    λ1,2  = ω·(−C ± sqrt(C² + A))

The solver samples this solution on a fixed time grid until the granule
passes the tip radius, then refines the exit time by root-finding.
"""

import logging

import numpy as np
from dataclasses import dataclass
from scipy.optimize import brentq
from typing import Callable, List

from .config import SpreaderConfig
from .errors import NoExitFound
from .inlet import EntryPoint

logger = logging.getLogger(__name__)

EXIT_TIME_TOLERANCE = 1e-12    # s


@dataclass(frozen=True)
class DiskState:
    """Granule state on the vane at one instant."""
    time: float
    rp: float      # along-vane coordinate (m)
    rv: float      # distance from the disk axis (m)
    dr: float      # along-vane velocity (m/s)
    hp: float      # vane angular position (rad)
    x: float       # absolute disk-plane position (m)
    y: float


@dataclass(frozen=True)
class VaneMotion:
    """
    Closed-form sliding solution for one granule.
    """
    omega: float
    pitch_radius: float
    hp0: float
    rp0: float
    C: float
    A: float
    r_eq: float
    K: float
    lam1: float
    lam2: float

    @classmethod
    def from_entry(cls, entry: EntryPoint, config: SpreaderConfig) -> 'VaneMotion':
        """
        Derive the solution constants; raises NoExitFound when the granule
        cannot slide outward for these parameters.
        """
        mu = config.friction
        z = config.vane_tilt
        omega = config.omega
        rlv = config.vane_pitch_radius

        C = mu * np.cos(z)
        A = np.cos(z) * (np.cos(z) - mu * np.sin(z))
        if A <= 0:
            raise NoExitFound(
                f"Friction {mu} too high for tilt {config.vane_tilt_deg}°: granule cannot slide outward")

        F = np.cos(z) * (config.gravity * (np.sin(z) + mu * np.cos(z)) + mu * omega ** 2 * rlv)
        r_eq = F / (A * omega ** 2)
        K = entry.rp - r_eq
        if K <= 0:
            raise NoExitFound(
                f"Entry coordinate rp={entry.rp:.4f} m inside equilibrium rp={r_eq:.4f} m")

        root = np.sqrt(C ** 2 + A)
        return cls(omega=omega, pitch_radius=rlv, hp0=entry.hp, rp0=entry.rp,
                   C=C, A=A, r_eq=r_eq, K=K,
                   lam1=omega * (-C + root), lam2=omega * (-C - root))

    def rp(self, t):
        """Along-vane coordinate at time t (s)."""
        l1, l2 = self.lam1, self.lam2
        return self.r_eq + self.K * (l2 * np.exp(l1 * t) - l1 * np.exp(l2 * t)) / (l2 - l1)

    def dr(self, t):
        """Along-vane velocity at time t (s)."""
        l1, l2 = self.lam1, self.lam2
        return self.K * l1 * l2 * (np.exp(l1 * t) - np.exp(l2 * t)) / (l2 - l1)

    def state(self, t: float) -> DiskState:
        rp = float(self.rp(t))
        hp = self.hp0 - self.omega * t
        rlv = self.pitch_radius
        return DiskState(
            time=float(t),
            rp=rp,
            rv=float(np.hypot(rp, rlv)),
            dr=float(self.dr(t)),
            hp=float(hp),
            x=float(rp * np.cos(hp) - rlv * np.sin(hp)),
            y=float(rp * np.sin(hp) + rlv * np.cos(hp)),
        )


@dataclass
class DiskTrajectory:
    """Sampled vane trajectory; the last sample is the refined exit."""
    motion: VaneMotion
    time: np.ndarray
    rp: np.ndarray
    rv: np.ndarray
    dr: np.ndarray
    hp: np.ndarray
    x: np.ndarray
    y: np.ndarray
    exit_state: DiskState

    @property
    def exit_time(self) -> float:
        """Time spent on the vane (s)."""
        return self.exit_state.time

    @property
    def n_steps(self) -> int:
        return len(self.time)


def find_exit_time(fn: Callable[[float], float], t_lo: float, t_hi: float,
                   target: float = 0.0, xtol: float = EXIT_TIME_TOLERANCE) -> float:
    """
    Time in [t_lo, t_hi] at which the monotone function ``fn`` equals ``target``.

    Raises NoExitFound if the interval does not bracket the target.
    """
    g_lo = fn(t_lo) - target
    g_hi = fn(t_hi) - target
    if not (np.isfinite(g_lo) and np.isfinite(g_hi)) or g_lo * g_hi > 0:
        raise NoExitFound(
            f"Exit not bracketed on [{t_lo:.6f}, {t_hi:.6f}] s")
    if g_lo == 0:
        return t_lo
    if g_hi == 0:
        return t_hi
    try:
        return float(brentq(lambda t: fn(t) - target, t_lo, t_hi, xtol=xtol))
    except (ValueError, RuntimeError) as exc:
        raise NoExitFound(f"Exit time refinement failed: {exc}") from exc


def solve_disk_trajectory(entry: EntryPoint, config: SpreaderConfig) -> DiskTrajectory:
    """
    Advance a granule along the vane from its entry point to the tip.

    Parameters
    ----------
    entry : EntryPoint
        Vane-local entry state (from the inlet sampler)
    config : SpreaderConfig

    Returns
    -------
    DiskTrajectory
        Samples every ``config.vane_dt`` seconds; the final sample is the
        exit state with rv equal to the vane tip radius.

    Raises
    ------
    NoExitFound
        rv does not grow monotonically, or the tip is not reached within
        ``config.disk_max_steps`` steps.
    """
    motion = VaneMotion.from_entry(entry, config)
    tip = config.vane_tip_radius
    dt = config.vane_dt

    states: List[DiskState] = [motion.state(0.0)]
    for step in range(1, config.disk_max_steps + 1):
        elapsed = step * dt
        state = motion.state(elapsed)
        # Floating-point guard: A > 0 and K > 0 make dr positive for t > 0
        if not state.rv > states[-1].rv:
            raise NoExitFound(f"rv stopped increasing at t={elapsed:.4f} s")
        if state.rv > tip:
            break
        states.append(state)
    else:
        raise NoExitFound(
            f"Vane tip not reached after {config.disk_max_steps} steps")

    t_exit = find_exit_time(motion.rp, states[-1].time, elapsed, target=config.exit_rp)
    exit_state = motion.state(t_exit)
    states.append(exit_state)

    return DiskTrajectory(
        motion=motion,
        time=np.array([s.time for s in states]),
        rp=np.array([s.rp for s in states]),
        rv=np.array([s.rv for s in states]),
        dr=np.array([s.dr for s in states]),
        hp=np.array([s.hp for s in states]),
        x=np.array([s.x for s in states]),
        y=np.array([s.y for s in states]),
        exit_state=exit_state,
    )
