"""
Spinning-Disk Fertilizer Spreader Simulator
===========================================
Predicts where the granules of a fertilizer blend land when thrown by a
spinning-disk spreader, following each granule through three stages:
  - Synthesis from Weibull size distributions fitted to sieve data
  - Sliding on the rotating, tilted vane (closed-form solution with
    friction, Coriolis load and gravity) up to the vane tip
  - Ballistic flight under gravity and Reynolds-dependent drag until
    ground impact

Granule trajectories are independent and evaluated in parallel with dask;
per-granule random streams make runs reproducible from a single seed.
"""

from .config import SpreaderConfig, BlendComponent, Blend
from .errors import (
    SpreaderError, ConfigurationError, FitDivergence, GranuleError,
    GeometryError, NoExitFound, InvalidLaunchGeometry, IntegrationTimeout,
)
from .particles import Granule
from .size_distribution import WeibullFit, fit_weibull, fit_table
from .population import generate_population, PopulationResult
from .inlet import EntryPoint, sample_entry, entry_from_point, entry_from_vane
from .disk import DiskState, DiskTrajectory, find_exit_time, solve_disk_trajectory
from .launch import LaunchConditions, compute_launch_conditions
from .integrator import FlightState, FlightResult, simulate_flight
from .simulation import (
    GranuleOutcome, GranuleTrace, SimulationResult,
    trace_granule, simulate_granule, run_simulation,
)
from .logging_config import setup_logging

__version__ = "1.0.0"
__all__ = [
    'SpreaderConfig', 'BlendComponent', 'Blend',
    'SpreaderError', 'ConfigurationError', 'FitDivergence', 'GranuleError',
    'GeometryError', 'NoExitFound', 'InvalidLaunchGeometry', 'IntegrationTimeout',
    'Granule', 'WeibullFit', 'fit_weibull', 'fit_table',
    'generate_population', 'PopulationResult',
    'EntryPoint', 'sample_entry', 'entry_from_point', 'entry_from_vane',
    'DiskState', 'DiskTrajectory', 'find_exit_time', 'solve_disk_trajectory',
    'LaunchConditions', 'compute_launch_conditions',
    'FlightState', 'FlightResult', 'simulate_flight',
    'GranuleOutcome', 'GranuleTrace', 'SimulationResult',
    'trace_granule', 'simulate_granule', 'run_simulation',
    'setup_logging',
]
