"""
Simulation Driver
=================
Runs the full pipeline for a blend on one spreader setting:

  1. Weibull fit of each component's sieve data
  2. Granule population synthesis
  3. Per granule: inlet point → vane trajectory → launch → flight

Granule trajectories are independent. They are evaluated in partitions as
dask delayed tasks and merged back in granule order. Every granule owns a
child SeedSequence, so results do not depend on the scheduler or on the
number of partitions.
"""

import logging

import dask
import numpy as np
import pandas as pd
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Union

from .config import Blend, SpreaderConfig
from .disk import DiskTrajectory, solve_disk_trajectory
from .errors import GranuleError
from .inlet import EntryPoint, sample_entry
from .integrator import FlightResult, simulate_flight
from .launch import LaunchConditions, compute_launch_conditions
from .particles import Granule
from .population import generate_population
from .size_distribution import fit_table

logger = logging.getLogger(__name__)

LANDING_COLUMNS = ['component', 'diameter', 'mass', 'landing_x', 'landing_y']


@dataclass(frozen=True)
class GranuleTrace:
    """All stages of one granule's trajectory."""
    entry: EntryPoint
    disk: DiskTrajectory
    launch: LaunchConditions
    flight: FlightResult


@dataclass(frozen=True)
class GranuleOutcome:
    """Landing point or failure reason of one granule."""
    index: int
    landing_x: Optional[float] = None
    landing_y: Optional[float] = None
    failure: Optional[str] = None


def trace_granule(granule: Granule, config: SpreaderConfig,
                  rng: np.random.Generator,
                  entry: EntryPoint = None,
                  zout_deg: float = None) -> GranuleTrace:
    """
    Run inlet sampling, vane motion, launch and flight for one granule.

    ``entry`` and ``zout_deg`` pin the otherwise random entry point and
    vertical outlet angle. Granule-level failures propagate as
    GranuleError subclasses.
    """
    if entry is None:
        entry = sample_entry(config, rng)
    disk = solve_disk_trajectory(entry, config)
    launch = compute_launch_conditions(disk.exit_state, config, rng=rng, zout_deg=zout_deg)
    flight = simulate_flight(granule, launch, config)
    return GranuleTrace(entry=entry, disk=disk, launch=launch, flight=flight)


def simulate_granule(index: int, granule: Granule, config: SpreaderConfig,
                     seed: np.random.SeedSequence) -> GranuleOutcome:
    """Landing point of one granule, or the reason it has none."""
    try:
        landing = trace_granule(granule, config, np.random.default_rng(seed)).flight.landing
    except GranuleError as exc:
        logger.debug("Granule %d (%s) failed: %s", index, granule.component, exc)
        return GranuleOutcome(index=index, failure=f"{exc.reason}: {exc}")
    return GranuleOutcome(index=index, landing_x=landing.x, landing_y=landing.y)


def _simulate_partition(indices: Sequence[int], granules: Sequence[Granule],
                        seeds: Sequence[np.random.SeedSequence],
                        config: SpreaderConfig) -> List[GranuleOutcome]:
    return [simulate_granule(i, g, config, s) for i, g, s in zip(indices, granules, seeds)]


@dataclass
class SimulationResult:
    """Granule population with landing points or failure reasons."""
    config: SpreaderConfig
    granules: List[Granule]
    failed_components: Dict[str, str] = field(default_factory=dict)
    sampled_mass: Dict[str, float] = field(default_factory=dict)

    @property
    def landed(self) -> List[Granule]:
        return [g for g in self.granules if g.landed]

    @property
    def n_failed(self) -> int:
        return sum(1 for g in self.granules if g.failure is not None)

    @property
    def partial(self) -> bool:
        """True when components or granules dropped out of the run."""
        return bool(self.failed_components) or self.n_failed > 0

    def landings(self) -> pd.DataFrame:
        """Table of landed granules."""
        rows = [(g.component, g.diameter, g.mass, g.landing_x, g.landing_y)
                for g in self.landed]
        return pd.DataFrame(rows, columns=LANDING_COLUMNS)

    def failures(self) -> pd.DataFrame:
        """Table of granules excluded from the landing set."""
        rows = [(i, g.component, g.diameter, g.failure)
                for i, g in enumerate(self.granules) if g.failure is not None]
        return pd.DataFrame(rows, columns=['granule', 'component', 'diameter', 'failure'])


def run_simulation(blend: Blend,
                   sizes: Union[pd.DataFrame, Mapping],
                   config: SpreaderConfig = None,
                   n_partitions: int = 8,
                   scheduler: str = 'threads',
                   cumulative: bool = True) -> SimulationResult:
    """
    Simulate every granule of a blend from synthesis to landing.

    Parameters
    ----------
    blend : Blend
    sizes : pd.DataFrame or mapping
        Sieve table (``diameter`` column plus one retained-fraction column
        per component), or already fitted component → WeibullFit mapping
    config : SpreaderConfig
        Defaults to the reference spreader
    n_partitions : int
        Number of dask tasks the population is split into
    scheduler : str
        dask scheduler: 'threads', 'processes' or 'synchronous'
    cumulative : bool
        Whether sieve-table fractions are cumulative (see fit_weibull)

    Raises
    ------
    FitDivergence
        No component of the blend could be fitted and populated.
    """
    config = config or SpreaderConfig()
    fits = fit_table(sizes, cumulative=cumulative) if isinstance(sizes, pd.DataFrame) else sizes

    population_seq, flight_seq = np.random.SeedSequence(config.seed).spawn(2)
    population = generate_population(blend, fits, population_seq, config.diameter_scale)
    granules = population.granules
    seeds = flight_seq.spawn(len(granules))

    partitions = [p for p in np.array_split(np.arange(len(granules)), max(1, n_partitions)) if len(p)]
    tasks = [
        dask.delayed(_simulate_partition)(
            [int(i) for i in part],
            [granules[i] for i in part],
            [seeds[i] for i in part],
            config,
        )
        for part in partitions
    ]
    logger.info("Simulating %d granules in %d partitions (%s scheduler)",
                len(granules), len(tasks), scheduler)
    outcomes = dask.compute(*tasks, scheduler=scheduler) if tasks else ()

    for partition in outcomes:
        for outcome in partition:
            granule = granules[outcome.index]
            granule.landing_x = outcome.landing_x
            granule.landing_y = outcome.landing_y
            granule.failure = outcome.failure

    result = SimulationResult(
        config=config,
        granules=granules,
        failed_components=dict(population.failed_components),
        sampled_mass=dict(population.sampled_mass),
    )
    if result.partial:
        logger.warning("Partial run: %d granules failed, components skipped: %s",
                       result.n_failed, sorted(result.failed_components) or 'none')
    logger.info("Landed %d of %d granules", len(result.landed), len(granules))
    return result
