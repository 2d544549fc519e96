"""
Particle Population Generator
=============================
Synthesizes the granules injected onto the disk. For every blend
component, diameters are drawn from its fitted Weibull model until the
sampled mass reaches the component's target share of the total mass:

    while Σ m_i < M_total · w_c:   draw d ~ Weibull(k, λ),  append granule

The last draw may overshoot the target by at most one granule. Each
component has its own random stream so adding or removing a component
does not change the draws of the others.
"""

import logging

import numpy as np
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Tuple, Union

from .config import Blend, BlendComponent
from .errors import FitDivergence
from .particles import Granule
from .size_distribution import WeibullFit

logger = logging.getLogger(__name__)


@dataclass
class PopulationResult:
    """Granules of all populated components, in blend order."""
    granules: List[Granule]
    failed_components: Dict[str, str] = field(default_factory=dict)
    sampled_mass: Dict[str, float] = field(default_factory=dict)

    def __len__(self):
        return len(self.granules)


def draw_diameter(fit: WeibullFit, rng: np.random.Generator,
                  diameter_scale: float = 1e-3) -> float:
    """One diameter (m); zero or non-finite draws are redrawn."""
    while True:
        d = float(fit.sample(rng)) * diameter_scale
        if np.isfinite(d) and d > 0.0:
            return d


def generate_component(component: BlendComponent, fit: WeibullFit,
                       target_mass: float, rng: np.random.Generator,
                       diameter_scale: float = 1e-3) -> Tuple[List[Granule], float]:
    """
    Sample granules of one component until their mass reaches ``target_mass``.

    Returns the granules and their total mass (kg).
    """
    if target_mass < 0:
        raise ValueError(f"{component.name}: negative target mass {target_mass}")

    granules: List[Granule] = []
    sampled = 0.0
    while sampled < target_mass:
        granule = Granule.from_component(component, draw_diameter(fit, rng, diameter_scale))
        granules.append(granule)
        sampled += granule.mass
    return granules, sampled


def generate_population(blend: Blend,
                        fits: Mapping[str, Union[WeibullFit, FitDivergence]],
                        seed=None,
                        diameter_scale: float = 1e-3) -> PopulationResult:
    """
    Generate the full granule population of a blend.

    Parameters
    ----------
    blend : Blend
    fits : mapping
        Component name → WeibullFit, or the FitDivergence raised for it
    seed : int, SeedSequence or None
        Root of the per-component random streams
    diameter_scale : float
        Metres per size-table unit

    Raises
    ------
    FitDivergence
        When no component of the blend can be populated.
    """
    seed_seq = seed if isinstance(seed, np.random.SeedSequence) else np.random.SeedSequence(seed)
    streams = seed_seq.spawn(len(blend.components))

    result = PopulationResult(granules=[])
    for component, stream in zip(blend.components, streams):
        fit = fits.get(component.name)
        if fit is None:
            fit = FitDivergence(f"No size data for component '{component.name}'", component.name)
        if isinstance(fit, FitDivergence):
            logger.warning("Skipping component '%s': %s", component.name, fit)
            result.failed_components[component.name] = str(fit)
            continue

        target = blend.target_mass(component)
        granules, sampled = generate_component(
            component, fit, target, np.random.default_rng(stream), diameter_scale)
        result.granules.extend(granules)
        result.sampled_mass[component.name] = sampled
        logger.info("Component '%s': %d granules, %.4f kg sampled (target %.4f kg)",
                    component.name, len(granules), sampled, target)

    if not result.sampled_mass:
        raise FitDivergence("No blend component could be populated")
    return result
