"""
Granule Size Distribution
=========================
Two-parameter Weibull model of the granule diameter of one blend
component, fitted to sieve data:

    F(d) = 1 − exp(−(d / λ)^k)

where F is the mass fraction passing a sieve of aperture d, k the shape
and λ the scale (in the units of the sieve table, usually mm).

Sieve tables list, per aperture, the fraction *retained*, either cumulative
(everything coarser than the aperture) or per sieve. Both are converted
to the cumulative passing fraction before a bounded non-linear least
squares fit (scipy.optimize.curve_fit).
"""

import logging
import warnings

import numpy as np
import pandas as pd
from dataclasses import dataclass
from scipy.optimize import curve_fit, OptimizeWarning
from scipy.special import gamma
from typing import Dict, Union

from .errors import FitDivergence

logger = logging.getLogger(__name__)

MAX_FUNCTION_EVALS = 5000
DEFAULT_SHAPE_GUESS = 3.0


def weibull_cdf(d, shape: float, scale: float):
    """Cumulative passing fraction at diameter(s) ``d``."""
    d = np.clip(np.asarray(d, dtype=float), 0.0, None)
    return 1.0 - np.exp(-(d / scale) ** shape)


@dataclass(frozen=True)
class WeibullFit:
    """Fitted Weibull parameters for one component (table units)."""
    shape: float
    scale: float

    def cdf(self, d):
        return weibull_cdf(d, self.shape, self.scale)

    @property
    def mean(self) -> float:
        """Mean diameter in table units."""
        return self.scale * gamma(1.0 + 1.0 / self.shape)

    def sample(self, rng: np.random.Generator, size=None):
        """Draw diameter(s) in table units."""
        return rng.weibull(self.shape, size) * self.scale


def passing_fractions(retained, cumulative: bool = True) -> np.ndarray:
    """
    Convert retained fractions (ordered like the diameters) to the
    cumulative fraction passing each sieve. Percentages are rescaled.
    """
    retained = np.asarray(retained, dtype=float)
    finite = retained[np.isfinite(retained)]
    if finite.size and finite.max() > 1.0:
        retained = retained / 100.0
    if not cumulative:
        total = np.nansum(retained)
        if total <= 0:
            raise FitDivergence("Per-sieve fractions sum to zero")
        retained = retained / total
        retained = np.nancumsum(retained[::-1])[::-1]
    return np.clip(1.0 - retained, 0.0, 1.0)


def fit_weibull(diameters, retained, cumulative: bool = True,
                component: str = None) -> WeibullFit:
    """
    Fit a Weibull CDF to sieve data.

    Parameters
    ----------
    diameters : array-like
        Sieve apertures (table units, e.g. mm)
    retained : array-like
        Retained mass fractions (0–1 or percent) for each aperture
    cumulative : bool
        True when ``retained`` is the cumulative fraction coarser than
        each aperture, False for per-sieve fractions
    component : str
        Component name, attached to a raised FitDivergence

    Returns
    -------
    WeibullFit

    Raises
    ------
    FitDivergence
        Not enough usable rows, or the optimizer did not converge.
    """
    d = np.asarray(diameters, dtype=float)
    if d.shape != np.shape(retained):
        raise FitDivergence(
            f"{len(d)} diameters but {np.size(retained)} fractions", component)

    order = np.argsort(d)
    d = d[order]
    passing = passing_fractions(np.asarray(retained, dtype=float)[order], cumulative)

    usable = np.isfinite(d) & (d > 0) & np.isfinite(passing)
    d, passing = d[usable], passing[usable]
    if d.size < 2:
        raise FitDivergence(
            f"Need at least two usable sieve rows, got {d.size}", component)

    scale_guess = d[np.argmin(np.abs(passing - (1.0 - np.exp(-1.0))))]
    try:
        with warnings.catch_warnings():
            warnings.simplefilter('ignore', OptimizeWarning)
            params, _ = curve_fit(
                weibull_cdf, d, passing,
                p0=(DEFAULT_SHAPE_GUESS, scale_guess),
                bounds=([1e-6, 1e-9], [np.inf, np.inf]),
                max_nfev=MAX_FUNCTION_EVALS,
            )
    except (RuntimeError, ValueError) as exc:
        raise FitDivergence(f"Weibull fit did not converge: {exc}", component) from exc

    shape, scale = (float(p) for p in params)
    if not (np.isfinite(shape) and np.isfinite(scale)):
        raise FitDivergence("Weibull fit produced non-finite parameters", component)

    logger.info("Weibull fit%s: shape=%.3f scale=%.3f",
                f" [{component}]" if component else "", shape, scale)
    return WeibullFit(shape=shape, scale=scale)


def fit_table(table: pd.DataFrame, diameter_column: str = 'diameter',
              cumulative: bool = True) -> Dict[str, Union[WeibullFit, FitDivergence]]:
    """
    Fit every component column of a sieve table.

    Returns a mapping from column name to either its WeibullFit or the
    FitDivergence that prevented it, so that one diverging component does
    not hide the others.
    """
    if diameter_column not in table.columns:
        raise KeyError(f"Size table has no '{diameter_column}' column")

    results: Dict[str, Union[WeibullFit, FitDivergence]] = {}
    diameters = table[diameter_column].to_numpy(dtype=float)
    for column in table.columns:
        if column == diameter_column:
            continue
        try:
            results[column] = fit_weibull(
                diameters, table[column].to_numpy(dtype=float),
                cumulative=cumulative, component=column,
            )
        except FitDivergence as exc:
            if exc.component is None:
                exc.component = column
            logger.warning("Component '%s' cannot be fitted: %s", column, exc)
            results[column] = exc
    return results
