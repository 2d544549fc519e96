"""
Error Taxonomy
==============
Run-level and granule-level failures raised by the simulation stages.

Granule-level errors (``GranuleError`` subclasses) are caught by the
simulation driver and recorded against the granule; everything else
aborts the run.
"""


class SpreaderError(Exception):
    """Base class for all simulator errors."""


class ConfigurationError(SpreaderError, ValueError):
    """Inconsistent blend or machine configuration."""


class FitDivergence(SpreaderError):
    """Weibull fit of a size-distribution table did not converge."""

    def __init__(self, message: str, component: str = None):
        super().__init__(message)
        self.component = component


class GranuleError(SpreaderError):
    """A single granule cannot complete its trajectory."""

    reason = 'granule_error'


class GeometryError(GranuleError):
    """Entry point incompatible with the vane geometry."""

    reason = 'geometry'


class NoExitFound(GranuleError):
    """Granule never reaches the vane tip."""

    reason = 'no_exit'


class InvalidLaunchGeometry(GranuleError):
    """Outlet angles give a non-physical launch state."""

    reason = 'invalid_launch'


class IntegrationTimeout(GranuleError):
    """Ballistic flight did not reach the ground within the step budget."""

    reason = 'integration_timeout'
