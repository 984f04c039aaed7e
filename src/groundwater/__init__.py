"""Public API for the groundwater trend and storage projection."""

from .integration import CumulativeLossIntegrator, IntegrationError, definite_integral
from .projection import (
    DEFAULT_BASELINES,
    ProjectionError,
    ProjectionTable,
    build_projection,
    validate_projection_frame,
)
from .scenarios import (
    DepletionEstimate,
    compose_scenarios,
    depletion_probability,
    depletion_summary,
    depletion_year,
)
from .trend import TrendFitError, TrendLine, fit_least_squares, fit_two_point

__all__ = [
    "CumulativeLossIntegrator",
    "DEFAULT_BASELINES",
    "DepletionEstimate",
    "IntegrationError",
    "ProjectionError",
    "ProjectionTable",
    "TrendFitError",
    "TrendLine",
    "build_projection",
    "compose_scenarios",
    "definite_integral",
    "depletion_probability",
    "depletion_summary",
    "depletion_year",
    "fit_least_squares",
    "fit_two_point",
    "validate_projection_frame",
]
