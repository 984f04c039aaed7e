"""Year-by-year projection of groundwater flows and storage."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Mapping, Optional

import numpy as np
import pandas as pd

from .integration import CumulativeLossIntegrator
from .scenarios import SCENARIO_PREFIX, compose_scenarios
from .trend import TrendLine

LOGGER = logging.getLogger(__name__)

DEFAULT_BASELINES = {"low": 190.0, "expected": 350.0, "high": 550.0}

FLOW_COLUMNS = ["year", "inflow", "outflow", "net", "cumulative_loss"]


class ProjectionError(ValueError):
    """Raised for invalid projection ranges or malformed projection tables."""


@dataclass(frozen=True, eq=False)
class ProjectionTable:
    """Read-only projection table.

    The wrapped frame is never handed out directly; :meth:`to_frame` and
    :meth:`column` return copies so the table stays as built.
    """

    _frame: pd.DataFrame
    start_year: int
    step: int = 1

    def to_frame(self) -> pd.DataFrame:
        return self._frame.copy()

    def column(self, name: str) -> np.ndarray:
        if name not in self._frame.columns:
            raise KeyError(f"Unknown projection column '{name}'.")
        return self._frame[name].to_numpy(copy=True)

    @property
    def years(self) -> np.ndarray:
        return self.column("year")

    @property
    def columns(self) -> list:
        return list(self._frame.columns)

    @property
    def scenario_columns(self) -> list:
        return [c for c in self._frame.columns if c.startswith(SCENARIO_PREFIX)]

    def row(self, year: int) -> pd.Series:
        matches = self._frame.loc[self._frame["year"] == year]
        if matches.empty:
            raise KeyError(f"Year {year} is not in the projection.")
        return matches.iloc[0].copy()

    def __len__(self) -> int:
        return len(self._frame)

    def validate(self) -> None:
        validate_projection_frame(self._frame, step=self.step)


def validate_projection_frame(frame: pd.DataFrame, step: int = 1) -> None:
    """Check column presence and that years increase by ``step`` without gaps.

    Raises
    ------
    ProjectionError
        If a required column is missing or the year sequence is broken.
    """

    missing = [c for c in FLOW_COLUMNS if c not in frame.columns]
    if missing:
        raise ProjectionError(f"Projection table is missing columns: {missing}")
    years = frame["year"].to_numpy()
    if years.size == 0:
        raise ProjectionError("Projection table is empty.")
    if not np.all(np.equal(np.mod(years, 1), 0)):
        raise ProjectionError("Projection years must be integers.")
    if years.size > 1 and not np.all(np.diff(years) == step):
        raise ProjectionError(f"Projection years must increase by {step} without gaps.")


def build_projection(inflow: TrendLine,
                     outflow: TrendLine,
                     start_year: int = 2000,
                     end_year: int = 2050,
                     step: int = 1,
                     baselines: Optional[Mapping[str, float]] = None) -> ProjectionTable:
    """Evaluate both flow trends and the derived storage columns per year.

    Parameters
    ----------
    inflow, outflow:
        Recharge and discharge trend lines (10^9 m^3 / yr).
    start_year, end_year:
        Inclusive year range. ``start_year`` is also the lower limit of the
        cumulative loss integral.
    step:
        Year increment.
    baselines:
        Initial storage per scenario (10^9 m^3). Defaults to low 190,
        expected 350 and high 550.

    Returns
    -------
    ProjectionTable
        Columns ``year, inflow, outflow, net, cumulative_loss`` followed by one
        ``storage_<scenario>`` column per baseline.
    """

    if end_year < start_year:
        raise ProjectionError(f"end_year ({end_year}) precedes start_year ({start_year}).")
    if step <= 0:
        raise ProjectionError("step must be a positive integer.")

    baselines = dict(DEFAULT_BASELINES if baselines is None else baselines)
    years = np.arange(int(start_year), int(end_year) + 1, int(step))

    net_line = inflow - outflow
    integrator = CumulativeLossIntegrator(net_line, start_year=start_year)

    inflow_values = inflow.evaluate(years)
    outflow_values = outflow.evaluate(years)
    frame = pd.DataFrame({
        "year": years,
        "inflow": inflow_values,
        "outflow": outflow_values,
        "net": inflow_values - outflow_values,
        "cumulative_loss": integrator.as_array(years),
    })
    scenarios = compose_scenarios(frame["cumulative_loss"], baselines, index=frame.index)
    frame = pd.concat([frame, scenarios], axis=1)

    table = ProjectionTable(_frame=frame, start_year=int(start_year), step=int(step))
    table.validate()
    LOGGER.info("Built projection %d-%d (%d rows, %d scenarios)",
                years[0], years[-1], len(frame), len(baselines))
    return table


__all__ = [
    "DEFAULT_BASELINES",
    "FLOW_COLUMNS",
    "ProjectionError",
    "ProjectionTable",
    "build_projection",
    "validate_projection_frame",
]
