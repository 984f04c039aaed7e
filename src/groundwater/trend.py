"""Linear trend lines for groundwater flow series.

Each flow series (recharge and discharge) is published at two points in
time only, so the trend is the unique straight line through those two
observations. :func:`fit_two_point` solves it algebraically;
:func:`fit_least_squares` reaches the same line through an ordinary least
squares estimator and is kept as a cross-check and for series with more
than two observations.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Sequence, Tuple, Union

import numpy as np

LOGGER = logging.getLogger(__name__)

Number = Union[int, float, np.ndarray]
Point = Tuple[float, float]


class TrendFitError(ValueError):
    """Raised when a trend line cannot be determined from the inputs."""


@dataclass(frozen=True)
class TrendLine:
    """Straight line ``value = slope * year + intercept``.

    The line is stored through an anchor point ``(anchor_year,
    anchor_value)`` and evaluated relative to it, so values at the anchor
    year are reproduced exactly rather than through the cancellation of
    ``slope * year`` against a large intercept.

    Attributes
    ----------
    slope:
        Change of the series per year.
    anchor_year:
        Year of the reference observation.
    anchor_value:
        Value of the series at ``anchor_year``.
    """

    slope: float
    anchor_year: float
    anchor_value: float

    @property
    def intercept(self) -> float:
        """Value of the line at year zero."""
        return self.anchor_value - self.slope * self.anchor_year

    def evaluate(self, years: Number) -> Number:
        years_arr = np.asarray(years, dtype=float)
        values = self.anchor_value + self.slope * (years_arr - self.anchor_year)
        if values.ndim == 0:
            return float(values)
        return values

    __call__ = evaluate

    def antiderivative(self, years: Number) -> Number:
        """Return ``slope / 2 * year**2 + intercept * year``."""

        years_arr = np.asarray(years, dtype=float)
        values = 0.5 * self.slope * years_arr ** 2 + self.intercept * years_arr
        if values.ndim == 0:
            return float(values)
        return values

    def __sub__(self, other: "TrendLine") -> "TrendLine":
        if not isinstance(other, TrendLine):
            return NotImplemented
        return TrendLine(
            slope=self.slope - other.slope,
            anchor_year=self.anchor_year,
            anchor_value=self.anchor_value - other.evaluate(self.anchor_year),
        )

    def __add__(self, other: "TrendLine") -> "TrendLine":
        if not isinstance(other, TrendLine):
            return NotImplemented
        return TrendLine(
            slope=self.slope + other.slope,
            anchor_year=self.anchor_year,
            anchor_value=self.anchor_value + other.evaluate(self.anchor_year),
        )

    def coefficients(self) -> Tuple[float, float]:
        """Return ``(slope, intercept)``."""
        return self.slope, self.intercept


def fit_two_point(first: Point, second: Point) -> TrendLine:
    """Return the line passing through two ``(year, value)`` observations.

    Parameters
    ----------
    first, second:
        Observations as ``(year, value)`` pairs. Order does not matter.

    Returns
    -------
    TrendLine
        Line anchored at ``first``.

    Raises
    ------
    TrendFitError
        If both observations share the same year (the slope would be
        undefined) or any coordinate is not finite.
    """

    (x1, y1), (x2, y2) = first, second
    coords = np.array([x1, y1, x2, y2], dtype=float)
    if not np.all(np.isfinite(coords)):
        raise TrendFitError(f"Observations must be finite, got {first!r} and {second!r}.")
    if x1 == x2:
        raise TrendFitError(f"Invalid input: duplicate year {x1!r}; slope is undefined.")

    slope = (float(y2) - float(y1)) / (float(x2) - float(x1))
    line = TrendLine(slope=slope, anchor_year=float(x1), anchor_value=float(y1))
    LOGGER.debug("Two-point fit through %s and %s: slope=%.6f intercept=%.6f",
                 first, second, line.slope, line.intercept)
    return line


def fit_least_squares(years: Sequence[float], values: Sequence[float]) -> TrendLine:
    """Fit a line by ordinary least squares.

    With exactly two distinct years this reproduces :func:`fit_two_point`
    up to floating point precision.

    Raises
    ------
    TrendFitError
        If the inputs are misaligned, contain non-finite values or fewer than
        two distinct years.
    """

    from sklearn.linear_model import LinearRegression

    x = np.asarray(years, dtype=float)
    y = np.asarray(values, dtype=float)
    if x.shape != y.shape or x.ndim != 1:
        raise TrendFitError("years and values must be one-dimensional and of equal length.")
    if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y))):
        raise TrendFitError("years and values must be finite.")
    if np.unique(x).size < 2:
        raise TrendFitError("At least two distinct years are required for a trend fit.")

    # Centre the regressor so the intercept is estimated near the data.
    anchor = float(x.min())
    model = LinearRegression()
    model.fit((x - anchor).reshape(-1, 1), y)

    slope = float(model.coef_[0])
    line = TrendLine(slope=slope, anchor_year=anchor, anchor_value=float(model.intercept_))
    LOGGER.debug("Least squares fit over %d points: slope=%.6f", x.size, slope)
    return line


__all__ = [
    "TrendFitError",
    "TrendLine",
    "fit_least_squares",
    "fit_two_point",
]
