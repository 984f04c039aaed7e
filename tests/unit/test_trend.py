"""Tests for two-point and least squares trend lines."""

from __future__ import annotations

import math

import pytest

np = pytest.importorskip("numpy")

from src.config.settings import OutlookConfig
from src.groundwater.integration import definite_integral
from src.groundwater.trend import TrendFitError, TrendLine, fit_least_squares, fit_two_point


@pytest.fixture()
def lines():
    observations = OutlookConfig().observations()
    return {name: fit_two_point(*points) for name, points in observations.items()}


def test_lines_reproduce_published_values(lines) -> None:
    assert lines["inflow"](2000) == pytest.approx(12.8)
    assert lines["outflow"](2000) == pytest.approx(18.2)
    assert lines["inflow"](2050) == pytest.approx(10.3)
    assert lines["outflow"](2050) == pytest.approx(27.0)


def test_midpoint_is_mean_of_endpoints(lines) -> None:
    inflow = lines["inflow"]
    assert inflow(2025) == pytest.approx(0.5 * (inflow(2000) + inflow(2050)))


def test_slopes(lines) -> None:
    assert lines["inflow"].slope == pytest.approx(-0.05)
    assert lines["outflow"].slope == pytest.approx(0.176)


def test_intercept_consistent_with_slope(lines) -> None:
    slope, intercept = lines["outflow"].coefficients()
    assert slope * 2030 + intercept == pytest.approx(lines["outflow"](2030))


def test_evaluate_accepts_arrays(lines) -> None:
    years = np.array([2000, 2025, 2050])
    values = lines["inflow"].evaluate(years)
    assert isinstance(values, np.ndarray)
    np.testing.assert_allclose(values, [12.8, 11.55, 10.3])


def test_order_of_points_does_not_matter() -> None:
    forward = fit_two_point((2000, 1.0), (2010, 3.0))
    backward = fit_two_point((2010, 3.0), (2000, 1.0))
    assert forward.slope == pytest.approx(backward.slope)
    assert forward(2005) == pytest.approx(backward(2005))


def test_duplicate_year_raises() -> None:
    with pytest.raises(TrendFitError, match="duplicate year"):
        fit_two_point((2000, 1.0), (2000, 2.0))


def test_non_finite_input_raises() -> None:
    with pytest.raises(TrendFitError):
        fit_two_point((2000, math.nan), (2050, 2.0))


def test_difference_of_lines(lines) -> None:
    net = lines["inflow"] - lines["outflow"]
    assert isinstance(net, TrendLine)
    assert net.slope == pytest.approx(-0.226)
    for year in (2000, 2013, 2050):
        assert net(year) == pytest.approx(lines["inflow"](year) - lines["outflow"](year))


def test_antiderivative_matches_definite_integral(lines) -> None:
    net = lines["inflow"] - lines["outflow"]
    expected = definite_integral(net.slope, net.intercept, 2000, 2030)
    assert net.antiderivative(2030) - net.antiderivative(2000) == pytest.approx(expected, rel=1e-6)


def test_least_squares_agrees_with_two_point(lines) -> None:
    pytest.importorskip("sklearn")
    (x1, y1), (x2, y2) = OutlookConfig().observations()["outflow"]
    ols = fit_least_squares([x1, x2], [y1, y2])
    assert ols.slope == pytest.approx(lines["outflow"].slope, abs=1e-12)
    assert ols(2037) == pytest.approx(lines["outflow"](2037), abs=1e-9)


def test_least_squares_with_noise_recovers_slope() -> None:
    pytest.importorskip("sklearn")
    rng = np.random.default_rng(0)
    years = np.arange(2000, 2051)
    values = 3.0 - 0.2 * (years - 2000) + rng.normal(0, 0.01, years.size)
    line = fit_least_squares(years, values)
    assert line.slope == pytest.approx(-0.2, abs=1e-3)


def test_least_squares_requires_two_distinct_years() -> None:
    pytest.importorskip("sklearn")
    with pytest.raises(TrendFitError):
        fit_least_squares([2000, 2000], [1.0, 2.0])
    with pytest.raises(TrendFitError):
        fit_least_squares([2000, 2010], [1.0])
