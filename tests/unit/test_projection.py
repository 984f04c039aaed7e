"""Tests for the projection table."""

from __future__ import annotations

import pytest

np = pytest.importorskip("numpy")
pd = pytest.importorskip("pandas")

from src.groundwater.projection import ProjectionError, build_projection, validate_projection_frame
from src.groundwater.trend import fit_two_point


@pytest.fixture()
def table():
    inflow = fit_two_point((2000, 12.8), (2050, 10.3))
    outflow = fit_two_point((2000, 18.2), (2050, 27.0))
    return build_projection(inflow, outflow, 2000, 2050)


def test_table_shape_and_columns(table) -> None:
    assert len(table) == 51
    assert table.columns == [
        "year", "inflow", "outflow", "net", "cumulative_loss",
        "storage_low", "storage_expected", "storage_high",
    ]
    np.testing.assert_array_equal(table.years, np.arange(2000, 2051))


def test_net_is_inflow_minus_outflow(table) -> None:
    np.testing.assert_allclose(table.column("net"), table.column("inflow") - table.column("outflow"))


def test_net_strictly_decreasing(table) -> None:
    assert np.all(np.diff(table.column("net")) < 0)


def test_cumulative_loss_starts_at_zero(table) -> None:
    assert table.column("cumulative_loss")[0] == 0.0


def test_baseline_offsets_hold_every_year(table) -> None:
    low = table.column("storage_low")
    expected = table.column("storage_expected")
    high = table.column("storage_high")
    np.testing.assert_allclose(expected - low, 160.0)
    np.testing.assert_allclose(high - expected, 200.0)


@pytest.mark.parametrize(
    "column, last_positive",
    [("storage_low", 2023), ("storage_expected", 2036), ("storage_high", 2049)],
)
def test_zero_crossings(table, column: str, last_positive: int) -> None:
    frame = table.to_frame().set_index("year")
    assert frame.loc[last_positive, column] > 0
    assert frame.loc[last_positive + 1, column] < 0


def test_table_is_not_mutated_through_accessors(table) -> None:
    frame = table.to_frame()
    frame.loc[:, "net"] = 0.0
    values = table.column("net")
    values[:] = 0.0
    assert table.column("net")[0] == pytest.approx(-5.4)


def test_row_lookup(table) -> None:
    row = table.row(2025)
    assert row["inflow"] == pytest.approx(11.55)
    with pytest.raises(KeyError):
        table.row(2051)


def test_custom_baselines_and_step() -> None:
    inflow = fit_two_point((2000, 1.0), (2010, 1.0))
    outflow = fit_two_point((2000, 2.0), (2010, 2.0))
    table = build_projection(inflow, outflow, 2000, 2010, step=5, baselines={"only": 10.0})
    np.testing.assert_array_equal(table.years, [2000, 2005, 2010])
    np.testing.assert_allclose(table.column("storage_only"), [10.0, 5.0, 0.0])


def test_invalid_range_raises() -> None:
    line = fit_two_point((2000, 1.0), (2010, 2.0))
    with pytest.raises(ProjectionError):
        build_projection(line, line, 2050, 2000)
    with pytest.raises(ProjectionError):
        build_projection(line, line, 2000, 2050, step=0)


def test_validate_detects_gaps() -> None:
    frame = pd.DataFrame({
        "year": [2000, 2001, 2003],
        "inflow": [1.0, 1.0, 1.0],
        "outflow": [1.0, 1.0, 1.0],
        "net": [0.0, 0.0, 0.0],
        "cumulative_loss": [0.0, 0.0, 0.0],
    })
    with pytest.raises(ProjectionError):
        validate_projection_frame(frame)
