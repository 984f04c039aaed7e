"""Tests for projection CSV persistence."""

from __future__ import annotations

from pathlib import Path

import pytest

np = pytest.importorskip("numpy")
pd = pytest.importorskip("pandas")

from src.groundwater.projection import ProjectionError, build_projection
from src.groundwater.trend import fit_two_point
from src.utils.table_io import load_projection, save_projection


@pytest.fixture()
def table():
    inflow = fit_two_point((2000, 12.8), (2050, 10.3))
    outflow = fit_two_point((2000, 18.2), (2050, 27.0))
    return build_projection(inflow, outflow, 2000, 2050)


def test_save_and_load(tmp_path: Path, table) -> None:
    path = save_projection(table, tmp_path / "out" / "projection.csv")
    assert path.exists()

    loaded = load_projection(path)
    assert loaded.columns == table.columns
    np.testing.assert_array_equal(loaded.years, table.years)
    np.testing.assert_allclose(loaded.column("storage_expected"),
                               table.column("storage_expected"), atol=1e-6)


def test_load_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_projection(tmp_path / "missing.csv")


def test_load_rejects_missing_columns(tmp_path: Path) -> None:
    path = tmp_path / "bad.csv"
    pd.DataFrame({"year": [2000, 2001], "inflow": [1.0, 1.0]}).to_csv(path, index=False)
    with pytest.raises(ProjectionError):
        load_projection(path)
