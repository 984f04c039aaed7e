"""Smoke tests for the outlook figures."""

from __future__ import annotations

from pathlib import Path

import pytest

pytest.importorskip("matplotlib")
pytest.importorskip("seaborn")

import matplotlib.pyplot as plt

from src.groundwater.projection import build_projection
from src.groundwater.scenarios import depletion_summary
from src.groundwater.trend import fit_two_point
from src.visualization.groundwater_plots import (
    OutlookVisualizer,
    create_outlook_figure,
    save_individual_figures,
)

OBSERVATIONS = {
    "inflow": ((2000, 12.8), (2050, 10.3)),
    "outflow": ((2000, 18.2), (2050, 27.0)),
}


@pytest.fixture()
def outlook():
    inflow = fit_two_point(*OBSERVATIONS["inflow"])
    outflow = fit_two_point(*OBSERVATIONS["outflow"])
    table = build_projection(inflow, outflow, 2000, 2050)
    baselines = {"low": 190.0, "expected": 350.0, "high": 550.0}
    return table, depletion_summary(inflow - outflow, baselines)


def test_storage_plot_draws_each_scenario(outlook) -> None:
    table, estimates = outlook
    fig, ax = plt.subplots()
    OutlookVisualizer.plot_storage_scenarios(ax, table, estimates)
    assert len(ax.get_lines()) >= 3
    plt.close(fig)


def test_create_outlook_figure(tmp_path: Path, outlook) -> None:
    table, estimates = outlook
    path = create_outlook_figure(table, tmp_path / "outlook.png",
                                 observations=OBSERVATIONS, depletion=estimates, dpi=50)
    assert path.exists() and path.stat().st_size > 0


def test_save_individual_figures(tmp_path: Path, outlook) -> None:
    table, estimates = outlook
    paths = save_individual_figures(table, tmp_path, OBSERVATIONS, estimates, dpi=50)
    assert [p.name for p in paths] == ["flow_trends.png", "net_flow.png", "storage_scenarios.png"]
    assert all(p.exists() for p in paths)
