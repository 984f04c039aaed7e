"""Tests for the narrative summary."""

from __future__ import annotations

import pytest

pytest.importorskip("pandas")
pytest.importorskip("scipy")

from src.analysis.reporting import render_narrative, summarize_table
from src.groundwater.projection import build_projection
from src.groundwater.scenarios import depletion_summary
from src.groundwater.trend import fit_two_point

BASELINES = {"low": 190.0, "expected": 350.0, "high": 550.0}


@pytest.fixture()
def outlook():
    inflow = fit_two_point((2000, 12.8), (2050, 10.3))
    outflow = fit_two_point((2000, 18.2), (2050, 27.0))
    table = build_projection(inflow, outflow, 2000, 2050, baselines=BASELINES)
    estimates = depletion_summary(inflow - outflow, BASELINES)
    return table, estimates


def test_summary_scalars(outlook) -> None:
    table, _ = outlook
    summary = summarize_table(table)
    assert summary["start_year"] == 2000
    assert summary["end_year"] == 2050
    assert summary["net_max"] == pytest.approx(-5.4)
    assert summary["net_min"] == pytest.approx(-16.7)
    assert summary["inflow_slope"] == pytest.approx(-0.05)
    assert summary["outflow_slope"] == pytest.approx(0.176)
    assert summary["total_loss"] == pytest.approx(552.5)
    assert summary["storage_expected_max"] == pytest.approx(350.0)
    assert summary["storage_high_min"] == pytest.approx(-2.5)


def test_narrative_mentions_depletion_years(outlook) -> None:
    table, estimates = outlook
    text = render_narrative(summarize_table(table), estimates)
    assert "12.8" in text and "10.3" in text
    assert "552.5" in text
    assert "2036.7" in text
    assert "2023.6" in text
    assert "standard deviation" not in text


def test_narrative_uncertainty_paragraph(outlook) -> None:
    table, estimates = outlook
    text = render_narrative(summarize_table(table), estimates,
                            storage_std=115.0, exhaustion_probability=0.96)
    assert "115" in text
    assert "96%" in text
