# src/analysis/reporting.py
"""
Narrative summary of the groundwater outlook.

The projection table is reduced to a handful of scalars (column extremes,
trend slopes, depletion years) which are substituted into short text
templates for the report.
"""
from __future__ import annotations

from string import Template
from typing import Dict, Iterable, Optional

import numpy as np

from ..groundwater.projection import ProjectionTable
from ..groundwater.scenarios import DepletionEstimate

FLOW_TEMPLATE = Template(
    "Under business-as-usual conditions recharge declines from ${inflow_start} to "
    "${inflow_end} x10^9 m^3/yr between ${start_year} and ${end_year} "
    "(${inflow_slope} per year), while discharge rises from ${outflow_start} to "
    "${outflow_end} x10^9 m^3/yr (${outflow_slope} per year)."
)

NET_TEMPLATE = Template(
    "The net flow ranges from ${net_max} to ${net_min} x10^9 m^3/yr, so the aquifer "
    "loses ${total_loss} x10^9 m^3 of storage by ${end_year}."
)

STORAGE_TEMPLATE = Template(
    "With an initial storage of ${baseline} x10^9 m^3 (${scenario} estimate), "
    "${outcome}"
)

UNCERTAINTY_TEMPLATE = Template(
    "The initial storage estimate carries a standard deviation of about "
    "${storage_std} x10^9 m^3; by ${end_year} the probability that usable "
    "storage is exhausted is ${probability}."
)


def _fmt(value: float, digits: int = 1) -> str:
    return f"{value:.{digits}f}"


def summarize_table(table: ProjectionTable) -> Dict[str, float]:
    """Reduce the projection table to the scalars used in the narrative."""

    years = table.column("year")
    inflow = table.column("inflow")
    outflow = table.column("outflow")
    net = table.column("net")
    loss = table.column("cumulative_loss")

    span = float(years[-1] - years[0])
    summary: Dict[str, float] = {
        "start_year": int(years[0]),
        "end_year": int(years[-1]),
        "inflow_start": float(inflow[0]),
        "inflow_end": float(inflow[-1]),
        "outflow_start": float(outflow[0]),
        "outflow_end": float(outflow[-1]),
        "inflow_slope": float((inflow[-1] - inflow[0]) / span) if span else 0.0,
        "outflow_slope": float((outflow[-1] - outflow[0]) / span) if span else 0.0,
        "net_min": float(np.min(net)),
        "net_max": float(np.max(net)),
        "total_loss": float(-loss[-1]),
    }
    for column in table.scenario_columns:
        values = table.column(column)
        summary[f"{column}_min"] = float(np.min(values))
        summary[f"{column}_max"] = float(np.max(values))
    return summary


def _storage_sentence(estimate: DepletionEstimate, end_year: int) -> str:
    if estimate.crossing_year is None:
        outcome = f"storage is not exhausted before {end_year}."
    elif estimate.crossing_year > end_year:
        outcome = (f"storage lasts beyond the projection horizon and runs out around "
                   f"{estimate.crossing_year:.0f}.")
    else:
        outcome = f"storage is exhausted around {estimate.crossing_year:.1f}."
    return STORAGE_TEMPLATE.substitute(
        baseline=_fmt(estimate.baseline, 0),
        scenario=estimate.scenario,
        outcome=outcome,
    )


def render_narrative(summary: Dict[str, float],
                     depletion: Iterable[DepletionEstimate] = (),
                     storage_std: Optional[float] = None,
                     exhaustion_probability: Optional[float] = None) -> str:
    """Fill the narrative templates with computed values.

    Parameters
    ----------
    summary:
        Output of :func:`summarize_table`.
    depletion:
        Depletion estimates per scenario.
    storage_std:
        Standard deviation of the initial storage estimate. The uncertainty
        paragraph is omitted unless both this and ``exhaustion_probability``
        are given.
    exhaustion_probability:
        Probability of exhaustion at the end of the horizon.
    """

    flows = FLOW_TEMPLATE.substitute(
        start_year=summary["start_year"],
        end_year=summary["end_year"],
        inflow_start=_fmt(summary["inflow_start"]),
        inflow_end=_fmt(summary["inflow_end"]),
        inflow_slope=_fmt(summary["inflow_slope"], 3),
        outflow_start=_fmt(summary["outflow_start"]),
        outflow_end=_fmt(summary["outflow_end"]),
        outflow_slope=_fmt(summary["outflow_slope"], 3),
    )
    net = NET_TEMPLATE.substitute(
        net_max=_fmt(summary["net_max"]),
        net_min=_fmt(summary["net_min"]),
        total_loss=_fmt(summary["total_loss"]),
        end_year=summary["end_year"],
    )
    paragraphs = [flows, net]
    paragraphs.extend(_storage_sentence(est, int(summary["end_year"])) for est in depletion)

    if storage_std is not None and exhaustion_probability is not None:
        paragraphs.append(UNCERTAINTY_TEMPLATE.substitute(
            storage_std=_fmt(storage_std, 0),
            end_year=summary["end_year"],
            probability=f"{exhaustion_probability:.0%}",
        ))
    return "\n\n".join(paragraphs)


__all__ = ["render_narrative", "summarize_table"]
