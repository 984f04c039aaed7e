"""Storage scenarios and depletion diagnostics.

Remaining storage under each scenario is the initial storage (baseline)
plus the cumulative loss, which is negative under the business-as-usual
trend. Because the net-flow trend is linear the storage curve is a
quadratic in time and its zero crossing has a closed form.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd
from scipy import optimize, stats

from .integration import CumulativeLossIntegrator
from .trend import TrendLine

LOGGER = logging.getLogger(__name__)

SCENARIO_PREFIX = "storage_"


def scenario_column(name: str) -> str:
    return f"{SCENARIO_PREFIX}{name}"


def compose_scenarios(cumulative_loss: Sequence[float],
                      baselines: Mapping[str, float],
                      index: Optional[Sequence] = None) -> pd.DataFrame:
    """Add each baseline to the cumulative loss series.

    Parameters
    ----------
    cumulative_loss:
        Cumulative loss per row (10^9 m^3, negative for depletion).
    baselines:
        Initial storage per scenario name, e.g. ``{"low": 190, ...}``.
    index:
        Optional row labels for the returned frame.

    Returns
    -------
    pd.DataFrame
        One ``storage_<name>`` column per baseline, in mapping order.
    """

    loss = np.asarray(cumulative_loss, dtype=float)
    columns = {scenario_column(name): loss + float(value) for name, value in baselines.items()}
    return pd.DataFrame(columns, index=index)


@dataclass(frozen=True)
class DepletionEstimate:
    """Zero crossing of one storage scenario."""

    scenario: str
    baseline: float
    crossing_year: Optional[float]

    @property
    def depletes(self) -> bool:
        return self.crossing_year is not None

    @property
    def bracket(self) -> Optional[tuple]:
        """Integer years ``(last year with storage, first year without)``."""
        if self.crossing_year is None:
            return None
        lower = math.floor(self.crossing_year)
        return lower, lower + 1


def depletion_year(net_flow: TrendLine,
                   baseline: float,
                   start_year: float = 2000,
                   horizon: Optional[float] = None) -> Optional[float]:
    """Return the continuous year at which storage first reaches zero.

    Solves ``baseline + integral(start_year, t) == 0`` for ``t > start_year``.
    Returns ``None`` when storage never runs out, or not before ``horizon``
    if one is given.
    """

    if baseline <= 0:
        return float(start_year)

    # In s = t - start_year: storage(s) = baseline + n0 * s + a / 2 * s**2
    a = net_flow.slope
    n0 = float(net_flow.evaluate(start_year))
    if a == 0.0:
        roots = [-baseline / n0] if n0 < 0 else []
    else:
        disc = n0 * n0 - 2.0 * a * baseline
        if disc < 0:
            roots = []
        else:
            sqrt_disc = math.sqrt(disc)
            roots = [(-n0 - sqrt_disc) / a, (-n0 + sqrt_disc) / a]
    positive = sorted(r for r in roots if r > 0)
    if not positive:
        return None

    crossing = float(start_year) + positive[0]
    if horizon is not None and crossing > horizon:
        return None
    return crossing


def refine_depletion_year(net_flow: TrendLine,
                          baseline: float,
                          lower: float,
                          upper: float,
                          start_year: float = 2000) -> float:
    """Locate the zero crossing numerically with Brent's method."""

    integrator = CumulativeLossIntegrator(net_flow, start_year=start_year)
    return float(optimize.brentq(lambda t: baseline + integrator(t), lower, upper, xtol=1e-10))


def depletion_summary(net_flow: TrendLine,
                      baselines: Mapping[str, float],
                      start_year: float = 2000,
                      horizon: Optional[float] = None) -> List[DepletionEstimate]:
    """Depletion estimates for every scenario, in mapping order."""

    integrator = CumulativeLossIntegrator(net_flow, start_year=start_year)
    estimates = []
    for name, baseline in baselines.items():
        crossing = depletion_year(net_flow, float(baseline), start_year=start_year, horizon=horizon)
        # Brent needs a sign change; a tangent root has none.
        if (crossing is not None and crossing > start_year
                and baseline + integrator(crossing + 1.0) < 0):
            refined = refine_depletion_year(net_flow, float(baseline), start_year, crossing + 1.0,
                                            start_year=start_year)
            if abs(refined - crossing) > 1e-6:
                LOGGER.warning("Scenario '%s': closed-form crossing %.6f differs from Brent %.6f",
                               name, crossing, refined)
        LOGGER.info("Scenario '%s' (baseline %.0f): depletion year %s", name, baseline,
                    "none" if crossing is None else f"{crossing:.2f}")
        estimates.append(DepletionEstimate(scenario=name, baseline=float(baseline),
                                           crossing_year=crossing))
    return estimates


def depletion_probability(cumulative_loss: Sequence[float],
                          mean: float = 350.0,
                          std: float = 115.0) -> np.ndarray:
    """Probability that storage is exhausted, per row.

    The initial storage is treated as normally distributed with the given
    ``mean`` and ``std``; storage is exhausted once the initial storage is
    smaller than the cumulative loss, i.e. ``P(S0 <= -cumulative_loss)``.
    """

    if std <= 0:
        raise ValueError("std must be positive.")
    loss = np.asarray(cumulative_loss, dtype=float)
    return stats.norm.cdf(-loss, loc=mean, scale=std)


def scenario_offsets(frame: pd.DataFrame) -> Dict[str, np.ndarray]:
    """Differences between consecutive scenario columns, e.g. ``expected-low``."""

    names = [c[len(SCENARIO_PREFIX):] for c in frame.columns if c.startswith(SCENARIO_PREFIX)]
    offsets = {}
    for lower, upper in zip(names[:-1], names[1:]):
        offsets[f"{upper}-{lower}"] = (frame[scenario_column(upper)]
                                       - frame[scenario_column(lower)]).to_numpy()
    return offsets


__all__ = [
    "DepletionEstimate",
    "compose_scenarios",
    "depletion_probability",
    "depletion_summary",
    "depletion_year",
    "refine_depletion_year",
    "scenario_column",
    "scenario_offsets",
]
