#!/usr/bin/env python3
"""
Main script: Central Valley groundwater outlook (business as usual)

Workflow:
- Load the published 2000/2050 groundwater flow estimates
- Fit recharge and discharge trend lines through the two estimates
- Project flows, net flow and cumulative storage loss for 2000-2050
- Add the low / expected / high initial-storage scenarios
- Estimate when each scenario runs dry and the exhaustion probability
- Write the projection table, the narrative and the figures
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict, Optional, Sequence

from src.analysis.reporting import render_narrative, summarize_table
from src.config.settings import OutlookConfig
from src.groundwater.integration import CumulativeLossIntegrator
from src.groundwater.projection import ProjectionTable, build_projection
from src.groundwater.scenarios import depletion_probability, depletion_summary
from src.groundwater.trend import fit_least_squares, fit_two_point
from src.utils.table_io import save_projection


def fit_trends(config: OutlookConfig) -> Dict:
    """Fit the recharge and discharge trend lines"""
    print("\n" + "=" * 60)
    print("Step 1: trend fit")
    print("=" * 60)

    lines = {}
    for name, (first, second) in config.observations().items():
        line = fit_two_point(first, second)
        check = fit_least_squares([first[0], second[0]], [first[1], second[1]])
        lines[name] = line
        print(f"  {name:8s}: slope={line.slope:+.4f}/yr  intercept={line.intercept:.2f}  "
              f"(OLS slope {check.slope:+.4f})")
    return lines


def run_projection(config: OutlookConfig, lines: Dict) -> ProjectionTable:
    """Build the projection table and check the integral"""
    print("\n" + "=" * 60)
    print("Step 2: projection")
    print("=" * 60)

    table = build_projection(lines['inflow'], lines['outflow'],
                             start_year=config.start_year,
                             end_year=config.end_year,
                             step=config.year_step,
                             baselines=config.baselines)
    integrator = CumulativeLossIntegrator(lines['inflow'] - lines['outflow'],
                                          start_year=config.start_year)
    worst = integrator.check_against_quadrature(table.years)
    print(f"  {len(table)} rows, {len(table.scenario_columns)} scenarios")
    print(f"  closed-form vs quadrature: max discrepancy {worst:.2e}")
    return table


def analyse_depletion(config: OutlookConfig, lines: Dict, table: ProjectionTable):
    """Depletion years and exhaustion probability"""
    print("\n" + "=" * 60)
    print("Step 3: depletion")
    print("=" * 60)

    net_line = lines['inflow'] - lines['outflow']
    estimates = depletion_summary(net_line, config.baselines, start_year=config.start_year)
    for est in estimates:
        when = "never" if est.crossing_year is None else f"{est.crossing_year:.2f}"
        print(f"  {est.scenario:9s} ({est.baseline:.0f}): storage exhausted in {when}")

    probability = depletion_probability(table.column('cumulative_loss'),
                                        mean=config.expected_baseline,
                                        std=config.storage_std)
    print(f"  probability of exhaustion by {config.end_year}: {probability[-1]:.1%}")
    return estimates, probability


def run_workflow(config: Optional[OutlookConfig] = None,
                 make_plots: bool = True,
                 csv_name: Optional[str] = 'groundwater_projection.csv') -> Dict:
    """Run the full outlook and return its artefacts"""
    config = config or OutlookConfig()
    config.validate()
    output_dir = Path(config.output_dir)

    lines = fit_trends(config)
    table = run_projection(config, lines)
    estimates, probability = analyse_depletion(config, lines, table)

    print("\n" + "=" * 60)
    print("Step 4: report")
    print("=" * 60)
    summary = summarize_table(table)
    narrative = render_narrative(summary, estimates,
                                 storage_std=config.storage_std,
                                 exhaustion_probability=float(probability[-1]))
    print(narrative)

    artefacts = {
        'lines': lines,
        'table': table,
        'depletion': estimates,
        'probability': probability,
        'summary': summary,
        'narrative': narrative,
    }

    if csv_name:
        artefacts['csv'] = save_projection(table, output_dir / csv_name)
        narrative_path = output_dir / 'narrative.txt'
        narrative_path.write_text(narrative + "\n", encoding='utf-8')
        artefacts['narrative_path'] = narrative_path

    if make_plots:
        from src.visualization.groundwater_plots import create_outlook_figure

        artefacts['figure'] = create_outlook_figure(
            table,
            output_dir / 'groundwater_outlook.png',
            observations=config.observations(),
            depletion=estimates,
            dpi=config.figure_dpi,
        )

    print("\nDone.")
    return artefacts


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Central Valley groundwater outlook (BAU)")
    parser.add_argument("--output-dir", type=Path, default=None, help="Directory for table, text and figures")
    parser.add_argument("--no-plots", action="store_true", help="Skip figure generation")
    parser.add_argument("--csv", default="groundwater_projection.csv", help="File name of the projection table")
    parser.add_argument("--verbose", action="store_true", help="Show library log messages")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    overrides = {}
    if args.output_dir is not None:
        overrides['output_dir'] = args.output_dir
    config = OutlookConfig.from_mapping(overrides)

    run_workflow(config, make_plots=not args.no_plots, csv_name=args.csv)


if __name__ == "__main__":
    main()
