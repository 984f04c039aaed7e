# src/visualization/groundwater_plots.py
"""
Groundwater outlook figures
"""
from pathlib import Path
from typing import Dict, Optional, Sequence

import matplotlib.pyplot as plt

from ..groundwater.projection import ProjectionTable
from ..groundwater.scenarios import DepletionEstimate
from ..utils.plotting_config import FLOW_COLORS, scenario_color, setup_plot_style

UNIT_FLOW = r'$10^9\,m^3/yr$'
UNIT_STORAGE = r'$10^9\,m^3$'


class OutlookVisualizer:
    """Charts for the business-as-usual projection"""

    @staticmethod
    def plot_flow_trends(ax, table: ProjectionTable,
                         observations: Optional[Dict[str, Sequence]] = None):
        """
        Recharge and discharge trend lines

        Parameters
        ----------
        ax : matplotlib.axes.Axes
            Target axes
        table : ProjectionTable
            Projection table
        observations : dict, optional
            {'inflow': ((year, value), (year, value)), 'outflow': ...}
            drawn as markers on top of the lines
        """
        years = table.years
        for name in ('inflow', 'outflow'):
            label = 'Recharge (inflow)' if name == 'inflow' else 'Discharge (outflow)'
            ax.plot(years, table.column(name), color=FLOW_COLORS[name], lw=2, label=label)
            if observations and name in observations:
                obs_years, obs_values = zip(*observations[name])
                ax.scatter(obs_years, obs_values, color=FLOW_COLORS[name],
                           s=60, edgecolors='k', zorder=5)

        ax.set_xlabel('Year')
        ax.set_ylabel(f'Flow [{UNIT_FLOW}]')
        ax.set_xlim(years[0], years[-1])
        ax.legend(loc='best')
        ax.set_title('Groundwater Recharge and Discharge', fontweight='bold')

    @staticmethod
    def plot_net_flow(ax, table: ProjectionTable):
        """Net flow on the left axis, shaded cumulative loss on the right axis"""
        years = table.years
        net = table.column('net')
        loss = table.column('cumulative_loss')

        ax.plot(years, net, color=FLOW_COLORS['net'], lw=2, label='Net flow')
        ax.axhline(0, color='k', lw=0.8, ls=':')
        ax.set_xlabel('Year')
        ax.set_ylabel(f'Net flow [{UNIT_FLOW}]')
        ax.set_xlim(years[0], years[-1])

        ax2 = ax.twinx()
        ax2.fill_between(years, loss, 0, color='tab:red', alpha=0.2, label='Cumulative loss')
        ax2.set_ylabel(f'Cumulative loss [{UNIT_STORAGE}]')
        ax2.grid(False)

        handles = ax.get_legend_handles_labels()[0] + ax2.get_legend_handles_labels()[0]
        ax.legend(handles, [h.get_label() for h in handles], loc='lower left')
        ax.set_title('Net Flow and Cumulative Storage Loss', fontweight='bold')
        return ax2

    @staticmethod
    def plot_storage_scenarios(ax, table: ProjectionTable,
                               depletion: Sequence[DepletionEstimate] = ()):
        """
        Remaining storage under each initial-storage scenario

        The band between the smallest and the largest scenario is shaded and
        zero crossings inside the horizon are marked.
        """
        years = table.years
        columns = table.scenario_columns

        for column in columns:
            name = column[len('storage_'):]
            ax.plot(years, table.column(column), color=scenario_color(name), lw=2,
                    label=f'{name.capitalize()} initial storage')

        if len(columns) > 1:
            ax.fill_between(years, table.column(columns[0]), table.column(columns[-1]),
                            color='grey', alpha=0.15)

        for est in depletion:
            if est.crossing_year is not None and years[0] <= est.crossing_year <= years[-1]:
                ax.scatter([est.crossing_year], [0.0], color=scenario_color(est.scenario),
                           marker='v', s=80, edgecolors='k', zorder=5)
                ax.annotate(f'{est.crossing_year:.0f}', xy=(est.crossing_year, 0.0),
                            xytext=(0, 10), textcoords='offset points', ha='center', fontsize=9)

        ax.axhline(0, color='k', lw=1)
        ax.set_xlabel('Year')
        ax.set_ylabel(f'Storage [{UNIT_STORAGE}]')
        ax.set_xlim(years[0], years[-1])
        ax.legend(loc='best')
        ax.set_title('Remaining Groundwater Storage (BAU)', fontweight='bold')


def create_outlook_figure(table: ProjectionTable,
                          output_path,
                          observations: Optional[Dict[str, Sequence]] = None,
                          depletion: Sequence[DepletionEstimate] = (),
                          dpi: int = 200):
    """
    Save the three outlook charts side by side

    Returns
    -------
    pathlib.Path
        Path of the written figure
    """
    setup_plot_style()
    fig, axes = plt.subplots(1, 3, figsize=(18, 5.5))

    OutlookVisualizer.plot_flow_trends(axes[0], table, observations)
    OutlookVisualizer.plot_net_flow(axes[1], table)
    OutlookVisualizer.plot_storage_scenarios(axes[2], table, depletion)

    fig.suptitle('Central Valley Groundwater Outlook, Business as Usual',
                 fontsize=15, fontweight='bold')
    fig.tight_layout(rect=[0, 0, 1, 0.95])

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output_path, dpi=dpi)
    plt.close(fig)

    print(f"Figure saved: {output_path}")
    return output_path


def save_individual_figures(table: ProjectionTable,
                            output_dir,
                            observations: Optional[Dict[str, Sequence]] = None,
                            depletion: Sequence[DepletionEstimate] = (),
                            dpi: int = 200,
                            fmt: str = 'png'):
    """Write each chart to its own file and return the paths"""
    setup_plot_style()
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    plotters = {
        'flow_trends': lambda ax: OutlookVisualizer.plot_flow_trends(ax, table, observations),
        'net_flow': lambda ax: OutlookVisualizer.plot_net_flow(ax, table),
        'storage_scenarios': lambda ax: OutlookVisualizer.plot_storage_scenarios(ax, table, depletion),
    }
    paths = []
    for name, plotter in plotters.items():
        fig, ax = plt.subplots(figsize=(8, 5))
        plotter(ax)
        fig.tight_layout()
        path = output_dir / f'{name}.{fmt}'
        fig.savefig(path, dpi=dpi)
        plt.close(fig)
        paths.append(path)
    return paths
