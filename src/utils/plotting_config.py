# src/utils/plotting_config.py
"""
Shared matplotlib/seaborn style for the outlook figures.

Usage:
    from src.utils.plotting_config import setup_plot_style
    setup_plot_style()
"""

import matplotlib.pyplot as plt
import seaborn as sns

# Colours per storage scenario, shared by every figure
SCENARIO_COLORS = {
    'low': '#d95f02',
    'expected': '#1b9e77',
    'high': '#7570b3',
}

FLOW_COLORS = {
    'inflow': '#1f78b4',
    'outflow': '#e31a1c',
    'net': '#333333',
}


def setup_plot_style(context: str = 'notebook'):
    """
    Apply the figure style used throughout the report

    Parameters
    ----------
    context : str
        seaborn plotting context ('paper', 'notebook', 'talk')
    """
    sns.set_theme(context=context, style='whitegrid')

    plt.rcParams['axes.unicode_minus'] = False
    plt.rcParams['font.size'] = 10
    plt.rcParams['axes.titlesize'] = 12
    plt.rcParams['axes.labelsize'] = 11
    plt.rcParams['xtick.labelsize'] = 9
    plt.rcParams['ytick.labelsize'] = 9
    plt.rcParams['legend.fontsize'] = 9
    plt.rcParams['savefig.bbox'] = 'tight'


def scenario_color(name: str) -> str:
    """Colour for a scenario name, falling back to grey for custom scenarios"""
    return SCENARIO_COLORS.get(name, '#666666')
