"""
Configuration for the Central Valley groundwater outlook.

Published flow estimates, projection horizon and storage scenarios used by
the business-as-usual projection. All flows are in 10^9 m^3 per year and all
storages in 10^9 m^3.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

# ==================== Paths ====================
PROJECT_ROOT = Path(__file__).resolve().parents[2]
OUTPUT_DIR = PROJECT_ROOT / 'output'

# ==================== Published flow estimates ====================
# Year 2000 conditions
OUTFLOW_2000 = 18.2
STORAGE_CHANGE_2000 = -5.4

# Year 2050 business-as-usual conditions
OUTFLOW_2050 = 27.0
STORAGE_CHANGE_2050 = -16.7

BASE_YEAR = 2000
TARGET_YEAR = 2050

# ==================== Projection horizon ====================
START_YEAR = 2000
END_YEAR = 2050
YEAR_STEP = 1

# ==================== Storage scenarios ====================
# Initial usable storage in the year 2000
STORAGE_BASELINES = {
    'low': 190.0,
    'expected': 350.0,
    'high': 550.0,
}

# Spread of the initial storage estimate around the expected value
STORAGE_STD = 115.0

# ==================== Output ====================
FIGURE_DPI = 200


class ConfigurationError(ValueError):
    """Raised when outlook settings are inconsistent."""


@dataclass
class OutlookConfig:
    """Settings controlling a single outlook run."""

    outflow_base: float = OUTFLOW_2000
    storage_change_base: float = STORAGE_CHANGE_2000
    outflow_target: float = OUTFLOW_2050
    storage_change_target: float = STORAGE_CHANGE_2050
    base_year: int = BASE_YEAR
    target_year: int = TARGET_YEAR
    start_year: int = START_YEAR
    end_year: int = END_YEAR
    year_step: int = YEAR_STEP
    baselines: Dict[str, float] = field(default_factory=lambda: dict(STORAGE_BASELINES))
    storage_std: float = STORAGE_STD
    output_dir: Path = OUTPUT_DIR
    figure_dpi: int = FIGURE_DPI

    @classmethod
    def from_mapping(cls, overrides: Mapping[str, Any]) -> "OutlookConfig":
        """Build a configuration from defaults updated with ``overrides``.

        Raises
        ------
        ConfigurationError
            If ``overrides`` contains unknown keys or the result is invalid.
        """

        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")

        values = dict(overrides)
        if 'output_dir' in values:
            values['output_dir'] = Path(values['output_dir'])
        if 'baselines' in values:
            values['baselines'] = {str(k): float(v) for k, v in values['baselines'].items()}

        config = cls(**values)
        config.validate()
        return config

    def validate(self) -> None:
        """Check the settings for internal consistency."""

        if self.base_year == self.target_year:
            raise ConfigurationError(
                f"Invalid input: duplicate year {self.base_year} for both flow observations."
            )
        if self.end_year < self.start_year:
            raise ConfigurationError(
                f"end_year ({self.end_year}) precedes start_year ({self.start_year})."
            )
        if self.year_step <= 0:
            raise ConfigurationError("year_step must be a positive integer.")
        if not self.baselines:
            raise ConfigurationError("At least one storage baseline is required.")
        ordered = list(self.baselines.values())
        if ordered != sorted(ordered):
            raise ConfigurationError("Storage baselines must be listed in increasing order.")
        if self.storage_std <= 0:
            raise ConfigurationError("storage_std must be positive.")

    # ------------------------------------------------------------------
    # Derived quantities
    # ------------------------------------------------------------------
    @property
    def inflow_base(self) -> float:
        return self.storage_change_base + self.outflow_base

    @property
    def inflow_target(self) -> float:
        return self.storage_change_target + self.outflow_target

    def observations(self) -> Dict[str, Tuple[Tuple[int, float], Tuple[int, float]]]:
        """Return the two (year, value) anchor points of each flow series.

        Inflow is derived from the water balance ``in = change + out``.
        """

        return {
            'inflow': ((self.base_year, self.inflow_base),
                       (self.target_year, self.inflow_target)),
            'outflow': ((self.base_year, self.outflow_base),
                        (self.target_year, self.outflow_target)),
        }

    @property
    def expected_baseline(self) -> float:
        """Baseline used as the mean of the initial storage distribution."""
        if 'expected' in self.baselines:
            return float(self.baselines['expected'])
        ordered = sorted(self.baselines.values())
        return float(ordered[len(ordered) // 2])

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['output_dir'] = str(self.output_dir)
        return data
