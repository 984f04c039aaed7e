"""Settings for the groundwater outlook."""

from .settings import ConfigurationError, OutlookConfig

__all__ = [
    "ConfigurationError",
    "OutlookConfig",
]
