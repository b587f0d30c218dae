"""Config module exports."""

from incrcov.config.loader import load_config
from incrcov.config.models import (
    IncrcovConfig,
    LoggingConfig,
    LogOutputConfig,
    ReportingConfig,
    WatermarksConfig,
)

__all__ = [
    "load_config",
    "IncrcovConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ReportingConfig",
    "WatermarksConfig",
]
