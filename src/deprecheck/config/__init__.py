"""Config module exports."""

from deprecheck.config.loader import load_config
from deprecheck.config.models import (
    DeprecheckConfig,
    DetectionConfig,
    DiagnosticsConfig,
    LoggingConfig,
    LogOutputConfig,
    ScanConfig,
    WatcherConfig,
)

__all__ = [
    "load_config",
    "DeprecheckConfig",
    "DetectionConfig",
    "DiagnosticsConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ScanConfig",
    "WatcherConfig",
]
