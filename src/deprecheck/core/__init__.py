"""Core module exports."""

from deprecheck.core.errors import (
    ConfigError,
    DeprecheckError,
    ErrorCode,
    InternalError,
    ScanError,
)
from deprecheck.core.file_categories import (
    FileCategory,
    get_file_category,
    is_stylesheet,
    should_scan_file,
)
from deprecheck.core.logging import configure_logging, get_logger

__all__ = [
    # Errors
    "ConfigError",
    "DeprecheckError",
    "ErrorCode",
    "InternalError",
    "ScanError",
    # File categories
    "FileCategory",
    "get_file_category",
    "is_stylesheet",
    "should_scan_file",
    # Logging
    "configure_logging",
    "get_logger",
]
