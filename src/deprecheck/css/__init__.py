"""Stylesheet parsing and discovery."""

from deprecheck.css.parser import CssParseResult, parse_css
from deprecheck.css.scanner import (
    DEFAULT_PATTERNS,
    ScanOptions,
    iter_stylesheet_files,
    parse_css_file,
    scan_css_files,
)

__all__ = [
    "CssParseResult",
    "DEFAULT_PATTERNS",
    "ScanOptions",
    "iter_stylesheet_files",
    "parse_css",
    "parse_css_file",
    "scan_css_files",
]
