"""Stylesheet discovery and bulk declaration extraction.

Walks a root directory with in-place directory pruning, matches files
against glob patterns, and feeds each file through ``parse_css``. Failures
on individual files are logged and the file is skipped; a scan never
raises.
"""

from __future__ import annotations

import asyncio
import fnmatch
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from deprecheck.core.errors import ScanError
from deprecheck.core.excludes import DEFAULT_EXCLUDE_DIRS, should_prune_dir
from deprecheck.core.logging import get_logger
from deprecheck.css.parser import parse_css
from deprecheck.types import DeprecatedClass

DEFAULT_PATTERNS: tuple[str, ...] = ("**/*.css", "**/*.scss", "**/*.less")


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """Options for a stylesheet scan.

    Attributes:
        patterns: Glob patterns relative to the root (``**/`` matches any depth)
        ignore_dirs: Directory names pruned wherever they appear
        max_file_size_bytes: Files larger than this are skipped (None = no limit)
    """

    patterns: tuple[str, ...] = DEFAULT_PATTERNS
    ignore_dirs: tuple[str, ...] = field(default=DEFAULT_EXCLUDE_DIRS)
    max_file_size_bytes: int | None = None


def matches_glob(rel_path: str, pattern: str) -> bool:
    """Check if a POSIX relative path matches a glob pattern, with ** support.

    Matching ignores case, the same as ``is_stylesheet``.
    """
    path, pattern = rel_path.lower(), pattern.lower()
    if fnmatch.fnmatchcase(path, pattern):
        return True
    if pattern.startswith("**/"):
        return fnmatch.fnmatchcase(path, pattern[3:])
    return False


def iter_stylesheet_files(
    root: Path,
    patterns: Sequence[str] = DEFAULT_PATTERNS,
    ignore_dirs: Sequence[str] = DEFAULT_EXCLUDE_DIRS,
) -> Iterator[Path]:
    """Yield absolute paths under ``root`` matching any of ``patterns``.

    Directories are visited top-down in sorted order; pruned directories are
    never entered.
    """
    excluded = frozenset(ignore_dirs)
    for dirpath, dirnames, filenames in root.walk():
        dirnames[:] = sorted(d for d in dirnames if not should_prune_dir(d, excluded))
        for filename in sorted(filenames):
            path = dirpath / filename
            rel = path.relative_to(root).as_posix()
            if any(matches_glob(rel, pattern) for pattern in patterns):
                yield path.absolute()


def parse_css_file(
    file_path: str | Path,
    logger: structlog.stdlib.BoundLogger | None = None,
    *,
    max_file_size_bytes: int | None = None,
) -> list[DeprecatedClass]:
    """Read and parse one stylesheet. Returns [] on any read failure."""
    log = logger or get_logger("css.scanner")
    path = Path(file_path)
    source_file = str(file_path)

    try:
        if max_file_size_bytes is not None:
            size = path.stat().st_size
            if size > max_file_size_bytes:
                log.warning(
                    "css_file_too_large",
                    path=source_file,
                    size=size,
                    limit=max_file_size_bytes,
                )
                return []
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        err = ScanError.read_failed(source_file, str(e))
        log.error("css_read_failed", **err.to_dict())
        return []

    result = parse_css(content, source_file)
    for message in result.errors:
        log.warning("css_parse_error", path=source_file, error=message)

    return list(result.classes)


async def scan_css_files(
    root: str | Path,
    options: ScanOptions | None = None,
    *,
    logger: structlog.stdlib.BoundLogger | None = None,
) -> dict[str, DeprecatedClass]:
    """Scan ``root`` for stylesheets and collect deprecated classes by name.

    Later files overwrite earlier ones on class-name collision. Enumeration
    order is sorted per directory, so results are stable on one platform.

    Args:
        root: Directory to scan
        options: Glob patterns, ignored directories and size limit
        logger: Injected logger (defaults to a component logger)

    Returns:
        Mapping of class name to declaration. Empty if the root is missing.
    """
    opts = options or ScanOptions()
    log = logger or get_logger("css.scanner")
    root_path = Path(root)
    declarations: dict[str, DeprecatedClass] = {}

    if not root_path.is_dir():
        err = ScanError.root_not_found(str(root_path))
        log.error("css_scan_failed", **err.to_dict())
        return declarations

    log.info("css_scan_started", root=str(root_path), patterns=list(opts.patterns))

    try:
        files = await asyncio.to_thread(
            lambda: list(iter_stylesheet_files(root_path, opts.patterns, opts.ignore_dirs))
        )
    except OSError as e:
        log.error("css_scan_failed", root=str(root_path), error=str(e))
        return declarations

    log.info("css_files_found", count=len(files))

    for path in files:
        classes = await asyncio.to_thread(
            parse_css_file, path, log, max_file_size_bytes=opts.max_file_size_bytes
        )
        for deprecated in classes:
            declarations[deprecated.class_name] = deprecated

    log.info("css_scan_complete", files=len(files), classes=len(declarations))
    return declarations
