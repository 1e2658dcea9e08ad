"""Deprecation engine: scanner, cache and detector wired together.

This is the host-side glue in library form. It owns one cache and one
detector, tracks open documents, re-validates them whenever the cache
changes, and hands results to an optional diagnostics callback. Transport
(LSP, CLI output) stays outside.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

import structlog

from deprecheck.cache import DeprecatedClassCache
from deprecheck.config.models import DeprecheckConfig
from deprecheck.core.excludes import should_prune_dir
from deprecheck.core.file_categories import (
    get_file_category,
    is_stylesheet,
    should_scan_file,
)
from deprecheck.core.logging import get_logger
from deprecheck.css.scanner import ScanOptions, parse_css_file, scan_css_files
from deprecheck.detection.detector import ClassDetector
from deprecheck.detection.registry import PatternRegistry
from deprecheck.diagnostics import DiagnosticResult
from deprecheck.types import CacheUpdateEvent, FileChangeEvent

DiagnosticsCallback = Callable[[DiagnosticResult], None]

PROJECT_MARKERS: tuple[str, ...] = (
    "tailwind.config.js",
    "tailwind.config.ts",
    "tailwind.config.cjs",
    "tailwind.config.mjs",
    "package.json",
)

STYLE_DIRS: tuple[str, ...] = ("assets", "styles", "css", "src")


def _has_stylesheets(directory: Path) -> bool:
    try:
        return any(
            child.is_file() and child.name.lower().endswith((".css", ".scss"))
            for child in directory.iterdir()
        )
    except OSError:
        return False


def find_project_root(start: Path) -> Path:
    """Walk up from ``start`` to the nearest directory that looks like a project.

    A directory qualifies if it holds a tailwind config or package.json, or
    if one of ``assets/``, ``styles/``, ``css/``, ``src/`` directly holds a
    .css or .scss file. Falls back to ``start``.
    """
    current = start
    while True:
        if any((current / marker).exists() for marker in PROJECT_MARKERS):
            return current
        if any(
            (current / name).is_dir() and _has_stylesheets(current / name) for name in STYLE_DIRS
        ):
            return current
        parent = current.parent
        if parent == current:
            return start
        current = parent


def iter_source_files(root: Path, exclude_dirs: Iterable[str]) -> Iterator[Path]:
    """Yield every file under `root` eligible for usage detection, sorted per directory."""
    excluded = frozenset(exclude_dirs)
    for dirpath, dirnames, filenames in root.walk():
        dirnames[:] = sorted(d for d in dirnames if not should_prune_dir(d, excluded))
        for filename in sorted(filenames):
            if should_scan_file(filename):
                yield dirpath / filename


class DeprecationEngine:
    """Keeps diagnostics for open documents in step with stylesheet changes.

    Args:
        config: Resolved configuration
        root: Workspace root to scan (None = nothing to scan until set)
        cache: Injected cache (defaults to a fresh one)
        detector: Injected detector (defaults to one built from config)
        on_diagnostics: Called with each document's result after validation
        logger: Injected logger
    """

    def __init__(
        self,
        config: DeprecheckConfig,
        root: Path | None = None,
        *,
        cache: DeprecatedClassCache | None = None,
        detector: ClassDetector | None = None,
        on_diagnostics: DiagnosticsCallback | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self.config = config
        self.root = root
        self._log = logger or get_logger("engine")
        max_bytes = config.scan.max_file_size_bytes
        self.cache = cache or DeprecatedClassCache(
            logger=self._log,
            parse_file=lambda path: parse_css_file(path, self._log, max_file_size_bytes=max_bytes),
        )
        self.detector = detector or ClassDetector(
            PatternRegistry(),
            enable_fallback_search=config.detection.enable_fallback_search,
        )
        self._on_diagnostics = on_diagnostics
        self._documents: dict[str, str] = {}
        self._documents_lock = threading.Lock()
        self._unsubscribe = self.cache.on_update(self._on_cache_update)

    @property
    def scan_options(self) -> ScanOptions:
        return ScanOptions(
            patterns=tuple(self.config.scan.css_glob),
            ignore_dirs=tuple(self.config.scan.exclude_dirs),
            max_file_size_bytes=self.config.scan.max_file_size_bytes,
        )

    async def refresh(self) -> int:
        """Rescan the workspace and replace the cache contents.

        Returns:
            Number of deprecated classes now cached.
        """
        if self.root is None:
            self._log.warning("refresh_skipped", reason="no_workspace_root")
            return 0

        declarations = await scan_css_files(self.root, self.scan_options, logger=self._log)
        self.cache.replace_all(declarations.values())
        self._log.info("cache_refreshed", root=str(self.root), classes=self.cache.size)
        for name, info in declarations.items():
            self._log.debug("deprecated_class", class_name=name, message=info.message)
        return self.cache.size

    def validate(self, path: str | Path, text: str) -> DiagnosticResult:
        """Detect deprecated class usages in one document."""
        key = str(path)
        if not self.config.diagnostics.enable or not should_scan_file(key):
            return DiagnosticResult(path=key, usages=())

        started = time.perf_counter()
        usages = self.detector.find_usages(
            text,
            self.cache.get_classes(),
            get_file_category(key),
        )
        elapsed_ms = (time.perf_counter() - started) * 1000
        return DiagnosticResult(path=key, usages=tuple(usages), analysis_time_ms=elapsed_ms)

    def open_document(self, path: str | Path, text: str) -> DiagnosticResult:
        """Track a document and validate it."""
        with self._documents_lock:
            self._documents[str(path)] = text
        return self._publish(path, text)

    def update_document(self, path: str | Path, text: str) -> DiagnosticResult:
        return self.open_document(path, text)

    def close_document(self, path: str | Path) -> None:
        with self._documents_lock:
            self._documents.pop(str(path), None)

    @property
    def open_documents(self) -> list[str]:
        with self._documents_lock:
            return list(self._documents)

    def validate_open_documents(self) -> list[DiagnosticResult]:
        with self._documents_lock:
            documents = list(self._documents.items())
        return [self._publish(path, text) for path, text in documents]

    def check_workspace(self) -> list[DiagnosticResult]:
        """Validate every eligible file under the root from disk.

        Unreadable files are logged and skipped. Only results with usages are
        returned.
        """
        if self.root is None:
            return []

        results: list[DiagnosticResult] = []
        for path in iter_source_files(self.root, self.config.scan.exclude_dirs):
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                self._log.warning("source_read_failed", path=str(path), error=str(e))
                continue
            result = self.validate(path, text)
            if result.usages:
                results.append(result)
        return results

    def handle_file_changes(self, events: Iterable[FileChangeEvent]) -> int:
        """Forward stylesheet change events to the cache.

        Returns:
            Number of events applied. Non-stylesheet paths are ignored.
        """
        applied = 0
        for event in events:
            if not is_stylesheet(event.file_path):
                continue
            self.cache.handle_file_change(event)
            applied += 1
        if applied:
            self._log.info("cache_updated", events=applied, classes=self.cache.size)
        return applied

    def close(self) -> None:
        """Detach from the cache and forget open documents."""
        self._unsubscribe()
        with self._documents_lock:
            self._documents.clear()

    def _publish(self, path: str | Path, text: str) -> DiagnosticResult:
        result = self.validate(path, text)
        if self._on_diagnostics is not None:
            self._on_diagnostics(result)
        return result

    def _on_cache_update(self, event: CacheUpdateEvent) -> None:
        self._log.debug(
            "revalidating_documents",
            classes=event.size,
            modified_files=list(event.modified_files),
        )
        self.validate_open_documents()

