"""Process-lifetime cache of deprecated classes with per-file invalidation.

Two indexes are kept in step:
- forward: class name -> declaration (last write wins)
- reverse: source file -> class names that file currently contributes

A class re-declared by another file moves to that file in the reverse
index, so removing the old file never drops the newer declaration.

Concurrency: every mutation runs under one re-entrant lock and works on
private copies that are published in a single assignment. Readers get an
immutable point-in-time snapshot and never observe a half-applied
mutation. Listeners run synchronously, in mutation order, before the
mutating call returns.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from pathlib import Path
from types import MappingProxyType

import structlog

from deprecheck.core.logging import get_logger
from deprecheck.css.scanner import parse_css_file
from deprecheck.types import (
    CacheUpdateEvent,
    DeclarationMap,
    DeprecatedClass,
    FileChangeEvent,
    FileChangeType,
)

CacheUpdateListener = Callable[[CacheUpdateEvent], None]
FileParser = Callable[[str], list[DeprecatedClass]]


class DeprecatedClassCache:
    """Current deprecated-class declarations, maintained from file changes.

    Args:
        logger: Injected logger (defaults to a component logger)
        parse_file: Reads and parses one stylesheet; defaults to
            ``parse_css_file``. Must not raise.
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        parse_file: FileParser | None = None,
    ) -> None:
        self._log = logger or get_logger("cache")
        self._parse_file = parse_file or (lambda path: parse_css_file(path, self._log))
        self._lock = threading.RLock()
        self._classes: dict[str, DeprecatedClass] = {}
        self._snapshot: DeclarationMap = MappingProxyType(self._classes)
        self._file_to_classes: dict[str, frozenset[str]] = {}
        self._listeners: dict[int, CacheUpdateListener] = {}
        self._next_listener_id = 0

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_classes(self) -> DeclarationMap:
        """Immutable snapshot of the current declarations."""
        return self._snapshot

    @property
    def size(self) -> int:
        return len(self._snapshot)

    def __len__(self) -> int:
        return len(self._snapshot)

    def __contains__(self, class_name: object) -> bool:
        return class_name in self._snapshot

    def has(self, class_name: str) -> bool:
        return class_name in self._snapshot

    def get(self, class_name: str) -> DeprecatedClass | None:
        return self._snapshot.get(class_name)

    def files(self) -> dict[str, frozenset[str]]:
        """Source file -> class names it currently contributes."""
        with self._lock:
            return dict(self._file_to_classes)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, classes: Iterable[DeprecatedClass]) -> None:
        """Upsert declarations; notify once if anything was added."""
        with self._lock:
            work = dict(self._classes)
            files = dict(self._file_to_classes)
            touched = self._add_into(work, files, classes)
            if not touched:
                return
            self._publish(work, files)
            self._notify(tuple(touched))

    def remove_by_file(self, file_path: str | Path) -> int:
        """Drop every declaration contributed by ``file_path``.

        Returns:
            Number of declarations removed.
        """
        path = str(file_path)
        with self._lock:
            if path not in self._file_to_classes:
                return 0
            work = dict(self._classes)
            files = dict(self._file_to_classes)
            removed = self._remove_from(work, files, path)
            self._publish(work, files)
            if removed:
                self._notify((path,))
            return removed

    def refresh_file(self, file_path: str | Path) -> None:
        """Re-parse one stylesheet, replacing everything it contributed.

        Always a full remove-then-reinsert, never a diff. Readers see either
        the state before or after, and at most one notification fires.
        """
        path = str(file_path)
        classes = self._parse_file(path)

        with self._lock:
            work = dict(self._classes)
            files = dict(self._file_to_classes)
            removed = self._remove_from(work, files, path)
            touched = self._add_into(work, files, classes)
            if not removed and not touched:
                return
            self._publish(work, files)
            modified = dict.fromkeys([path, *touched])
            self._notify(tuple(modified))

        self._log.debug("cache_file_refreshed", path=path, removed=removed, added=len(classes))

    def replace_all(self, classes: Iterable[DeprecatedClass]) -> None:
        """Swap the whole contents for ``classes`` in one step."""
        with self._lock:
            had_content = bool(self._classes)
            work: dict[str, DeprecatedClass] = {}
            files: dict[str, frozenset[str]] = {}
            touched = self._add_into(work, files, classes)
            if not had_content and not touched:
                return
            self._publish(work, files)
            self._notify(tuple(touched))

    def handle_file_change(self, event: FileChangeEvent) -> None:
        """Apply one watcher event: deletes remove, creates/changes refresh."""
        self._log.debug("cache_file_change", path=event.file_path, change=event.type.value)

        if event.type is FileChangeType.DELETED:
            self.remove_by_file(event.file_path)
        else:
            self.refresh_file(event.file_path)

    def clear(self) -> None:
        """Empty the cache; notify only if it held anything."""
        with self._lock:
            had_content = bool(self._classes)
            self._publish({}, {})
            if had_content:
                self._notify(())

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def on_update(self, listener: CacheUpdateListener) -> Callable[[], None]:
        """Register ``listener``; returns an idempotent unsubscribe callable."""
        with self._lock:
            listener_id = self._next_listener_id
            self._next_listener_id += 1
            self._listeners[listener_id] = listener

        def unsubscribe() -> None:
            with self._lock:
                self._listeners.pop(listener_id, None)

        return unsubscribe

    # ------------------------------------------------------------------
    # Internals (caller holds the lock)
    # ------------------------------------------------------------------

    @staticmethod
    def _add_into(
        work: dict[str, DeprecatedClass],
        files: dict[str, frozenset[str]],
        classes: Iterable[DeprecatedClass],
    ) -> list[str]:
        touched: dict[str, None] = {}
        for deprecated in classes:
            name = deprecated.class_name
            previous = work.get(name)
            if previous is not None and previous.source_file != deprecated.source_file:
                remaining = files.get(previous.source_file, frozenset()) - {name}
                if remaining:
                    files[previous.source_file] = remaining
                else:
                    files.pop(previous.source_file, None)
            work[name] = deprecated
            files[deprecated.source_file] = files.get(deprecated.source_file, frozenset()) | {name}
            touched[deprecated.source_file] = None
        return list(touched)

    @staticmethod
    def _remove_from(
        work: dict[str, DeprecatedClass],
        files: dict[str, frozenset[str]],
        path: str,
    ) -> int:
        removed = 0
        for name in files.pop(path, frozenset()):
            current = work.get(name)
            if current is not None and current.source_file == path:
                del work[name]
                removed += 1
        return removed

    def _publish(
        self,
        classes: dict[str, DeprecatedClass],
        files: dict[str, frozenset[str]],
    ) -> None:
        self._classes = classes
        self._file_to_classes = files
        self._snapshot = MappingProxyType(classes)

    def _notify(self, modified_files: tuple[str, ...]) -> None:
        event = CacheUpdateEvent(size=len(self._classes), modified_files=modified_files)
        for listener in list(self._listeners.values()):
            try:
                listener(event)
            except Exception:
                self._log.exception("cache_listener_failed", size=event.size)

