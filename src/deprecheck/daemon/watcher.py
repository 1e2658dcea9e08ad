"""Stylesheet watcher using watchfiles for async filesystem monitoring.

Design:
- Python walks the workspace respecting the exclude list
- Builds an explicit list of directories to watch
- Passes them to awatch with recursive=False (one inotify watch per dir)
- Restarts awatch when a new directory appears so it gets a watch too
- Keeps only stylesheet paths and batches them with a sliding-window debounce
- Delivers batches of FileChangeEvent, latest change kind per path
- Runs the handler in a worker thread so a slow rescan never stalls the loop
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import structlog
from watchfiles import Change, awatch

from deprecheck.core.excludes import DEFAULT_EXCLUDE_DIRS, is_excluded_path, should_prune_dir
from deprecheck.core.file_categories import is_stylesheet
from deprecheck.core.progress import pluralize
from deprecheck.types import FileChangeEvent, FileChangeType

logger = structlog.get_logger()

DEBOUNCE_WINDOW_SEC = 0.3  # Sliding window for batching rapid changes
MAX_DEBOUNCE_WAIT_SEC = 2.0  # Maximum wait before forcing flush

_CHANGE_TYPES: dict[Change, FileChangeType] = {
    Change.added: FileChangeType.CREATED,
    Change.modified: FileChangeType.CHANGED,
    Change.deleted: FileChangeType.DELETED,
}


def to_change_type(change: Change) -> FileChangeType:
    return _CHANGE_TYPES[change]


def _collect_watch_dirs(root: Path, exclude_dirs: frozenset[str]) -> list[Path]:
    """Walk the workspace and collect every directory that is not pruned.

    The root itself is always included.
    """
    dirs: list[Path] = [root]
    try:
        for dirpath, dirnames, _filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if not should_prune_dir(d, exclude_dirs))
            for d in dirnames:
                dirs.append(Path(dirpath) / d)
    except OSError:
        pass
    return dirs


def _summarize_events(events: list[FileChangeEvent]) -> str:
    """Summary like "2 changed, 1 deleted" in a fixed kind order."""
    parts: list[str] = []
    for kind in FileChangeType:
        count = sum(1 for event in events if event.type is kind)
        if count:
            parts.append(f"{count} {kind.value}")
    return ", ".join(parts)


@dataclass
class StylesheetWatcher:
    """
    Async stylesheet watcher with sliding-window debouncing.

    - Changes are buffered until ``debounce_window`` of quiet time
    - ``max_debounce_wait`` caps the delay under continuous changes
    - Within one batch, the most recent change kind for a path wins
    - ``on_events`` runs off the event loop, one batch at a time
    """

    root: Path
    on_events: Callable[[list[FileChangeEvent]], None]
    exclude_dirs: tuple[str, ...] = DEFAULT_EXCLUDE_DIRS
    debounce_window: float = DEBOUNCE_WINDOW_SEC
    max_debounce_wait: float = MAX_DEBOUNCE_WAIT_SEC

    _excluded: frozenset[str] = field(init=False)
    _watch_task: asyncio.Task[None] | None = field(default=None, init=False)
    _stop_event: asyncio.Event = field(default_factory=asyncio.Event, init=False)
    _pending: dict[Path, FileChangeType] = field(default_factory=dict, init=False)
    _last_change_time: float = field(default=0.0, init=False)
    _first_change_time: float = field(default=0.0, init=False)
    _debounce_task: asyncio.Task[None] | None = field(default=None, init=False)
    _watched_dirs: set[Path] = field(default_factory=set, init=False)

    def __post_init__(self) -> None:
        self.root = self.root.absolute()
        self._excluded = frozenset(self.exclude_dirs)

    @property
    def is_running(self) -> bool:
        return self._watch_task is not None and not self._watch_task.done()

    async def start(self) -> None:
        """Start watching for stylesheet changes."""
        if self._watch_task is not None:
            return

        self._stop_event.clear()
        self._watch_task = asyncio.create_task(self._watch_loop())
        logger.info(
            "stylesheet_watcher_started",
            root=str(self.root),
            debounce_window=self.debounce_window,
        )

    async def stop(self) -> None:
        """Stop watching, flushing anything still pending."""
        self._stop_event.set()

        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._debounce_task
            self._debounce_task = None

        if self._pending:
            await self._flush_pending()

        if self._watch_task is not None:
            self._watch_task.cancel()
            with contextlib.suppress(asyncio.CancelledError, asyncio.TimeoutError):
                await asyncio.wait_for(self._watch_task, timeout=2.0)
            self._watch_task = None

        logger.info("stylesheet_watcher_stopped")

    def accepts(self, path: Path) -> bool:
        """Check if a path is a stylesheet outside excluded directories."""
        try:
            rel_path = path.relative_to(self.root)
        except ValueError:
            return False
        return is_stylesheet(path) and not is_excluded_path(rel_path.parts, self._excluded)

    def _queue_change(self, path: Path, kind: FileChangeType) -> None:
        now = time.monotonic()

        if not self._pending:
            self._first_change_time = now

        # Re-insert so iteration order follows the latest change
        self._pending.pop(path, None)
        self._pending[path] = kind
        self._last_change_time = now

    def _should_flush(self) -> bool:
        if not self._pending:
            return False

        now = time.monotonic()
        time_since_last = now - self._last_change_time
        time_since_first = now - self._first_change_time

        return time_since_last >= self.debounce_window or time_since_first >= self.max_debounce_wait

    async def _flush_pending(self) -> None:
        if not self._pending:
            return

        events = [FileChangeEvent(file_path=str(path), type=kind) for path, kind in self._pending.items()]
        self._pending.clear()
        self._first_change_time = 0.0
        self._last_change_time = 0.0

        logger.info(
            "stylesheet_changes_detected",
            count=pluralize(len(events), "file"),
            summary=_summarize_events(events),
        )

        try:
            await asyncio.to_thread(self.on_events, events)
        except Exception:
            logger.exception("stylesheet_change_handler_failed", count=len(events))

    async def _debounce_flush_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                await asyncio.sleep(0.05)
                if self._should_flush():
                    await self._flush_pending()
        except asyncio.CancelledError:
            pass

    def _handle_changes(self, changes: set[tuple[Change, str]]) -> bool:
        """Queue the stylesheet changes in a batch.

        Returns True if a watcher restart is needed (new directories detected).
        """
        needs_restart = False

        for change, path_str in changes:
            path = Path(path_str)

            if change == Change.added and path.is_dir():
                try:
                    rel_parts = path.relative_to(self.root).parts
                except ValueError:
                    continue
                if path not in self._watched_dirs and not any(
                    should_prune_dir(part, self._excluded) for part in rel_parts
                ):
                    logger.info("new_directory_detected", path=str(path))
                    needs_restart = True
                continue

            if not self.accepts(path):
                continue

            kind = to_change_type(change)
            self._queue_change(path, kind)
            logger.debug("stylesheet_queued", path=path_str, change_type=kind.value)

        return needs_restart

    async def _watch_loop(self) -> None:
        self._debounce_task = asyncio.create_task(self._debounce_flush_loop())

        try:
            while not self._stop_event.is_set():
                watch_dirs = _collect_watch_dirs(self.root, self._excluded)
                self._watched_dirs = set(watch_dirs)
                logger.info("watch_dirs_collected", count=len(watch_dirs), root=str(self.root))

                try:
                    async for changes in awatch(
                        *watch_dirs,
                        recursive=False,
                        step=100,
                        rust_timeout=10_000,
                        stop_event=self._stop_event,
                        ignore_permission_denied=True,
                    ):
                        if self._handle_changes(changes):
                            logger.info("watcher_restart_requested", reason="new_directories")
                            break
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    if self._stop_event.is_set():
                        return
                    logger.error("watcher_error", error=str(e))
                    await asyncio.sleep(1.0)
        except asyncio.CancelledError:
            pass
        finally:
            if self._debounce_task:
                self._debounce_task.cancel()
