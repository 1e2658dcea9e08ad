"""Filesystem watching for stylesheet changes."""

from deprecheck.daemon.watcher import StylesheetWatcher

__all__ = ["StylesheetWatcher"]
