"""Domain records shared by the parser, scanner, detector and cache."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True, slots=True)
class DeprecatedClass:
    """A CSS class marked deprecated by a ``--deprecated`` property.

    Attributes:
        class_name: Class name without the leading dot
        message: Free-text message from the ``--deprecated`` value
        source_file: Absolute path of the stylesheet that declared it
        line: 1-based line of the declaring selector, when known
    """

    class_name: str
    message: str
    source_file: str
    line: int | None = None


DeclarationMap = Mapping[str, DeprecatedClass]
"""Read-only view from class name to its declaration."""


@dataclass(frozen=True, slots=True)
class ClassUsage:
    """One located occurrence of a deprecated class in a text buffer.

    ``line`` is 0-based; ``end_char`` is exclusive.
    """

    class_name: str
    line: int
    start_char: int
    end_char: int
    deprecated_info: DeprecatedClass


class FileChangeType(StrEnum):
    """Kind of stylesheet change reported by a watcher."""

    CREATED = "created"
    CHANGED = "changed"
    DELETED = "deleted"


@dataclass(frozen=True, slots=True)
class FileChangeEvent:
    """A single file change from a watcher."""

    file_path: str
    type: FileChangeType


@dataclass(frozen=True, slots=True)
class CacheUpdateEvent:
    """Emitted by the cache after each mutation that changed its contents."""

    size: int
    modified_files: tuple[str, ...]
