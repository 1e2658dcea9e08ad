"""Registry of class-usage patterns keyed by id.

Registration is expected to happen at startup; after that the registry is
read-mostly and can be shared by detectors without locking.
"""

from __future__ import annotations

from collections.abc import Iterable

from deprecheck.detection.builtin_patterns import BUILTIN_PATTERNS
from deprecheck.detection.patterns import ClassPattern


class PatternRegistry:
    """Ordered id -> pattern mapping, filterable by file category.

    Replacing a pattern keeps its original position; new ids are appended.
    """

    def __init__(
        self,
        patterns: Iterable[ClassPattern] | None = None,
        *,
        include_builtins: bool = True,
    ) -> None:
        self._patterns: dict[str, ClassPattern] = {}
        if include_builtins:
            for pattern in BUILTIN_PATTERNS:
                self.register(pattern)
        for pattern in patterns or ():
            self.register(pattern)

    def register(self, pattern: ClassPattern) -> None:
        """Add a pattern, replacing any existing pattern with the same id."""
        self._patterns[pattern.id] = pattern

    def unregister(self, pattern_id: str) -> bool:
        """Remove a pattern by id. Returns True if it was registered."""
        return self._patterns.pop(pattern_id, None) is not None

    def get(self, pattern_id: str) -> ClassPattern | None:
        return self._patterns.get(pattern_id)

    def get_all(self) -> list[ClassPattern]:
        return list(self._patterns.values())

    def get_for_category(self, category: str) -> list[ClassPattern]:
        """Patterns with no category restriction plus those listing ``category``."""
        return [
            pattern
            for pattern in self._patterns.values()
            if not pattern.applicable_categories or category in pattern.applicable_categories
        ]

    @property
    def size(self) -> int:
        return len(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, pattern_id: object) -> bool:
        return pattern_id in self._patterns
