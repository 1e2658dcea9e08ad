"""Locate usages of deprecated classes in source text.

Detection works on raw text, one line at a time, with no state carried
between lines or between calls. Each line goes through two phases:

1. Pattern phase: every applicable registry pattern is run against the line
   and the class tokens of each match are looked up in the declarations.
2. Fallback phase (optional): every declared class name is searched for
   directly, and a hit is kept only if the text to its left opens a
   recognised class context (``class="``, ``@apply``, ``clsx("`` ...).

Usages are de-duplicated on (line, start_char, class_name). Within a line,
pattern-phase usages precede fallback-phase usages.
"""

from __future__ import annotations

import re

from deprecheck.core.regex import find_whole_class, whole_class_regex
from deprecheck.detection.builtin_patterns import CLASS_UTILITY_FUNCTIONS
from deprecheck.detection.patterns import ClassPattern, PatternMatch
from deprecheck.detection.registry import PatternRegistry
from deprecheck.types import ClassUsage, DeclarationMap

_UNRESOLVED_MARKERS = ("${", "{")

CLASS_CONTEXT_RES: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"""class\s*=\s*["'][^"']*$""",
        r"""className\s*=\s*["'][^"']*$""",
        r"className\s*=\s*\{`[^`]*$",
        r""":class\s*=\s*["'][^"']*$""",
        r"""\[class\]\s*=\s*["'][^"']*$""",
        r"@apply\s+[^;]*$",
        rf"""(?:{"|".join(CLASS_UTILITY_FUNCTIONS)})\s*\([^)]*["'][^"']*$""",
    )
)

_UsageKey = tuple[int, int, str]


def split_classes(classes_string: str) -> list[str]:
    """Split a class string on whitespace, dropping unresolvable tokens."""
    return [
        token
        for token in classes_string.split()
        if not any(marker in token for marker in _UNRESOLVED_MARKERS)
    ]


def is_in_class_context(line: str, position: int) -> bool:
    """Check whether the text left of ``position`` opens a class context."""
    before = line[:position]
    return any(pattern.search(before) for pattern in CLASS_CONTEXT_RES)


class ClassDetector:
    """Finds deprecated class usages in source text.

    Pure with respect to ``(text, declarations, file_category)``: no I/O,
    inputs are never mutated, no per-document state is held.

    Example::

        detector = ClassDetector()
        usages = detector.find_usages('<div class="old">', {"old": info})
    """

    def __init__(
        self,
        registry: PatternRegistry | None = None,
        *,
        enable_fallback_search: bool = True,
    ) -> None:
        self._registry = registry if registry is not None else PatternRegistry()
        self._enable_fallback_search = enable_fallback_search

    @property
    def registry(self) -> PatternRegistry:
        return self._registry

    @property
    def enable_fallback_search(self) -> bool:
        return self._enable_fallback_search

    def select_patterns(self, file_category: str | None = None) -> list[ClassPattern]:
        """Patterns run for `file_category` (all patterns when None)."""
        if file_category:
            return self._registry.get_for_category(file_category)
        return self._registry.get_all()

    def find_usages(
        self,
        text: str,
        declarations: DeclarationMap,
        file_category: str | None = None,
    ) -> list[ClassUsage]:
        """Find every usage of a declared class in ``text``.

        Args:
            text: Source text; split into lines on ``\\n``
            declarations: Class name -> declaration snapshot
            file_category: Restricts patterns to this category when given

        Returns:
            Usages in line order. Empty, without scanning, if there are no
            declarations.
        """
        if not declarations:
            return []

        patterns = self.select_patterns(file_category)

        usages: list[ClassUsage] = []
        seen: set[_UsageKey] = set()

        for line_index, line in enumerate(text.split("\n")):
            for pattern in patterns:
                for match in pattern.find_matches(line):
                    self._collect_from_match(match, line_index, declarations, usages, seen)

            if self._enable_fallback_search:
                self._collect_direct(line, line_index, declarations, usages, seen)

        return usages

    def _collect_from_match(
        self,
        match: PatternMatch,
        line_index: int,
        declarations: DeclarationMap,
        usages: list[ClassUsage],
        seen: set[_UsageKey],
    ) -> None:
        # dict.fromkeys: unique tokens, first-seen order
        for class_name in dict.fromkeys(split_classes(match.classes_string)):
            info = declarations.get(class_name)
            if info is None:
                continue
            for offset in find_whole_class(match.classes_string, class_name):
                start = match.classes_start + offset
                key = (line_index, start, class_name)
                if key in seen:
                    continue
                seen.add(key)
                usages.append(
                    ClassUsage(
                        class_name=class_name,
                        line=line_index,
                        start_char=start,
                        end_char=start + len(class_name),
                        deprecated_info=info,
                    )
                )

    def _collect_direct(
        self,
        line: str,
        line_index: int,
        declarations: DeclarationMap,
        usages: list[ClassUsage],
        seen: set[_UsageKey],
    ) -> None:
        for class_name, info in declarations.items():
            if class_name not in line:
                continue
            for match in whole_class_regex(class_name).finditer(line):
                start = match.start()
                key = (line_index, start, class_name)
                if key in seen or not is_in_class_context(line, start):
                    continue
                seen.add(key)
                usages.append(
                    ClassUsage(
                        class_name=class_name,
                        line=line_index,
                        start_char=start,
                        end_char=start + len(class_name),
                        deprecated_info=info,
                    )
                )

