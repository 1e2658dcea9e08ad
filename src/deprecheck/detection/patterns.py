"""Class-usage pattern abstraction.

A pattern locates class-bearing syntax (an attribute, a function call, a
directive) within one line of source text. Patterns are looked up through
a ``PatternRegistry``; adding support for a new syntax means registering a
new pattern, not touching the detector.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class PatternMatch:
    """One match of a pattern within a line.

    Attributes:
        full_match: The full matched text (e.g. ``class="foo bar"``)
        classes_string: The substring holding class tokens (e.g. ``foo bar``)
        match_index: Offset of ``full_match`` within the line
        classes_offset: Offset of ``classes_string`` within ``full_match``
    """

    full_match: str
    classes_string: str
    match_index: int
    classes_offset: int

    @property
    def classes_start(self) -> int:
        """Offset of ``classes_string`` within the line."""
        return self.match_index + self.classes_offset


@runtime_checkable
class ClassPattern(Protocol):
    """Capability interface every pattern satisfies."""

    @property
    def id(self) -> str: ...

    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str: ...

    @property
    def applicable_categories(self) -> frozenset[str]:
        """Categories this pattern applies to. Empty means all categories."""
        ...

    def find_matches(self, line: str) -> list[PatternMatch]: ...


@dataclass(frozen=True, slots=True)
class RegexClassPattern:
    """A ``ClassPattern`` driven by one compiled regex.

    The class tokens are taken from capture group ``classes_group``.
    Matches whose group is empty or missing are dropped.
    """

    id: str
    name: str
    description: str
    regex: re.Pattern[str]
    classes_group: int = 1
    applicable_categories: frozenset[str] = field(default_factory=frozenset)

    def find_matches(self, line: str) -> list[PatternMatch]:
        matches: list[PatternMatch] = []
        for match in self.regex.finditer(line):
            classes_string = match.group(self.classes_group)
            if not classes_string:
                continue
            matches.append(
                PatternMatch(
                    full_match=match.group(0),
                    classes_string=classes_string,
                    match_index=match.start(),
                    classes_offset=match.start(self.classes_group) - match.start(),
                )
            )
        return matches


def regex_pattern(
    *,
    id: str,
    name: str,
    description: str,
    regex: str | re.Pattern[str],
    classes_group: int = 1,
    categories: Iterable[str] = (),
    flags: int = 0,
) -> RegexClassPattern:
    """Build a ``RegexClassPattern``, compiling ``regex`` if given as a string."""
    compiled = re.compile(regex, flags) if isinstance(regex, str) else regex
    return RegexClassPattern(
        id=id,
        name=name,
        description=description,
        regex=compiled,
        classes_group=classes_group,
        applicable_categories=frozenset(categories),
    )
