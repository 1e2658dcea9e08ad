"""Regex helpers for matching class names as whole tokens.

Class names are hyphen-delimited, so a "word" here is ``[\\w-]``, not the
plain ``\\w`` that ``\\b`` uses: ``tw-badge`` must not match inside
``tw-badge-large``.
"""

from __future__ import annotations

import re
from functools import lru_cache


def escape_regex(text: str) -> str:
    """Escape regex metacharacters so ``text`` matches literally."""
    return re.escape(text)


def whole_class_pattern(class_name: str) -> str:
    """Pattern source matching ``class_name`` not adjoined by word or hyphen chars."""
    return rf"(?<![\w-]){escape_regex(class_name)}(?![\w-])"


@lru_cache(maxsize=4096)
def whole_class_regex(class_name: str, flags: int = 0) -> re.Pattern[str]:
    """Compiled whole-class regex (cached per class name and flags)."""
    return re.compile(whole_class_pattern(class_name), flags)


def find_whole_class(text: str, class_name: str) -> list[int]:
    """Start offsets of every whole-class occurrence of ``class_name`` in ``text``."""
    return [m.start() for m in whole_class_regex(class_name).finditer(text)]
