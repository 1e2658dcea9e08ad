"""Extract ``--deprecated`` declarations from stylesheet text.

This is a regex scan, not a CSS grammar. Two independent passes run over
the raw text and their results are concatenated:

1. Rule blocks: ``.a, .b { ... }`` where the body may hold one level of
   nested braces. Every ``.class`` in the selector list of a block whose
   body carries ``--deprecated: "..."`` is reported. ``#id`` selectors are
   matched by the block pattern but never reported.
2. Parent-selector shorthand: ``&.modifier { ... }``.

A deprecated property nested one level deep is seen by both passes, so
``.button { &.old { --deprecated: "x"; } }`` reports ``button`` and
``old``. Duplicates across the two passes are harmless because the cache
keeps one entry per class name.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from deprecheck.types import DeprecatedClass

RULE_BLOCK_RE = re.compile(
    r"([.#][\w-]+(?:\s*,\s*[.#][\w-]+)*)\s*\{([^{}]*(?:\{[^{}]*\}[^{}]*)*)\}"
)

DEPRECATED_PROPERTY_RE = re.compile(r"""--deprecated\s*:\s*["']([^"']+)["']""")

CLASS_NAME_RE = re.compile(r"\.([A-Za-z_][\w-]*)")

NESTED_PARENT_RE = re.compile(r"&(\.[\w-]+)\s*\{([^{}]*)\}")


@dataclass(frozen=True, slots=True)
class CssParseResult:
    """Outcome of parsing one stylesheet.

    Attributes:
        classes: Deprecated classes in source order (rule blocks first)
        errors: Non-fatal parse error messages
    """

    classes: tuple[DeprecatedClass, ...] = ()
    errors: tuple[str, ...] = field(default_factory=tuple)


def _line_at(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def extract_message(block: str) -> str | None:
    """First quoted ``--deprecated`` value in a rule body, if any."""
    match = DEPRECATED_PROPERTY_RE.search(block)
    return match.group(1) if match else None


def _parse_rule_blocks(css: str, source_file: str) -> list[DeprecatedClass]:
    result: list[DeprecatedClass] = []
    for match in RULE_BLOCK_RE.finditer(css):
        selectors, body = match.group(1), match.group(2)
        message = extract_message(body)
        if message is None:
            continue
        line = _line_at(css, match.start())
        for class_match in CLASS_NAME_RE.finditer(selectors):
            result.append(
                DeprecatedClass(
                    class_name=class_match.group(1),
                    message=message,
                    source_file=source_file,
                    line=line,
                )
            )
    return result


def _parse_nested_parent_selectors(css: str, source_file: str) -> list[DeprecatedClass]:
    result: list[DeprecatedClass] = []
    for match in NESTED_PARENT_RE.finditer(css):
        message = extract_message(match.group(2))
        if message is None:
            continue
        result.append(
            DeprecatedClass(
                class_name=match.group(1)[1:],
                message=message,
                source_file=source_file,
                line=_line_at(css, match.start()),
            )
        )
    return result


def parse_css(css: str, source_file: str) -> CssParseResult:
    """Parse stylesheet text for deprecated classes. Never raises.

    Args:
        css: CSS/SCSS/LESS source text
        source_file: Absolute path recorded on every result

    Returns:
        CssParseResult. On an unexpected failure ``classes`` is empty and
        ``errors`` holds one message.

    Example::

        >>> parse_css('.old { --deprecated: "Use .new"; }', "/f.css").classes[0].class_name
        'old'
    """
    try:
        classes = _parse_rule_blocks(css, source_file)
        classes.extend(_parse_nested_parent_selectors(css, source_file))
    except Exception as e:
        return CssParseResult(errors=(f"Failed to parse {source_file}: {e}",))
    return CssParseResult(classes=tuple(classes))
