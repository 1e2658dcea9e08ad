"""Built-in class-usage patterns.

All patterns are case-insensitive and line-scoped. Order matters only for
the order in which usages on one line are reported.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from deprecheck.core.file_categories import FileCategory
from deprecheck.detection.patterns import ClassPattern, PatternMatch, regex_pattern

CLASS_UTILITY_FUNCTIONS: tuple[str, ...] = ("clsx", "classNames", "cn", "twMerge", "cva")

_UTILS_ALTERNATION = "|".join(CLASS_UTILITY_FUNCTIONS)

HTML_CLASS = regex_pattern(
    id="html-class",
    name="HTML class",
    description='HTML class attribute: class="..."',
    regex=r"""class\s*=\s*["']([^"']+)["']""",
    categories=(
        FileCategory.HTML,
        FileCategory.ANGULAR,
        FileCategory.TEMPLATE,
        FileCategory.DOTNET,
        FileCategory.VUE,
        FileCategory.SVELTE,
        FileCategory.ASTRO,
    ),
    flags=re.IGNORECASE,
)

REACT_CLASSNAME = regex_pattern(
    id="react-classname",
    name="React className",
    description='React className attribute: className="..."',
    regex=r"""className\s*=\s*["']([^"']+)["']""",
    categories=(FileCategory.REACT,),
    flags=re.IGNORECASE,
)

REACT_TEMPLATE_LITERAL = regex_pattern(
    id="react-template-literal",
    name="React template literal",
    description="React className with template literal: className={`...`}",
    regex=r"className\s*=\s*\{`([^`]+)`\}",
    categories=(FileCategory.REACT,),
    flags=re.IGNORECASE,
)

CLASS_UTILS = regex_pattern(
    id="class-utils",
    name="Class utilities",
    description="Class utility functions: clsx(), classNames(), cn(), twMerge(), cva()",
    regex=rf"""(?:{_UTILS_ALTERNATION})\s*\(\s*["']([^"']+)["']""",
    categories=(FileCategory.REACT,),
    flags=re.IGNORECASE,
)

VUE_CLASS_BINDING = regex_pattern(
    id="vue-class-binding",
    name="Vue class binding",
    description='Vue class binding: :class="..."',
    regex=r""":class\s*=\s*["']([^"']+)["']""",
    categories=(FileCategory.VUE,),
    flags=re.IGNORECASE,
)

ANGULAR_CLASS_BINDING = regex_pattern(
    id="angular-class-binding",
    name="Angular class binding",
    description='Angular class binding: [class]="..."',
    regex=r"""\[class\]\s*=\s*["']([^"']+)["']""",
    categories=(FileCategory.ANGULAR,),
    flags=re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class NgClassPattern:
    """Angular ``[ngClass]="{ 'a b': cond, 'c': other }"`` object bindings.

    Each quoted object key is reported as its own match, so the class tokens
    are the key contents rather than the raw ``'key': expr`` text.
    """

    id: str = "angular-ngclass"
    name: str = "Angular ngClass"
    description: str = 'Angular ngClass binding: [ngClass]="{...}"'
    applicable_categories: frozenset[str] = frozenset({FileCategory.ANGULAR})

    _BINDING_RE = re.compile(r"""\[ngClass\]\s*=\s*(["'])\{([^}]+)\}\1""", re.IGNORECASE)
    _KEY_RE = re.compile(r"""(["'])([^"']+)\1\s*:""")

    def find_matches(self, line: str) -> list[PatternMatch]:
        matches: list[PatternMatch] = []
        for binding in self._BINDING_RE.finditer(line):
            body_start = binding.start(2)
            for key in self._KEY_RE.finditer(binding.group(2)):
                matches.append(
                    PatternMatch(
                        full_match=binding.group(0),
                        classes_string=key.group(2),
                        match_index=binding.start(),
                        classes_offset=body_start + key.start(2) - binding.start(),
                    )
                )
        return matches


ANGULAR_NGCLASS = NgClassPattern()

TAILWIND_APPLY = regex_pattern(
    id="tailwind-apply",
    name="Tailwind @apply",
    description="Tailwind @apply directive: @apply foo bar;",
    regex=r"@apply\s+([^;]+);",
    categories=(FileCategory.CSS,),
    flags=re.IGNORECASE,
)

BUILTIN_PATTERNS: tuple[ClassPattern, ...] = (
    HTML_CLASS,
    REACT_CLASSNAME,
    REACT_TEMPLATE_LITERAL,
    CLASS_UTILS,
    VUE_CLASS_BINDING,
    ANGULAR_CLASS_BINDING,
    ANGULAR_NGCLASS,
    TAILWIND_APPLY,
)
