"""Canonical file-category definitions.

A file category is a coarse classification of a source file (html, react,
vue, ...) used to select which class-usage patterns apply, and whether a
file is eligible for detection at all.

Design decisions:
1. Matching is by case-insensitive suffix, not by ``Path.suffix``, because
   several entries are compound (``.component.ts``, ``.blade.php``).
2. When several suffixes match, the longest one wins. ``foo.component.ts``
   is angular, ``foo.ts`` is react. Equal-length ties go to declaration
   order.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from pathlib import PurePath


class FileCategory(StrEnum):
    """Supported file categories."""

    HTML = "html"
    REACT = "react"
    VUE = "vue"
    ANGULAR = "angular"
    SVELTE = "svelte"
    ASTRO = "astro"
    TEMPLATE = "template"
    CSS = "css"
    DOTNET = "dotnet"


@dataclass(frozen=True, slots=True)
class CategoryDefinition:
    """Extensions claimed by one category.

    Attributes:
        category: The category these extensions map to
        extensions: Suffixes including the leading dot, lowercase
    """

    category: FileCategory
    extensions: tuple[str, ...]


ALL_CATEGORIES: tuple[CategoryDefinition, ...] = (
    CategoryDefinition(FileCategory.HTML, (".html", ".htm")),
    CategoryDefinition(FileCategory.REACT, (".jsx", ".tsx", ".js", ".ts")),
    CategoryDefinition(FileCategory.VUE, (".vue",)),
    CategoryDefinition(FileCategory.ANGULAR, (".component.ts", ".component.html")),
    CategoryDefinition(FileCategory.SVELTE, (".svelte",)),
    CategoryDefinition(FileCategory.ASTRO, (".astro",)),
    CategoryDefinition(FileCategory.TEMPLATE, (".php", ".blade.php", ".erb", ".twig", ".mdx")),
    CategoryDefinition(FileCategory.CSS, (".css", ".scss", ".less")),
    CategoryDefinition(FileCategory.DOTNET, (".cshtml", ".razor", ".aspx")),
)

FILE_EXTENSIONS: dict[FileCategory, tuple[str, ...]] = {
    definition.category: definition.extensions for definition in ALL_CATEGORIES
}

STYLESHEET_EXTENSIONS: tuple[str, ...] = FILE_EXTENSIONS[FileCategory.CSS]


def all_supported_extensions() -> tuple[str, ...]:
    """All supported suffixes as a flat tuple, in declaration order."""
    return tuple(ext for definition in ALL_CATEGORIES for ext in definition.extensions)


def _name(path: str | PurePath) -> str:
    return PurePath(path).name.lower()


def get_file_category(path: str | PurePath) -> FileCategory | None:
    """Get the file category for a path, or None if unsupported."""
    name = _name(path)
    best: FileCategory | None = None
    best_len = 0
    for definition in ALL_CATEGORIES:
        for ext in definition.extensions:
            if name.endswith(ext) and len(ext) > best_len:
                best = definition.category
                best_len = len(ext)
    return best


def should_scan_file(path: str | PurePath) -> bool:
    """Check if a file is eligible for usage detection."""
    name = _name(path)
    return any(name.endswith(ext) for ext in all_supported_extensions())


def is_stylesheet(path: str | PurePath) -> bool:
    """Check if a file may carry deprecation declarations."""
    name = _name(path)
    return any(name.endswith(ext) for ext in STYLESHEET_EXTENSIONS)
