"""Directory exclusion defaults for stylesheet discovery.

HARDCODED_DIRS are never traversed, regardless of configuration.
DEFAULT_EXCLUDE_DIRS is the configurable default list and can be replaced
through ``scan.exclude_dirs``.
"""

from __future__ import annotations

HARDCODED_DIRS: frozenset[str] = frozenset(
    (
        # VCS internals
        ".git",
        ".svn",
        ".hg",
        ".bzr",
        # Deprecheck data
        ".deprecheck",
    )
)

DEFAULT_EXCLUDE_DIRS: tuple[str, ...] = ("node_modules", "dist", "build", ".git")


def is_hardcoded_dir(name: str) -> bool:
    """Check if a directory name is in the never-traverse set."""
    return name in HARDCODED_DIRS


def should_prune_dir(name: str, exclude_dirs: frozenset[str] | set[str] | tuple[str, ...]) -> bool:
    """Check if a directory should be skipped during traversal.

    Args:
        name: Directory name (not path), e.g. "node_modules"
        exclude_dirs: Configured exclusion list
    """
    return is_hardcoded_dir(name) or name in exclude_dirs


def is_excluded_path(rel_parts: tuple[str, ...], exclude_dirs: frozenset[str] | set[str] | tuple[str, ...]) -> bool:
    """Check if any directory component of a relative path is excluded.

    The last component is the file name itself and is not checked.
    """
    return any(should_prune_dir(part, exclude_dirs) for part in rel_parts[:-1])
