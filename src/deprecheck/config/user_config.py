"""Commented starter config written by ``deprecheck init``.

Only the options users commonly change are written as active values;
everything else is listed as a comment with its default.
"""

from pathlib import Path

from deprecheck.config.models import DeprecheckConfig


def render_user_config(config: DeprecheckConfig | None = None) -> str:
    """Render a commented YAML config for ``config`` (defaults if None)."""
    cfg = config or DeprecheckConfig()

    lines = [
        "# deprecheck configuration",
        "# Env var overrides: DEPRECHECK__<SECTION>__<KEY>",
        "",
        "scan:",
        "  # Stylesheets that may declare deprecations with --deprecated",
        "  css_glob:",
        *(f'    - "{glob}"' for glob in cfg.scan.css_glob),
        "  # Directory names skipped wherever they appear",
        "  exclude_dirs:",
        *(f'    - "{name}"' for name in cfg.scan.exclude_dirs),
        f"  # max_file_size_mb: {cfg.scan.max_file_size_mb:g}",
        "",
        "diagnostics:",
        f"  enable: {'true' if cfg.diagnostics.enable else 'false'}",
        "  # error, warning, information or hint",
        f"  severity: {cfg.diagnostics.severity}",
        "",
        "detection:",
        "  # Direct search for declared names inside class=\"...\", @apply, clsx(...) etc.",
        f"  # enable_fallback_search: {'true' if cfg.detection.enable_fallback_search else 'false'}",
        "",
        "logging:",
        "  # DEBUG, INFO, WARNING, ERROR, CRITICAL",
        f"  level: {cfg.logging.level}",
        "",
    ]
    return "\n".join(lines)


def write_user_config(path: Path, config: DeprecheckConfig | None = None) -> None:
    """Write the commented config file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_user_config(config))
