"""CLI utilities."""

from pathlib import Path

import click

from deprecheck.config.loader import load_config
from deprecheck.config.models import DeprecheckConfig
from deprecheck.core.errors import ConfigError, ScanError
from deprecheck.core.logging import configure_logging
from deprecheck.engine import DeprecationEngine, find_project_root


def resolve_root(path: Path, *, discover: bool = False) -> Path:
    """Resolve the workspace root for a command.

    Args:
        path: Path given on the command line
        discover: Walk up to the nearest project root (package.json, tailwind config)

    Raises:
        click.ClickException: If the path is not a directory
    """
    root = path.resolve()
    if not root.is_dir():
        raise click.ClickException(str(ScanError.root_not_found(str(root))))
    return find_project_root(root) if discover else root


def load_cli_config(root: Path, *, verbose: bool, config_file: Path | None = None) -> DeprecheckConfig:
    """Load config for ``root`` and apply its logging section.

    ``-v`` forces DEBUG regardless of the configured level. ``config_file``
    replaces the repo config file when given.

    Raises:
        click.ClickException: On invalid configuration
    """
    try:
        config = load_config(root, config_file=config_file)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)
    return config


def build_engine(
    path: Path,
    *,
    verbose: bool,
    config_file: Path | None = None,
    discover: bool = False,
) -> DeprecationEngine:
    root = resolve_root(path, discover=discover)
    config = load_cli_config(root, verbose=verbose, config_file=config_file)
    return DeprecationEngine(config, root)
