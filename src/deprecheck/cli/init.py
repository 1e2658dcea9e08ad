"""deprecheck init - write a starter configuration file."""

from pathlib import Path

import click

from deprecheck.config.loader import repo_config_path
from deprecheck.config.user_config import write_user_config
from deprecheck.core.progress import status


def initialize_config(root: Path, *, force: bool = False) -> bool:
    """Write ``.deprecheck/config.yaml`` under ``root``, returning True on success."""
    path = repo_config_path(root)
    if path.exists() and not force:
        status(f"Already initialized: {path}", style="info")
        status("Use --force to overwrite", style="info")
        return False

    write_user_config(path)
    status(f"Wrote {path}", style="success")
    return True


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def init_command(path: Path, force: bool) -> None:
    """Create a commented .deprecheck/config.yaml in PATH."""
    initialize_config(path.resolve(), force=force)
