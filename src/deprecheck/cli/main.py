"""deprecheck CLI."""

from pathlib import Path
from typing import Any

import click

from deprecheck.cli.check import check_command
from deprecheck.cli.init import init_command
from deprecheck.cli.list import list_command
from deprecheck.cli.watch import watch_command
from deprecheck.core.errors import DeprecheckError, InternalError
from deprecheck.core.logging import configure_logging, get_logger


class DeprecheckGroup(click.Group):
    """Command group that reports unexpected failures as internal errors."""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except (click.ClickException, click.exceptions.Exit, click.Abort):
            raise
        except DeprecheckError as e:
            raise click.ClickException(str(e)) from e
        except Exception as e:
            error = InternalError.unexpected(str(e), exception=type(e).__name__)
            get_logger("cli").exception("command_failed", **error.to_dict())
            raise click.ClickException(str(error)) from e


@click.group(cls=DeprecheckGroup)
@click.version_option(version="0.1.0", prog_name="deprecheck")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file to use instead of .deprecheck/config.yaml",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_file: Path | None) -> None:
    """deprecheck - find usages of CSS classes marked with --deprecated."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_file"] = config_file
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(init_command, name="init")
cli.add_command(list_command, name="list")
cli.add_command(check_command, name="check")
cli.add_command(watch_command, name="watch")


if __name__ == "__main__":
    cli()
