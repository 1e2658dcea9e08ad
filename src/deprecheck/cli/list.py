"""deprecheck list - show deprecated classes declared in a workspace."""

import asyncio
import json
from pathlib import Path

import click
from rich.table import Table

from deprecheck.cli.utils import build_engine
from deprecheck.core.progress import get_console, pluralize, spinner


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def list_command(ctx: click.Context, path: Path, as_json: bool) -> None:
    """List deprecated classes declared in stylesheets under PATH.

    PATH is the workspace root (default: current directory).
    """
    engine = build_engine(
        path,
        verbose=ctx.obj.get("verbose", False),
        config_file=ctx.obj.get("config_file"),
    )
    with spinner("Scanning stylesheets"):
        asyncio.run(engine.refresh())

    classes = sorted(engine.cache.get_classes().values(), key=lambda c: c.class_name)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "class_name": c.class_name,
                        "message": c.message,
                        "source_file": c.source_file,
                        "line": c.line,
                    }
                    for c in classes
                ],
                indent=2,
            )
        )
        return

    console = get_console()
    if not classes:
        console.print("No deprecated classes found.")
        return

    table = Table(title=f"{pluralize(len(classes), 'deprecated class', 'deprecated classes')}")
    table.add_column("Class", style="yellow")
    table.add_column("Message")
    table.add_column("Declared in", style="dim")
    for c in classes:
        location = c.source_file if c.line is None else f"{c.source_file}:{c.line}"
        table.add_row(f".{c.class_name}", c.message, location)
    console.print(table)
