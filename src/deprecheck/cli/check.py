"""deprecheck check - report usages of deprecated classes."""

import asyncio
import json
import sys
from pathlib import Path

import click

from deprecheck.cli.utils import build_engine
from deprecheck.core.progress import pluralize, spinner, status
from deprecheck.diagnostics import DiagnosticResult, DiagnosticSeverity, to_diagnostics


def format_result(result: DiagnosticResult, severity: DiagnosticSeverity) -> list[str]:
    """``path:line:col: severity: message [class]`` lines, 1-based positions."""
    return [
        f"{result.path}:{d.range.start.line + 1}:{d.range.start.character + 1}: "
        f"{severity.value}: {d.message} [{d.code}]"
        for d in to_diagnostics(result.usages, severity)
    ]


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Output format",
)
@click.pass_context
def check_command(ctx: click.Context, path: Path, output_format: str) -> None:
    """Report usages of deprecated classes in files under PATH.

    Exits with status 1 when any usage is found.
    """
    engine = build_engine(
        path,
        verbose=ctx.obj.get("verbose", False),
        config_file=ctx.obj.get("config_file"),
    )
    severity = DiagnosticSeverity.parse(engine.config.diagnostics.severity)

    with spinner("Scanning stylesheets"):
        asyncio.run(engine.refresh())
    results = engine.check_workspace()
    total = sum(len(r.usages) for r in results)

    if output_format == "json":
        payload = [
            {"path": r.path, "diagnostics": [d.to_dict() for d in to_diagnostics(r.usages, severity)]}
            for r in results
        ]
        click.echo(json.dumps(payload, indent=2))
    else:
        for result in results:
            for line in format_result(result, severity):
                click.echo(line)
        summary = (
            f"{pluralize(total, 'usage')} of deprecated classes in "
            f"{pluralize(len(results), 'file')}"
        )
        status(summary, style="warning" if total else "success")

    if total:
        sys.exit(1)
