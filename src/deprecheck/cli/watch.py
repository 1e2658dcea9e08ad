"""deprecheck watch - re-report usages whenever stylesheets change."""

import asyncio
import contextlib
from pathlib import Path

import click

from deprecheck.cli.check import format_result
from deprecheck.cli.utils import build_engine
from deprecheck.core.progress import pluralize, status
from deprecheck.daemon.watcher import StylesheetWatcher
from deprecheck.diagnostics import DiagnosticSeverity
from deprecheck.engine import DeprecationEngine
from deprecheck.types import FileChangeEvent


async def _run(engine: DeprecationEngine) -> None:
    assert engine.root is not None
    severity = DiagnosticSeverity.parse(engine.config.diagnostics.severity)

    def report() -> None:
        results = engine.check_workspace()
        for result in results:
            for line in format_result(result, severity):
                click.echo(line)
        total = sum(len(r.usages) for r in results)
        status(f"{pluralize(total, 'usage')} of deprecated classes", style="info")

    count = await engine.refresh()
    status(f"Watching {engine.root} ({pluralize(count, 'deprecated class', 'deprecated classes')})")
    await asyncio.to_thread(report)

    def on_events(events: list[FileChangeEvent]) -> None:
        if engine.handle_file_changes(events):
            report()

    watcher = StylesheetWatcher(
        root=engine.root,
        on_events=on_events,
        exclude_dirs=tuple(engine.config.scan.exclude_dirs),
        debounce_window=engine.config.watcher.debounce_sec,
        max_debounce_wait=engine.config.watcher.max_debounce_wait_sec,
    )
    await watcher.start()
    try:
        await asyncio.Event().wait()
    finally:
        await watcher.stop()
        engine.close()


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def watch_command(ctx: click.Context, path: Path) -> None:
    """Watch stylesheets under PATH and report usages on every change.

    Press Ctrl-C to stop.
    """
    engine = build_engine(
        path,
        verbose=ctx.obj.get("verbose", False),
        config_file=ctx.obj.get("config_file"),
        discover=True,
    )
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_run(engine))
    status("Stopped", style="info")
