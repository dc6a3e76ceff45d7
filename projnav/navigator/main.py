"""ProjectNavigator CLI - replay recorded navigator sessions."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from projnav.navigator.replay import ReplayRecord, replay_file, summarize, format_value
from projnav.shared.core.configuration import get_config_manager
from projnav.shared.core.errors import ConfigurationError, ReplayScriptError
from projnav.shared.core.logging_config import configure_logging
from projnav.shared.domain.analytics import NullAnalyticsSink, build_analytics_sink

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="projnav",
    help="Project navigator event graph tools",
    add_completion=False,
)

_STYLES = {"output": "cyan", "analytics": "magenta", "phase": "yellow"}


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_dir: Optional[Path] = typer.Option(
        None, "--config-dir", help="Directory holding defaults/user/project YAML settings"
    ),
    env_file: Optional[Path] = typer.Option(None, "--env-file", help="Load environment from this .env file"),
) -> None:
    """ProjectNavigator - swipe navigation and interactive dismissal."""
    load_dotenv(dotenv_path=env_file)
    try:
        config = get_config_manager(config_dir).get_config()
    except ConfigurationError as e:
        typer.echo(f"✗ {e}", err=True)
        raise typer.Exit(code=2)
    configure_logging(config.logging)
    ctx.obj = config


def _render_table(records: list[ReplayRecord], console: Console) -> None:
    table = Table(title="Navigator replay")
    table.add_column("Step", justify="right")
    table.add_column("Kind")
    table.add_column("Name")
    table.add_column("Value")
    for record in records:
        style = _STYLES.get(record.kind)
        table.add_row(str(record.step), record.kind, record.name, format_value(record.value), style=style)
    console.print(table)


@app.command("replay")
def replay_command(
    ctx: typer.Context,
    script: Path = typer.Argument(..., help="YAML script of navigator inputs"),
    json_output: bool = typer.Option(False, "--json", help="Emit records as JSON"),
    trace_phases: Optional[bool] = typer.Option(
        None, "--trace-phases/--no-trace-phases", help="Log phase changes at DEBUG"
    ),
) -> None:
    """Replay SCRIPT through a fresh navigator and show what it emits."""
    if trace_phases is None:
        trace_phases = ctx.obj.transition.trace_phases if ctx.obj else False
    analytics = build_analytics_sink(ctx.obj.analytics) if ctx.obj else NullAnalyticsSink()

    if not script.is_file():
        typer.echo(f"✗ Script not found: {script}", err=True)
        raise typer.Exit(code=2)

    try:
        records = replay_file(script, trace_phases=trace_phases, analytics=analytics)
    except ReplayScriptError as e:
        logger.error(f"Replay of {script} failed: {e}")
        typer.echo(f"✗ {e}", err=True)
        raise typer.Exit(code=2)

    if json_output:
        typer.echo(json.dumps({
            "records": [record.model_dump(mode="json") for record in records],
            "summary": summarize(records),
        }, indent=2))
        return

    console = Console()
    _render_table(records, console)
    counts = summarize(records)
    console.print(f"{len(records)} records, {sum(counts.values())} events")


def cli_main() -> None:
    app()
