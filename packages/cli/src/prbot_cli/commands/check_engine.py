"""check-engine command: probe the analysis engine."""

from __future__ import annotations

import click
from rich.console import Console

from prbot_core.engine.claude import build_engine

console = Console()


@click.command("check-engine")
@click.pass_context
def check_engine_cmd(ctx):
    """Check that the analysis engine executable responds."""
    engine = build_engine(ctx.obj["config"])
    if engine.is_available():
        console.print(f"[green]Engine available:[/green] {engine.command} ({engine.model})")
        return
    console.print(f"[red]Engine not available:[/red] `{engine.command} --version` failed")
    ctx.exit(1)
