"""CLI entry point for prbot.

Commands:
  review          run one review session for a pull request
  serve           run the webhook receiver that dispatches review sessions
  check-engine    probe the analysis engine executable
"""

from __future__ import annotations

import importlib.metadata
import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from prbot_cli.commands.check_engine import check_engine_cmd
from prbot_cli.commands.review import review_cmd
from prbot_cli.commands.serve import serve_cmd

console = Console()


def _version() -> str:
    try:
        return importlib.metadata.version("prbot")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


@click.group()
@click.version_option(version=_version(), prog_name="prbot")
@click.option(
    "--config",
    "config_path",
    default=".prbot.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRBOT_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Automated pull-request review driven by an external analysis engine."""
    from prbot_core.config import load_config

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["config"] = load_config(config_path)


main.add_command(review_cmd)
main.add_command(serve_cmd)
main.add_command(check_engine_cmd)
