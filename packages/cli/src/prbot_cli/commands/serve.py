"""serve command: run the webhook receiver."""

from __future__ import annotations

import click
from rich.console import Console

console = Console()


@click.command("serve")
@click.option("--host", default="0.0.0.0", show_default=True, help="Interface to bind.")
@click.option("--port", default=8080, show_default=True, envvar="PORT", help="Port to listen on.")
@click.pass_context
def serve_cmd(ctx, host: str, port: int):
    """Receive GitHub webhooks and dispatch a review task per trigger.

    \b
    Required environment variables:
      WEBHOOK_SECRET       shared secret configured on the GitHub App
    """
    import uvicorn

    from prbot_dispatch.app import create_app
    from prbot_dispatch.launchers import build_launcher

    config = ctx.obj["config"]
    if not config.get("webhook_secret"):
        raise click.UsageError("WEBHOOK_SECRET environment variable is not set.")

    try:
        launcher = build_launcher(config, config_path=ctx.obj.get("config_path"))
    except ValueError as e:
        raise click.UsageError(str(e))

    console.print(f"[cyan]Listening for webhooks on {host}:{port} ({config.get('launcher')} launcher)[/cyan]")
    uvicorn.run(create_app(config, launcher), host=host, port=port)
