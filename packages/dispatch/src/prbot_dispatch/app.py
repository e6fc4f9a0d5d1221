"""ASGI app exposing the webhook handler."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from prbot_dispatch.handler import handle_webhook

if TYPE_CHECKING:
    from prbot_dispatch.launchers.base import BaseLauncher


def create_app(config: dict, launcher: BaseLauncher) -> FastAPI:
    """Build the receiver. ``config`` is loaded once by the caller and reused for every request."""
    app = FastAPI(title="prbot webhook receiver")

    @app.post("/webhook")
    async def webhook(request: Request):
        # The signature covers the exact bytes GitHub sent, so read the raw body.
        body = await request.body()
        # Launchers block (Popen, boto3); keep them off the event loop.
        response = await run_in_threadpool(handle_webhook, dict(request.headers), body, config, launcher)
        return PlainTextResponse(response.body, status_code=response.status_code)

    @app.get("/healthz")
    async def healthz():
        return PlainTextResponse("ok")

    return app
