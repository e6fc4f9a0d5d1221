"""Webhook handler: authenticate, filter, dispatch.

Status codes:
  200  authenticated but not a review trigger (no-op)
  202  review task launched
  400  invalid JSON or a required field is missing
  401  signature missing or wrong (checked before the body is parsed)
  500  anything else, including a failed launch
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Mapping

from prbot_core.errors import MissingFieldError

from prbot_dispatch.models import WebhookResponse
from prbot_dispatch.signature import verify_signature
from prbot_dispatch.triggers import extract_task_params, should_trigger_comment, should_trigger_pull_request

if TYPE_CHECKING:
    from prbot_dispatch.launchers.base import BaseLauncher

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-hub-signature-256"
EVENT_HEADER = "x-github-event"


def _header(headers: Mapping[str, str], name: str) -> str | None:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def handle_webhook(headers: Mapping[str, str], body: bytes, config: dict, launcher: BaseLauncher) -> WebhookResponse:
    try:
        if not verify_signature(body, _header(headers, SIGNATURE_HEADER), config.get("webhook_secret") or ""):
            return WebhookResponse(401, "Invalid signature")

        event = _header(headers, EVENT_HEADER)
        if event not in ("issue_comment", "pull_request"):
            return WebhookResponse(200, f"Ignoring {event or 'unknown'} event")

        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return WebhookResponse(400, "Invalid JSON payload")
        if not isinstance(payload, dict):
            return WebhookResponse(400, "Invalid JSON payload")

        if event == "issue_comment":
            triggered = should_trigger_comment(payload, config.get("trigger_command") or "/ai-review")
        else:
            triggered = should_trigger_pull_request(payload, config.get("bot_login"))
        if not triggered:
            return WebhookResponse(200, "No review needed for this event")

        try:
            params = extract_task_params(event, payload)
        except MissingFieldError as e:
            return WebhookResponse(400, str(e))

        task_id = launcher.launch(params)
        logger.info("Dispatched review of %s/%s#%d as %s", params.owner, params.repo, params.pr_number, task_id)
        return WebhookResponse(202, "Review task spawned")
    except Exception as e:
        logger.exception("Dispatcher error")
        return WebhookResponse(500, str(e) or e.__class__.__name__)
