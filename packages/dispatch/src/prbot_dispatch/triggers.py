"""Decide whether an authenticated GitHub event should start a review.

Two triggers are supported:
  - an issue comment on a pull request whose body is the review command
    (optionally followed by a space and free text)
  - a pull_request event where the bot was requested as a reviewer, or the
    PR left draft state
"""

from __future__ import annotations

from prbot_core.errors import MissingFieldError

from prbot_dispatch.models import TaskParams


def should_trigger_comment(payload: dict, command: str) -> bool:
    if payload.get("action") != "created":
        return False
    issue = payload.get("issue") or {}
    # An empty pull_request object still marks the issue as a PR.
    if issue.get("pull_request") is None:
        return False
    body = ((payload.get("comment") or {}).get("body") or "").strip()
    return body == command or body.startswith(command + " ")


def should_trigger_pull_request(payload: dict, bot_login: str | None) -> bool:
    pull = payload.get("pull_request") or {}
    if pull.get("state") != "open" or pull.get("draft"):
        return False

    action = payload.get("action")
    if action == "ready_for_review":
        return True
    if action == "review_requested":
        reviewer = (payload.get("requested_reviewer") or {}).get("login")
        return bool(bot_login) and reviewer == bot_login
    return False


def extract_task_params(event: str, payload: dict) -> TaskParams:
    """Pull the addressing fields out of a triggering payload."""
    repository = payload.get("repository") or {}
    owner = (repository.get("owner") or {}).get("login")
    repo = repository.get("name")
    if event == "issue_comment":
        number = (payload.get("issue") or {}).get("number")
    else:
        number = (payload.get("pull_request") or {}).get("number") or payload.get("number")
    installation_id = (payload.get("installation") or {}).get("id")

    if not installation_id:
        raise MissingFieldError("Missing installation ID")
    if not owner or not repo or not number:
        raise MissingFieldError("Missing repository or pull request number")

    return TaskParams(owner=owner, repo=repo, pr_number=int(number), installation_id=int(installation_id))
