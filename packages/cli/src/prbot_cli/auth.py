"""GitHub credential resolution for review sessions.

Resolution order (stops at first success):
  1. GitHub App installation: GITHUB_APP_ID + GITHUB_APP_PRIVATE_KEY[_PATH]
     and an installation id (the production path: the dispatcher always
     passes one)
  2. GITHUB_TOKEN environment variable
  3. `gh auth token` (GitHub CLI session, for running a review by hand)
"""

from __future__ import annotations

import logging
import os
import subprocess

from prbot_core.gh.pull_request import GitHubClient

logger = logging.getLogger(__name__)


def resolve_github_token() -> str | None:
    """Return a GitHub token or None if no valid source is available.

    Never raises. Callers should check for None and emit a UsageError.
    """
    token = os.environ.get("GITHUB_TOKEN")
    if token:
        return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            timeout=5,
        )
        if result.returncode == 0:
            gh_token = result.stdout.strip()
            if gh_token:
                logger.debug("Resolved GitHub token via gh CLI session.")
                return gh_token
    except (FileNotFoundError, subprocess.TimeoutExpired):
        # gh is not installed or timed out; fall through.
        pass

    return None


def build_client(config: dict, installation_id: int | None) -> GitHubClient | None:
    """Return a GitHubClient for the best available credentials, or None."""
    app_id = config.get("github_app_id")
    private_key = config.get("github_app_private_key")
    if installation_id and app_id and private_key:
        logger.debug("Authenticating as GitHub App %s, installation %d", app_id, installation_id)
        return GitHubClient.from_app(app_id, private_key, installation_id)

    token = resolve_github_token()
    if token:
        return GitHubClient.from_token(token)
    return None
