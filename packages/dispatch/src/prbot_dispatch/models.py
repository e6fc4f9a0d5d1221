"""Dispatch data models.

Decoupled from prbot_core so the webhook receiver stays lightweight: the only
thing handed to a review task is where to find the pull request.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TaskParams:
    """Addressing parameters passed to one review task."""

    owner: str
    repo: str
    pr_number: int
    installation_id: int

    def to_env(self) -> dict[str, str]:
        return {
            "PR_OWNER": self.owner,
            "PR_REPO": self.repo,
            "PR_NUMBER": str(self.pr_number),
            "GITHUB_INSTALLATION_ID": str(self.installation_id),
        }


@dataclass
class WebhookResponse:
    status_code: int
    body: str
