"""Error taxonomy shared by the webhook receiver and the review session.

The session decides retry behaviour by exception type:
  - EngineUnavailable       → fatal, never retried
  - EngineTimeout           → retried once when retry_on_error is set
  - EngineOutputError       → retried once when retry_on_error is set
  - RemoteApiError          → retried once during the work phase, fatal before it
  - PreconditionSkip        → not a failure; becomes a "skipped" outcome
"""

from __future__ import annotations


class PRBotError(Exception):
    """Base class for every error raised by prbot."""


class AuthError(PRBotError):
    """Webhook signature is missing or does not match the body."""


class MissingFieldError(PRBotError):
    """A webhook payload lacks a field required to start a review."""


class DispatchError(PRBotError):
    """The review task could not be launched."""


class PreconditionSkip(PRBotError):
    """The PR should not be reviewed; carries a human-readable reason."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class EngineError(PRBotError):
    """The analysis engine did not produce a usable result."""


class EngineUnavailable(EngineError):
    """The engine executable did not answer the liveness probe."""


class EngineTimeout(EngineError):
    """The engine exceeded its wall-clock budget and was killed."""


class EngineOutputError(EngineError):
    """Non-zero exit, missing JSON, or JSON that fails schema validation."""

    def __init__(self, message: str, kind: str | None = None):
        super().__init__(message)
        self.kind = kind


class RemoteApiError(PRBotError):
    """A call to GitHub (REST, GraphQL or git over HTTPS) failed."""
