"""Review session: one end-to-end review attempt for one pull request.

    fetch PR ─▶ label pending ─▶ ┌ engine liveness
                                  │ precheck ──▶ skip comment
                                  │ clone
                                  │ invoke ────▶ (fail → retry whole block once)
                                  │ reconcile
                                  └ mutate   ──▶ comments, threads, summary
                                ─▶ label reviewed (always)

Remote mutations are issued sequentially in a fixed order: labels, inline
comments, thread resolution, stale-review dismissal, summary review, labels.
A retried attempt re-reads existing comments, so comments posted by a failed
first attempt are recognised by hash and not posted twice.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prbot_core.comments import build_finding_comment, build_review_summary, build_skip_comment
from prbot_core.engine.base import EngineRunResult
from prbot_core.errors import (
    EngineError,
    EngineOutputError,
    EngineTimeout,
    EngineUnavailable,
    PreconditionSkip,
    PRBotError,
    RemoteApiError,
)
from prbot_core.models import (
    PullRequestInfo,
    ReviewOutcome,
    ReviewRequest,
    ReviewResult,
    determine_review_action,
    sort_findings_by_severity,
)
from prbot_core.reconciler import reconcile_findings, should_dismiss_previous_review
from prbot_core.workspace import workspace

if TYPE_CHECKING:
    from prbot_core.engine.base import BaseEngine
    from prbot_core.gh.pull_request import GitHubClient

logger = logging.getLogger(__name__)

MAX_FILES_DEFAULT = 100


def run_review(client: GitHubClient, engine: BaseEngine, config: dict, request: ReviewRequest) -> ReviewOutcome:
    """Run one review session and return its terminal outcome.

    Never raises for remote or engine failures: every path ends in a
    ReviewOutcome, with the pending label cleared once it was set.
    """
    try:
        pr = client.get_pull_request_info(request.owner, request.repo, request.pr_number)
    except RemoteApiError as e:
        logger.error("Could not fetch %s/%s#%d: %s", request.owner, request.repo, request.pr_number, e)
        return ReviewOutcome(success=False, action="error", message=f"Failed to get PR info: {e}")

    logger.info("Reviewing %s#%d (%s...%s @ %s)", pr.full_name, pr.number, pr.base_branch, pr.head_branch, pr.head_sha[:7])
    _best_effort("set the pending label", client.set_labels, pr, True)
    try:
        return _run_with_retry(client, engine, config, pr)
    finally:
        _best_effort("set the reviewed label", client.set_labels, pr, False)


def _run_with_retry(client: GitHubClient, engine: BaseEngine, config: dict, pr: PullRequestInfo) -> ReviewOutcome:
    attempts = 2 if config.get("retry_on_error", True) else 1
    error: PRBotError | OSError | None = None

    for attempt in range(1, attempts + 1):
        try:
            return _perform_review(client, engine, config, pr)
        except EngineUnavailable as e:
            error = e
            break
        except (EngineError, RemoteApiError, OSError) as e:
            error = e
            if attempt < attempts:
                logger.warning("Review attempt %d/%d failed: %s. Retrying...", attempt, attempts, e)

    message = str(error) or error.__class__.__name__
    logger.error("Review of %s#%d failed: %s", pr.full_name, pr.number, message)
    _best_effort("post the error comment", client.post_error_comment, pr, message)
    return ReviewOutcome(success=False, action="error", message=message)


def _perform_review(client: GitHubClient, engine: BaseEngine, config: dict, pr: PullRequestInfo) -> ReviewOutcome:
    if not engine.is_available():
        raise EngineUnavailable("Analysis engine is not available")

    try:
        _precheck(client, config, pr)
    except PreconditionSkip as skip:
        return _skip(client, pr, skip.reason)

    with workspace(config.get("workspace_root")) as path:
        client.clone_repository(pr, path)
        run = engine.invoke(
            path,
            pr.number,
            pr.base_branch,
            pr.head_branch,
            timeout=config.get("engine_timeout_seconds"),
        )
        result = _unwrap(run)

        if result.status == "skipped":
            return _skip(client, pr, result.summary)
        if result.status == "failed":
            raise EngineOutputError(f"Engine reported failure: {result.error or result.summary}", kind="failed")

        return _publish(client, pr, result)


def _precheck(client: GitHubClient, config: dict, pr: PullRequestInfo) -> None:
    changed = client.get_changed_files_count(pr)
    max_files = config.get("max_files_threshold")
    if max_files is None:
        max_files = MAX_FILES_DEFAULT
    if changed > max_files:
        raise PreconditionSkip(
            f"This PR changes {changed} files, which exceeds the threshold of {max_files} files. "
            "Please request a manual review."
        )
    if client.is_non_code_pr(pr):
        raise PreconditionSkip(
            "This PR contains only non-code changes (documentation, configuration, etc.). "
            "Skipping detailed code review."
        )


def _unwrap(run: EngineRunResult) -> ReviewResult:
    if run.success and run.result is not None:
        return run.result
    message = run.error or "Review failed with no output"
    if run.error_kind == "timeout":
        raise EngineTimeout(message)
    raise EngineOutputError(message, kind=run.error_kind)


def _skip(client: GitHubClient, pr: PullRequestInfo, reason: str) -> ReviewOutcome:
    logger.info("Skipping %s#%d: %s", pr.full_name, pr.number, reason)
    client.submit_review(pr, "comment", build_skip_comment(reason, pr.head_sha))
    return ReviewOutcome(success=True, action="skipped", message=reason)


def _publish(client: GitHubClient, pr: PullRequestInfo, result: ReviewResult) -> ReviewOutcome:
    existing = client.get_existing_bot_comments(pr)
    reconciliation = reconcile_findings(result.findings, existing)
    logger.info(
        "Findings: %d total, %d new, %d fixed, %d persisting%s",
        len(result.findings),
        len(reconciliation.new_findings),
        len(reconciliation.fixed_comment_ids),
        len(reconciliation.persisting_comment_ids),
        " (new critical issues)" if reconciliation.has_blocking_issues else "",
    )

    for finding in sort_findings_by_severity(reconciliation.new_findings):
        client.create_review_comment(pr, finding, build_finding_comment(finding, pr.head_sha))

    for comment_id in reconciliation.fixed_comment_ids:
        _best_effort(f"resolve the thread of comment {comment_id}", client.resolve_comment_thread, pr, comment_id)

    action = determine_review_action(result.findings)
    if should_dismiss_previous_review(result.findings):
        _best_effort("dismiss stale reviews", client.dismiss_stale_reviews, pr)

    client.submit_review(pr, action, build_review_summary(result, pr.head_sha))
    logger.info("Review posted for %s#%d: %s", pr.full_name, pr.number, action)

    return ReviewOutcome(
        success=True,
        action="reviewed",
        message=f"Review complete: {action}",
        findings_count=len(result.findings),
        verdict=action,
    )


def _best_effort(description: str, func, *args):
    """Call a non-essential remote operation; log and swallow RemoteApiError."""
    try:
        return func(*args)
    except RemoteApiError as e:
        logger.warning("Could not %s: %s", description, e)
        return None
