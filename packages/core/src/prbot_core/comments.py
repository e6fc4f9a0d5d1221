"""Markdown bodies for everything prbot posts on a pull request.

Inline finding comments carry a hidden marker with the finding hash so a later
run can recover which issue each comment is about:

    <!-- ai-review: {"hash":"1f3a09bc"} -->

Summary reviews carry their own marker so stale REQUEST_CHANGES reviews
posted by prbot can be told apart from human reviews.
"""

from __future__ import annotations

import json
import re

from prbot_core.models import (
    SEVERITY_EMOJI,
    Finding,
    ReviewResult,
    Severity,
    count_by_severity,
    determine_review_action,
)

BOT_NAME = "prbot reviewer"
SUMMARY_MARKER_PREFIX = "<!-- ai-review-summary"

_HASH_MARKER_RE = re.compile(r"<!-- ai-review: ({.*?}) -->")
_MAX_REFERENCE_DISPLAY = 60


def _short(sha: str) -> str:
    return sha[:7]


def _format_category(category: str) -> str:
    return " ".join(word.capitalize() for word in category.split("-"))


def hash_marker(finding_hash: str) -> str:
    return f"<!-- ai-review: {json.dumps({'hash': finding_hash}, separators=(',', ':'))} -->"


def extract_hash(body: str | None) -> str | None:
    """Return the finding hash embedded in a comment body, or None."""
    match = _HASH_MARKER_RE.search(body or "")
    if not match:
        return None
    try:
        metadata = json.loads(match.group(1))
    except json.JSONDecodeError:
        return None
    value = metadata.get("hash") if isinstance(metadata, dict) else None
    return value if isinstance(value, str) and value else None


def build_finding_comment(finding: Finding, head_sha: str) -> str:
    severity = finding.severity.value
    lines = [
        f"{SEVERITY_EMOJI[finding.severity]} **{severity.capitalize()}** · {_format_category(finding.category.value)}",
        "",
        f"**{finding.title}**",
        "",
        finding.description,
    ]

    if finding.suggestion:
        lines += ["", "```suggestion", finding.suggestion, "```"]

    lines += [
        "",
        f"**Confidence:** {finding.confidence.value.capitalize()}",
        f"**Why this severity:** {finding.severity_reason}",
    ]

    if finding.references:
        lines += ["", "**References:**"]
        for ref in finding.references:
            display = ref if len(ref) <= _MAX_REFERENCE_DISPLAY else ref[: _MAX_REFERENCE_DISPLAY - 3] + "..."
            lines.append(f"- [{display}]({ref})")

    lines += ["", "---", hash_marker(finding.hash), f"*{BOT_NAME} • {_short(head_sha)}*"]
    return "\n".join(lines)


def build_review_summary(result: ReviewResult, head_sha: str) -> str:
    """Build the top-level review body: verdict, severity table, advice."""
    action = determine_review_action(result.findings)
    counts = count_by_severity(result.findings)

    if action == "request_changes":
        lines = [f"🔴 **Changes requested by {BOT_NAME}**"]
    elif action == "comment":
        lines = [f"🟠 **Review comments from {BOT_NAME}**"]
    else:
        lines = [f"✅ **Approved by {BOT_NAME}**"]

    lines += ["", "| Severity | Count |", "|----------|-------|"]
    for severity in Severity:
        if counts[severity]:
            lines.append(f"| {SEVERITY_EMOJI[severity]} {severity.value.capitalize()} | {counts[severity]} |")
    if not result.findings:
        lines.append("| ✅ None | 0 |")

    lines.append("")
    if action == "request_changes":
        lines.append("Please address the critical issues before merging.")
    elif action == "comment":
        lines.append("High severity issues found. Please review and consider addressing them before merging.")
    elif counts[Severity.MEDIUM] or counts[Severity.LOW]:
        lines.append(
            "No critical or high severity issues found. "
            "Please review the medium/low suggestions at your discretion."
        )
    else:
        lines.append("No issues found. The code looks good!")

    if result.summary:
        lines += ["", f"> {result.summary}"]

    lines += ["", f"*Reviewed at commit: {_short(head_sha)}*", f"{SUMMARY_MARKER_PREFIX}: {head_sha} -->"]
    return "\n".join(lines)


def build_skip_comment(reason: str, head_sha: str) -> str:
    return f"⏭️ **{BOT_NAME} skipped this PR**\n\n{reason}\n\n*Commit: {_short(head_sha)}*"


def build_error_comment(error: str, head_sha: str) -> str:
    return (
        f"⚠️ **{BOT_NAME} encountered an error**\n\n{error}\n\n"
        f"Please re-request review to try again.\n\n*Commit: {_short(head_sha)}*"
    )
