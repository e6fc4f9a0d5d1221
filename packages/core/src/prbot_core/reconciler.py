"""Finding reconciliation.

Decides, by hash alone, what a review run should do with each finding and
each previously posted comment:

    new finding, hash never posted           → post it
    posted comment, hash no longer reported  → resolve it (presumed fixed)
    posted comment, hash still reported      → leave it

Two unrelated issues that normalise to the same file/line/title share a hash;
the second is treated as already posted. That is accepted, not special-cased.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from prbot_core.models import ExistingComment, Finding, Severity


@dataclass
class ReconciliationResult:
    new_findings: list[Finding] = field(default_factory=list)
    fixed_comment_ids: list[int] = field(default_factory=list)
    persisting_comment_ids: list[int] = field(default_factory=list)

    @property
    def has_blocking_issues(self) -> bool:
        return any(f.severity == Severity.CRITICAL for f in self.new_findings)


def reconcile_findings(findings: list[Finding], existing_comments: list[ExistingComment]) -> ReconciliationResult:
    """Partition current findings and existing comments. Pure; no I/O."""
    existing_hashes = {c.hash for c in existing_comments if c.hash is not None}
    current_hashes = {f.hash for f in findings}

    result = ReconciliationResult(new_findings=[f for f in findings if f.hash not in existing_hashes])

    for comment in existing_comments:
        if comment.hash is None:
            continue
        if comment.hash in current_hashes:
            result.persisting_comment_ids.append(comment.id)
        else:
            result.fixed_comment_ids.append(comment.id)

    return result


def has_blocking_issues_remaining(findings: list[Finding], existing_comments: list[ExistingComment]) -> bool:
    """True when a critical finding is about to be posted for the first time."""
    return reconcile_findings(findings, existing_comments).has_blocking_issues


def should_dismiss_previous_review(findings: list[Finding]) -> bool:
    """A prior REQUEST_CHANGES is stale once no critical finding remains at all."""
    return not any(f.severity == Severity.CRITICAL for f in findings)
