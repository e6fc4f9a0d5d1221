"""Review data model.

The engine result schema is expressed with pydantic so that anything the
engine prints is either a fully valid ReviewResult or a ValidationError; the
adapter never repairs or partially accepts output. Session-side records are
plain dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from prbot_core.utils.hashing import generate_hash


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Category(str, Enum):
    SECURITY = "security"
    PERFORMANCE = "performance"
    LOGIC = "logic"
    ERROR_HANDLING = "error-handling"
    TYPE_SAFETY = "type-safety"
    MAINTAINABILITY = "maintainability"


SEVERITY_ORDER = {
    Severity.CRITICAL: 0,
    Severity.HIGH: 1,
    Severity.MEDIUM: 2,
    Severity.LOW: 3,
}

SEVERITY_EMOJI = {
    Severity.CRITICAL: "🔴",
    Severity.HIGH: "🟠",
    Severity.MEDIUM: "🟡",
    Severity.LOW: "🔵",
}

ReviewAction = Literal["request_changes", "comment", "approve"]


class Finding(BaseModel):
    """One issue reported by the engine.

    ``hash`` is always derived from (file, line, end_line, title); a value
    supplied by the engine is replaced so identities stay reproducible.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    severity: Severity
    category: Category
    confidence: Confidence
    file: str = Field(min_length=1)
    line: int = Field(gt=0)
    end_line: Optional[int] = Field(default=None, alias="endLine", gt=0)
    title: str
    description: str
    suggestion: Optional[str] = None
    severity_reason: str = Field(alias="severityReason")
    references: Optional[list[str]] = None
    hash: str = ""

    @model_validator(mode="after")
    def _check_line_range(self) -> Finding:
        if self.end_line is not None and self.end_line < self.line:
            raise ValueError(f"endLine ({self.end_line}) must not be before line ({self.line})")
        return self

    @model_validator(mode="after")
    def _derive_hash(self) -> Finding:
        self.hash = generate_hash(self.file, self.line, self.end_line, self.title)
        return self


class ReviewMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    head_commit: str = Field(alias="headCommit")
    files_reviewed: int = Field(alias="filesReviewed", ge=0)
    skipped_files: list[str] = Field(alias="skippedFiles")
    review_duration_ms: int = Field(alias="reviewDurationMs", ge=0)


class ReviewResult(BaseModel):
    """The single JSON object the engine must print."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    status: Literal["completed", "skipped", "failed"]
    summary: str
    findings: list[Finding]
    metadata: ReviewMetadata
    error: Optional[str] = None


@dataclass
class PullRequestInfo:
    owner: str
    repo: str
    number: int
    base_branch: str
    head_branch: str
    head_sha: str
    changed_files: int = 0

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class ExistingComment:
    """A review comment read back from GitHub; hash is None when no marker parses."""

    id: int
    body: str
    path: str
    line: int
    hash: str | None


@dataclass
class ReviewRequest:
    owner: str
    repo: str
    pr_number: int


@dataclass
class ReviewOutcome:
    success: bool
    action: str  # "reviewed" | "skipped" | "error"
    message: str
    findings_count: int | None = None
    verdict: str | None = None


def determine_review_action(findings: list[Finding]) -> ReviewAction:
    """Choose the verdict from the complete current finding set."""
    severities = {f.severity for f in findings}
    if Severity.CRITICAL in severities:
        return "request_changes"
    if Severity.HIGH in severities:
        return "comment"
    return "approve"


def count_by_severity(findings: list[Finding]) -> dict[Severity, int]:
    counts = {s: 0 for s in Severity}
    for f in findings:
        counts[f.severity] += 1
    return counts


def sort_findings_by_severity(findings: list[Finding]) -> list[Finding]:
    return sorted(findings, key=lambda f: SEVERITY_ORDER[f.severity])
