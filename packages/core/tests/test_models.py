"""Tests for the engine result schema and verdict helpers."""

import pytest
from pydantic import ValidationError

from prbot_core.models import (
    Finding,
    ReviewResult,
    Severity,
    count_by_severity,
    determine_review_action,
    sort_findings_by_severity,
)


def finding_dict(**overrides):
    data = {
        "severity": "medium",
        "category": "error-handling",
        "confidence": "medium",
        "file": "lib/io.go",
        "line": 4,
        "endLine": 9,
        "title": "Ignored error",
        "description": "The error from Close is discarded.",
        "severityReason": "May hide write failures.",
        "hash": "00000000",
    }
    data.update(overrides)
    return data


def make(severity):
    return Finding.model_validate(finding_dict(severity=severity))


def result_dict(findings=None, **overrides):
    data = {
        "status": "completed",
        "summary": "Looks fine.",
        "findings": findings if findings is not None else [],
        "metadata": {"headCommit": "abc1234", "filesReviewed": 2, "skippedFiles": [], "reviewDurationMs": 1200},
    }
    data.update(overrides)
    return data


class TestFindingSchema:
    def test_wire_names_map_to_attributes(self):
        f = Finding.model_validate(finding_dict())
        assert f.end_line == 9
        assert f.severity_reason == "May hide write failures."
        assert f.severity is Severity.MEDIUM

    def test_optional_fields_default_to_none(self):
        data = finding_dict()
        del data["endLine"]
        f = Finding.model_validate(data)
        assert f.end_line is None
        assert f.suggestion is None
        assert f.references is None

    @pytest.mark.parametrize(
        "override",
        [
            {"severity": "blocker"},
            {"category": "style"},
            {"confidence": "certain"},
            {"line": 0},
            {"endLine": -1},
            {"endLine": 3},
            {"line": "ten"},
        ],
    )
    def test_invalid_values_rejected(self, override):
        with pytest.raises(ValidationError):
            Finding.model_validate(finding_dict(**override))

    def test_end_line_before_line_rejected(self):
        with pytest.raises(ValidationError, match="endLine"):
            Finding.model_validate(finding_dict(line=20, endLine=5))

    def test_single_line_range_accepted(self):
        f = Finding.model_validate(finding_dict(line=7, endLine=7))
        assert (f.line, f.end_line) == (7, 7)

    def test_missing_severity_reason_rejected(self):
        data = finding_dict()
        del data["severityReason"]
        with pytest.raises(ValidationError):
            Finding.model_validate(data)


class TestReviewResultSchema:
    def test_valid_result(self):
        result = ReviewResult.model_validate(result_dict([finding_dict()]))
        assert result.status == "completed"
        assert len(result.findings) == 1
        assert result.metadata.files_reviewed == 2

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            ReviewResult.model_validate(result_dict(status="done"))

    def test_missing_metadata_rejected(self):
        data = result_dict()
        del data["metadata"]
        with pytest.raises(ValidationError):
            ReviewResult.model_validate(data)

    def test_negative_duration_rejected(self):
        data = result_dict()
        data["metadata"]["reviewDurationMs"] = -5
        with pytest.raises(ValidationError):
            ReviewResult.model_validate(data)


class TestVerdict:
    def test_empty_is_approve(self):
        assert determine_review_action([]) == "approve"

    def test_critical_requests_changes(self):
        assert determine_review_action([make("low"), make("critical")]) == "request_changes"

    def test_high_without_critical_comments(self):
        assert determine_review_action([make("high"), make("medium")]) == "comment"

    def test_medium_and_low_approve(self):
        assert determine_review_action([make("medium"), make("low")]) == "approve"

    def test_adding_critical_keeps_request_changes(self):
        findings = [make("critical"), make("high")]
        assert determine_review_action(findings + [make("critical")]) == "request_changes"

    def test_removing_critical_and_high_approves(self):
        findings = [make("critical"), make("high"), make("low")]
        remaining = [f for f in findings if f.severity not in (Severity.CRITICAL, Severity.HIGH)]
        assert determine_review_action(remaining) == "approve"


class TestSeverityHelpers:
    def test_count_by_severity(self):
        counts = count_by_severity([make("high"), make("high"), make("low")])
        assert counts == {Severity.CRITICAL: 0, Severity.HIGH: 2, Severity.MEDIUM: 0, Severity.LOW: 1}

    def test_sort_most_severe_first(self):
        ordered = sort_findings_by_severity([make("low"), make("critical"), make("medium"), make("high")])
        assert [f.severity.value for f in ordered] == ["critical", "high", "medium", "low"]
