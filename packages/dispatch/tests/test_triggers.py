"""Tests for trigger filtering and task-parameter extraction."""

import pytest

from prbot_core.errors import MissingFieldError
from prbot_dispatch.models import TaskParams
from prbot_dispatch.triggers import extract_task_params, should_trigger_comment, should_trigger_pull_request


def comment_payload(body="/ai-review", action="created", on_pr=True):
    issue = {"number": 12}
    if on_pr:
        issue["pull_request"] = {"url": "https://api.github.com/repos/acme/api/pulls/12"}
    return {
        "action": action,
        "issue": issue,
        "comment": {"body": body},
        "repository": {"name": "api", "owner": {"login": "acme"}},
        "installation": {"id": 987},
    }


def pr_payload(action="review_requested", state="open", draft=False, reviewer="prbot[bot]"):
    payload = {
        "action": action,
        "number": 12,
        "pull_request": {"number": 12, "state": state, "draft": draft},
        "repository": {"name": "api", "owner": {"login": "acme"}},
        "installation": {"id": 987},
    }
    if reviewer:
        payload["requested_reviewer"] = {"login": reviewer}
    return payload


class TestCommentTrigger:
    def test_exact_command(self):
        assert should_trigger_comment(comment_payload(), "/ai-review") is True

    def test_command_with_trailing_text(self):
        assert should_trigger_comment(comment_payload("/ai-review please focus on auth"), "/ai-review") is True

    def test_surrounding_whitespace(self):
        assert should_trigger_comment(comment_payload("  /ai-review\n"), "/ai-review") is True

    def test_command_prefix_of_other_word(self):
        assert should_trigger_comment(comment_payload("/ai-reviewer"), "/ai-review") is False

    def test_command_not_at_start(self):
        assert should_trigger_comment(comment_payload("please /ai-review"), "/ai-review") is False

    def test_edited_comment_ignored(self):
        assert should_trigger_comment(comment_payload(action="edited"), "/ai-review") is False

    def test_empty_pull_request_object_counts_as_pr(self):
        payload = comment_payload()
        payload["issue"]["pull_request"] = {}
        assert should_trigger_comment(payload, "/ai-review") is True

    def test_null_pull_request_ignored(self):
        payload = comment_payload()
        payload["issue"]["pull_request"] = None
        assert should_trigger_comment(payload, "/ai-review") is False

    def test_plain_issue_ignored(self):
        assert should_trigger_comment(comment_payload(on_pr=False), "/ai-review") is False

    def test_custom_command(self):
        assert should_trigger_comment(comment_payload("/review"), "/review") is True


class TestPullRequestTrigger:
    def test_bot_requested(self):
        assert should_trigger_pull_request(pr_payload(), "prbot[bot]") is True

    def test_other_reviewer_requested(self):
        assert should_trigger_pull_request(pr_payload(reviewer="alice"), "prbot[bot]") is False

    def test_review_requested_without_bot_login(self):
        assert should_trigger_pull_request(pr_payload(), None) is False

    def test_ready_for_review(self):
        assert should_trigger_pull_request(pr_payload(action="ready_for_review", reviewer=None), None) is True

    def test_draft_ignored(self):
        assert should_trigger_pull_request(pr_payload(draft=True), "prbot[bot]") is False

    def test_closed_ignored(self):
        assert should_trigger_pull_request(pr_payload(action="ready_for_review", state="closed"), None) is False

    @pytest.mark.parametrize("action", ["opened", "synchronize", "labeled"])
    def test_other_actions_ignored(self, action):
        assert should_trigger_pull_request(pr_payload(action=action), "prbot[bot]") is False


class TestExtractTaskParams:
    def test_from_comment(self):
        params = extract_task_params("issue_comment", comment_payload())
        assert params == TaskParams(owner="acme", repo="api", pr_number=12, installation_id=987)

    def test_from_pull_request(self):
        params = extract_task_params("pull_request", pr_payload())
        assert params == TaskParams(owner="acme", repo="api", pr_number=12, installation_id=987)

    def test_missing_installation(self):
        payload = comment_payload()
        del payload["installation"]
        with pytest.raises(MissingFieldError, match="installation"):
            extract_task_params("issue_comment", payload)

    def test_missing_repository(self):
        payload = pr_payload()
        del payload["repository"]
        with pytest.raises(MissingFieldError, match="repository"):
            extract_task_params("pull_request", payload)

    def test_to_env(self):
        env = TaskParams(owner="acme", repo="api", pr_number=12, installation_id=987).to_env()
        assert env == {
            "PR_OWNER": "acme",
            "PR_REPO": "api",
            "PR_NUMBER": "12",
            "GITHUB_INSTALLATION_ID": "987",
        }
