"""Tests for event dispatch (merged PR, check suite, unsupported events)."""

from unittest.mock import Mock, patch

import pytest

from autobase.adapters.base import GitPlatformError
from autobase.config import AppConfig, GitHubConfig, RebaseConfig
from autobase.dispatcher import dispatch, handle_github_event, resolve_base_branch
from autobase.events import CheckSuiteCompleted, PullRequestMerged
from autobase.models import BranchUpdateResult, PullRequestDetail, PullRequestSummary, Repository
from autobase.report import RunReport


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(
        github=GitHubConfig(token="test-token", repository="owner/repo"),
        rebase=RebaseConfig(label="autobase", required_approvals=0, base_branch=None),
    )


@pytest.fixture
def adapter() -> Mock:
    """Adapter with one eligible PR (#2) into master."""
    adapter = Mock()
    adapter.get_repository.return_value = Repository(full_name="owner/repo", default_branch="master")
    adapter.list_open_pull_requests.return_value = [
        PullRequestSummary(number=2, labels=["autobase"], base_branch="master", head_sha="abc456"),
    ]
    adapter.get_pull_request.return_value = PullRequestDetail(
        number=2, mergeable_state="behind", rebaseable=True, labels=["autobase"]
    )
    adapter.update_branch.return_value = BranchUpdateResult(url="https://github.com/owner/repo/pull/2")
    return adapter


def _merged_payload(base_ref: str = "master", merged: bool = True) -> dict:
    return {
        "action": "closed",
        "pull_request": {"number": 1, "merged": merged, "base": {"ref": base_ref}, "head": {"sha": "abc123"}},
        "repository": {"full_name": "owner/repo"},
    }


def _suite_payload(action: str = "completed", conclusion: str = "failure", prs: list | None = None) -> dict:
    return {
        "action": action,
        "check_suite": {
            "conclusion": conclusion,
            "pull_requests": [{"number": 1}] if prs is None else prs,
        },
        "repository": {"full_name": "owner/repo"},
    }


class TestResolveBaseBranch:
    def test_uses_configured_branch(self) -> None:
        adapter = Mock()
        assert resolve_base_branch(adapter, "owner/repo", RebaseConfig(base_branch="develop")) == "develop"
        adapter.get_repository.assert_not_called()

    def test_falls_back_to_default_branch(self, adapter: Mock) -> None:
        assert resolve_base_branch(adapter, "owner/repo", RebaseConfig(base_branch=None)) == "master"
        adapter.get_repository.assert_called_once_with("owner/repo")


class TestPullRequestEvent:
    def test_merge_into_base_rebases_next_pr(self, adapter: Mock, config: AppConfig) -> None:
        """Merged into default branch: one update for the eligible PR."""
        report = handle_github_event(adapter, "pull_request", _merged_payload(), config)

        adapter.update_branch.assert_called_once_with("owner/repo", 2, expected_head_sha="abc456")
        assert not report.failed
        assert report.rebased == [2]

    def test_merge_into_other_branch_is_noop(self, adapter: Mock, config: AppConfig) -> None:
        """Merged into a branch other than base: no listing, no update."""
        report = handle_github_event(adapter, "pull_request", _merged_payload(base_ref="feature"), config)

        adapter.list_open_pull_requests.assert_not_called()
        adapter.update_branch.assert_not_called()
        assert not report.failed

    def test_closed_without_merge_is_noop(self, adapter: Mock, config: AppConfig) -> None:
        report = handle_github_event(adapter, "pull_request", _merged_payload(merged=False), config)

        adapter.list_open_pull_requests.assert_not_called()
        assert not report.failed

    def test_configured_base_branch(self, adapter: Mock, config: AppConfig) -> None:
        """With base_branch set, only merges into it trigger, and listing targets it."""
        config.rebase.base_branch = "develop"

        handle_github_event(adapter, "pull_request", _merged_payload(base_ref="master"), config)
        adapter.list_open_pull_requests.assert_not_called()

        handle_github_event(adapter, "pull_request", _merged_payload(base_ref="develop"), config)
        adapter.list_open_pull_requests.assert_called_once_with("owner/repo", "develop")
        adapter.get_repository.assert_not_called()

    def test_missing_pull_request_payload_fails(self, adapter: Mock, config: AppConfig) -> None:
        report = handle_github_event(adapter, "pull_request", {"action": "closed"}, config)

        assert report.failures == ["Event payload missing `pull_request`"]
        adapter.list_open_pull_requests.assert_not_called()


class TestCheckSuiteEvent:
    def test_failed_suite_on_labeled_pr_runs_pass(self, adapter: Mock, config: AppConfig) -> None:
        """Failure conclusion + labeled PR: label check fetch, then one pass."""
        report = handle_github_event(adapter, "check_suite", _suite_payload(), config)

        assert adapter.get_pull_request.call_args_list[0].args == ("owner/repo", 1)
        adapter.list_open_pull_requests.assert_called_once_with("owner/repo", "master")
        adapter.update_branch.assert_called_once_with("owner/repo", 2, expected_head_sha="abc456")
        assert not report.failed

    @pytest.mark.parametrize("conclusion", ["failure", "cancelled", "timed_out"])
    def test_any_non_success_conclusion_triggers(self, adapter: Mock, config: AppConfig, conclusion: str) -> None:
        handle_github_event(adapter, "check_suite", _suite_payload(conclusion=conclusion), config)

        adapter.list_open_pull_requests.assert_called_once()

    def test_successful_suite_ignored(self, adapter: Mock, config: AppConfig) -> None:
        report = handle_github_event(adapter, "check_suite", _suite_payload(conclusion="success"), config)

        adapter.list_open_pull_requests.assert_not_called()
        adapter.update_branch.assert_not_called()
        assert report.messages == ["Ignoring a check_suite event with a completed action and success conclusion"]

    def test_not_completed_ignored(self, adapter: Mock, config: AppConfig) -> None:
        report = handle_github_event(adapter, "check_suite", _suite_payload(action="requested"), config)

        adapter.list_open_pull_requests.assert_not_called()
        assert "Ignoring a check_suite event with a requested action and failure conclusion" in report.messages

    def test_no_associated_prs(self, adapter: Mock, config: AppConfig) -> None:
        report = handle_github_event(adapter, "check_suite", _suite_payload(prs=[]), config)

        adapter.get_pull_request.assert_not_called()
        adapter.list_open_pull_requests.assert_not_called()
        assert "No pull requests are associated with the check suite." in report.messages

    def test_associated_pr_without_label_skipped(self, adapter: Mock, config: AppConfig) -> None:
        adapter.get_pull_request.return_value = PullRequestDetail(number=1, labels=["some-other-label"])

        report = handle_github_event(adapter, "check_suite", _suite_payload(), config)

        adapter.get_pull_request.assert_called_once_with("owner/repo", 1)
        adapter.list_open_pull_requests.assert_not_called()
        adapter.update_branch.assert_not_called()
        assert "Skipping check suite for PR #1 since it does not have the label 'autobase'." in report.messages

    def test_one_pass_per_labeled_association(self, config: AppConfig) -> None:
        """No deduplication: two labeled associations run two passes."""
        adapter = Mock()
        adapter.get_repository.return_value = Repository(default_branch="master")
        adapter.get_pull_request.side_effect = [
            PullRequestDetail(number=1, labels=["autobase"]),
            PullRequestDetail(number=3, labels=[]),
            PullRequestDetail(number=4, labels=["autobase"]),
        ]
        with patch("autobase.dispatcher.rebase_next_pull_request") as mock_pass:
            handle_github_event(
                adapter,
                "check_suite",
                _suite_payload(prs=[{"number": 1}, {"number": 3}, {"number": 4}]),
                config,
            )
        assert mock_pass.call_count == 2
        args = mock_pass.call_args_list[0].args
        assert args[1:5] == ("owner/repo", "master", "autobase", 0)

    def test_missing_check_suite_payload_fails(self, adapter: Mock, config: AppConfig) -> None:
        report = handle_github_event(adapter, "check_suite", {"action": "completed"}, config)

        assert report.failures == ["Event payload missing `check_suite`"]


class TestFailures:
    def test_unsupported_event_fails(self, adapter: Mock, config: AppConfig) -> None:
        report = handle_github_event(adapter, "push", {}, config)

        assert report.failures == ["This action only supports pull_request and check_suite events."]
        adapter.get_repository.assert_not_called()
        adapter.update_branch.assert_not_called()

    def test_platform_error_becomes_single_failure(self, adapter: Mock, config: AppConfig) -> None:
        adapter.list_open_pull_requests.side_effect = GitPlatformError("GitHub API error 500: boom")

        report = handle_github_event(adapter, "pull_request", _merged_payload(), config)

        assert report.failures == ["Action failed with error: GitHub API error 500: boom"]

    def test_update_failure_reported_without_raising(self, adapter: Mock, config: AppConfig) -> None:
        adapter.update_branch.side_effect = GitPlatformError("merge conflict")

        report = handle_github_event(adapter, "pull_request", _merged_payload(), config)

        assert report.failures == ["Failed to rebase PR #2: merge conflict"]

    def test_other_repository_skipped(self, adapter: Mock, config: AppConfig) -> None:
        payload = _merged_payload()
        payload["repository"] = {"full_name": "other/repo"}

        report = handle_github_event(adapter, "pull_request", payload, config)

        adapter.get_repository.assert_not_called()
        assert not report.failed

    def test_repository_from_config_when_payload_has_none(self, adapter: Mock, config: AppConfig) -> None:
        payload = _merged_payload()
        del payload["repository"]

        handle_github_event(adapter, "pull_request", payload, config)

        adapter.list_open_pull_requests.assert_called_once_with("owner/repo", "master")


def test_dispatch_with_parsed_event(adapter: Mock) -> None:
    """dispatch() works on typed events and returns the same report."""
    report = RunReport()
    event = PullRequestMerged(repo="owner/repo", base_ref="master", was_merged=True)

    result = dispatch(adapter, event, RebaseConfig(base_branch=None), report, "owner/repo")

    assert result is report
    adapter.update_branch.assert_called_once()


def test_dispatch_propagates_platform_errors(adapter: Mock) -> None:
    adapter.get_repository.side_effect = GitPlatformError("Not found: /repos/owner/repo")
    event = CheckSuiteCompleted(action="completed", conclusion="failure", pull_requests=[1])

    with pytest.raises(GitPlatformError):
        dispatch(adapter, event, RebaseConfig(base_branch=None), RunReport(), "owner/repo")
