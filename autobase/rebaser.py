"""
Pick the next pull request to rebase and ask the platform to rebase it.

Candidates are open PRs into the base branch, oldest created first. Each one
goes through the gates in order (open, label, not draft, behind, rebaseable,
approvals) and is dropped at the first gate it fails. The first candidate
that passes every gate gets one update-branch call guarded by its head SHA.
A successful update ends the pass; a failed one is reported and the scan
moves on to the next candidate.
"""

import logging

from autobase.adapters.base import GitPlatformError, PlatformAdapter
from autobase.models import PullRequestSummary
from autobase.report import RunReport


def _count_approvals(adapter: PlatformAdapter, repo: str, pr_number: int) -> int:
    reviews = adapter.list_reviews(repo, pr_number)
    return sum(1 for review in reviews if review.is_approved)


def _skip_reason(
    adapter: PlatformAdapter,
    repo: str,
    pr: PullRequestSummary,
    label: str,
    required_approvals: int,
) -> str | None:
    """Return why pr cannot be rebased now, or None if it can.

    Gates are ordered cheapest first; detail and reviews are fetched only
    for PRs that got past the label and draft checks.
    """
    if pr.state != "open":
        return f"PR #{pr.number} is not open (state was '{pr.state}')."
    if not pr.has_label(label):
        return f"PR #{pr.number} is not labeled with '{label}'."
    if pr.draft:
        return f"PR #{pr.number} is a draft PR."

    detail = adapter.get_pull_request(repo, pr.number)
    if not detail.is_behind:
        return f"PR #{pr.number} is not 'behind' (was '{detail.mergeable_state}')."
    if not detail.rebaseable:
        return f"PR #{pr.number} is not rebaseable."

    if required_approvals > 0:
        approvals = _count_approvals(adapter, repo, pr.number)
        if approvals < required_approvals:
            return f"PR #{pr.number} requires {required_approvals} approvals, but only has {approvals}."
    return None


def rebase_next_pull_request(
    adapter: PlatformAdapter,
    repo: str,
    base_branch: str,
    label: str,
    required_approvals: int,
    report: RunReport,
    log: logging.Logger | None = None,
) -> int | None:
    """
    Rebase the oldest eligible PR into base_branch.

    Returns the rebased PR number, or None when nothing was rebased.
    Platform errors while listing or inspecting candidates propagate;
    only the update-branch call is caught and reported per candidate.
    """
    logger = log or logging.getLogger("autobase.rebaser")

    pull_requests = adapter.list_open_pull_requests(repo, base_branch)
    if not pull_requests:
        report.info(f"No open pull requests targeting '{base_branch}'.")
        return None

    report.info("Evaluating the following PRs: " + ", ".join(f"#{pr.number}" for pr in pull_requests))

    for pr in pull_requests:
        reason = _skip_reason(adapter, repo, pr, label, required_approvals)
        if reason:
            report.info(reason)
            continue

        logger.debug("PR #%s: requesting rebase (expected head %s)", pr.number, pr.head_sha)
        try:
            result = adapter.update_branch(repo, pr.number, expected_head_sha=pr.head_sha)
        except GitPlatformError as e:
            report.fail(f"Failed to rebase PR #{pr.number}: {e}")
            continue

        report.info(f"Rebased PR #{pr.number}: {result.url}")
        report.record_rebase(pr.number)
        return pr.number

    report.info(f"No pull request eligible for rebase onto '{base_branch}'.")
    return None
