"""Decide whether a trigger starts a rebase pass, and for which branch.

A merged pull request into the base branch means every other PR into that
branch just fell behind, so one of them gets rebased. A check suite that
finished without success on a labeled PR may be failing because the branch
is stale, so the same pass runs for it.
"""

import logging
from typing import Any, Dict

from autobase.adapters.base import GitPlatformError, PlatformAdapter
from autobase.config import AppConfig, RebaseConfig
from autobase.events import (
    CheckSuiteCompleted,
    EventError,
    PullRequestMerged,
    TriggerEvent,
    parse_github_event,
)
from autobase.rebaser import rebase_next_pull_request
from autobase.report import RunReport


def resolve_base_branch(adapter: PlatformAdapter, repo: str, settings: RebaseConfig) -> str:
    """Configured base branch, or the repository's default branch."""
    if settings.base_branch:
        return settings.base_branch
    return adapter.get_repository(repo).default_branch


def _handle_pull_request(
    adapter: PlatformAdapter,
    event: PullRequestMerged,
    repo: str,
    base_branch: str,
    settings: RebaseConfig,
    report: RunReport,
    log: logging.Logger,
) -> None:
    if not event.was_merged or event.base_ref != base_branch:
        log.debug(
            "Ignoring pull_request event: merged=%s base=%s (watching %s)",
            event.was_merged,
            event.base_ref,
            base_branch,
        )
        return
    rebase_next_pull_request(
        adapter,
        repo,
        base_branch,
        settings.label,
        settings.required_approvals,
        report,
    )


def _handle_check_suite(
    adapter: PlatformAdapter,
    event: CheckSuiteCompleted,
    repo: str,
    base_branch: str,
    settings: RebaseConfig,
    report: RunReport,
) -> None:
    # Any non-success conclusion counts (failure, cancelled, timed_out, ...)
    if not event.is_completed or event.succeeded:
        report.info(
            f"Ignoring a check_suite event with a {event.action} action and {event.conclusion} conclusion"
        )
        return

    if not event.pull_requests:
        report.info("No pull requests are associated with the check suite.")
        return

    label = settings.label
    for pr_number in event.pull_requests:
        # The suite payload only carries numbers; labels need the full PR
        pr = adapter.get_pull_request(repo, pr_number)
        if not pr.has_label(label):
            report.info(f"Skipping check suite for PR #{pr_number} since it does not have the label '{label}'.")
            continue
        rebase_next_pull_request(
            adapter,
            repo,
            base_branch,
            label,
            settings.required_approvals,
            report,
        )


def dispatch(
    adapter: PlatformAdapter,
    event: TriggerEvent,
    settings: RebaseConfig,
    report: RunReport,
    repo: str,
    log: logging.Logger | None = None,
) -> RunReport:
    """Run the rebase passes a parsed trigger calls for.

    Platform errors propagate to the caller.
    """
    logger = log or logging.getLogger("autobase.dispatcher")
    base_branch = resolve_base_branch(adapter, repo, settings)

    if isinstance(event, PullRequestMerged):
        _handle_pull_request(adapter, event, repo, base_branch, settings, report, logger)
    elif isinstance(event, CheckSuiteCompleted):
        _handle_check_suite(adapter, event, repo, base_branch, settings, report)
    else:
        raise TypeError(f"Unknown trigger event: {type(event).__name__}")
    return report


def handle_github_event(
    adapter: PlatformAdapter,
    event_name: str,
    payload: Dict[str, Any] | None,
    config: AppConfig,
    report: RunReport | None = None,
    log: logging.Logger | None = None,
) -> RunReport:
    """Handle one GitHub event end to end; never raises on platform errors.

    Supported events:
    - pull_request (merged=true into the base branch): rebase next PR.
    - check_suite (action=completed, conclusion != success): for each
      associated PR carrying the label, rebase next PR.

    Unsupported events, missing payload objects and platform errors are
    recorded as failures in the returned report.
    """
    logger = log or logging.getLogger("autobase.dispatcher")
    report = report or RunReport()

    try:
        event = parse_github_event(event_name, payload)
    except EventError as e:
        report.fail(str(e))
        return report

    repo = event.repo or config.github.repository
    if not repo:
        report.fail("Could not determine repository from payload or config")
        return report
    if config.github.repository and event.repo and event.repo != config.github.repository:
        logger.debug("Skipping %s event: repository %s is not configured repo", event_name, event.repo)
        return report

    try:
        dispatch(adapter, event, config.rebase, report, repo, log=logger)
    except GitPlatformError as e:
        report.fail(f"Action failed with error: {e}")
    return report
