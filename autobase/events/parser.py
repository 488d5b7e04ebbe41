"""Build typed trigger events from GitHub event name and payload."""

from typing import Any, Dict, Union

from autobase.events.check_suite import CheckSuiteCompleted
from autobase.events.pull_request import PullRequestMerged

TriggerEvent = Union[PullRequestMerged, CheckSuiteCompleted]


class EventError(Exception):
    """Raised when a trigger cannot be turned into a TriggerEvent."""

    pass


class UnsupportedEventError(EventError):
    """Event kind is neither pull_request nor check_suite."""

    def __init__(self, event_name: str) -> None:
        self.event_name = event_name
        super().__init__("This action only supports pull_request and check_suite events.")


class MissingPayloadError(EventError):
    """Supported event whose payload lacks its main object."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Event payload missing `{key}`")


def _repo_from_payload(payload: Dict[str, Any]) -> str:
    repo_payload = payload.get("repository") or {}
    return repo_payload.get("full_name") or ""


def _parse_pull_request(payload: Dict[str, Any]) -> PullRequestMerged:
    pull = payload.get("pull_request")
    if not pull:
        raise MissingPayloadError("pull_request")
    base = pull.get("base") or {}
    return PullRequestMerged(
        repo=_repo_from_payload(payload),
        base_ref=base.get("ref") or "",
        was_merged=bool(pull.get("merged")),
    )


def _pr_number(pr: Any) -> int | None:
    """PR number of one check_suite association; None when absent or not numeric."""
    if not isinstance(pr, dict):
        return None
    number = pr.get("number")
    if isinstance(number, bool):
        return None
    try:
        return int(number)
    except (TypeError, ValueError):
        return None


def _parse_check_suite(payload: Dict[str, Any]) -> CheckSuiteCompleted:
    suite = payload.get("check_suite")
    if not suite:
        raise MissingPayloadError("check_suite")
    numbers = [n for n in map(_pr_number, suite.get("pull_requests") or []) if n is not None]
    return CheckSuiteCompleted(
        repo=_repo_from_payload(payload),
        action=payload.get("action"),
        conclusion=suite.get("conclusion"),
        pull_requests=numbers,
    )


def parse_github_event(event_name: str, payload: Dict[str, Any] | None) -> TriggerEvent:
    """Turn a GitHub event into a TriggerEvent.

    Raises:
        UnsupportedEventError: event_name is not pull_request or check_suite
        MissingPayloadError: payload has no pull_request / check_suite object
    """
    payload = payload or {}
    if event_name == "pull_request":
        return _parse_pull_request(payload)
    if event_name == "check_suite":
        return _parse_check_suite(payload)
    raise UnsupportedEventError(event_name)
