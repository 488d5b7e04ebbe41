"""Trigger event schemas for GitHub payloads.

Processed events:

Pull requests:
- pull_request with merged=true into the base branch

Check suites:
- check_suite completed with any conclusion other than success
"""

from autobase.events.check_suite import CheckSuiteCompleted
from autobase.events.parser import (
    EventError,
    MissingPayloadError,
    TriggerEvent,
    UnsupportedEventError,
    parse_github_event,
)
from autobase.events.pull_request import PullRequestMerged

__all__ = [
    "CheckSuiteCompleted",
    "EventError",
    "MissingPayloadError",
    "PullRequestMerged",
    "TriggerEvent",
    "UnsupportedEventError",
    "parse_github_event",
]
