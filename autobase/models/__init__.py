"""Data models for repositories, pull requests and reviews (Pydantic)."""

from autobase.models.pull_request import MergeableState, PullRequestDetail, PullRequestSummary
from autobase.models.repository import Repository
from autobase.models.review import Review
from autobase.models.update import BranchUpdateResult

__all__ = [
    "BranchUpdateResult",
    "MergeableState",
    "PullRequestDetail",
    "PullRequestSummary",
    "Repository",
    "Review",
]
