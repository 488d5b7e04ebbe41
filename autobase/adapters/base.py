"""Abstract base for Git platform adapters.

The rebase logic only needs these five calls, so tests swap in a Mock and
other hosts (GitLab, Bitbucket) only have to implement this surface.
"""

from abc import ABC, abstractmethod
from typing import List

from autobase.models import BranchUpdateResult, PullRequestDetail, PullRequestSummary, Repository, Review


class GitPlatformError(Exception):
    """Raised when a Git platform API call fails."""

    pass


class PlatformAdapter(ABC):
    """Abstract interface for Git hosting platforms."""

    @abstractmethod
    def get_repository(self, repo: str) -> Repository:
        """Fetch repository metadata (default branch)."""
        ...

    @abstractmethod
    def list_open_pull_requests(self, repo: str, base_branch: str) -> List[PullRequestSummary]:
        """List open PRs targeting base_branch, oldest created first."""
        ...

    @abstractmethod
    def get_pull_request(self, repo: str, pr_number: int) -> PullRequestDetail:
        """Fetch a single PR with its authoritative merge state."""
        ...

    @abstractmethod
    def list_reviews(self, repo: str, pr_number: int) -> List[Review]:
        """List reviews submitted on a PR."""
        ...

    @abstractmethod
    def update_branch(self, repo: str, pr_number: int, expected_head_sha: str) -> BranchUpdateResult:
        """Rebase the PR branch onto its base.

        Must fail if the branch head is no longer expected_head_sha.
        """
        ...
