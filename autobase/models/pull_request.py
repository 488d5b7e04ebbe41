"""Pull request models: list snapshot and authoritative detail.

The list endpoint is eventually consistent, so readiness is always
re-read from PullRequestDetail before acting on a candidate.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class MergeableState(str, Enum):
    """Values GitHub reports in ``mergeable_state``."""

    BEHIND = "behind"
    BLOCKED = "blocked"
    CLEAN = "clean"
    DIRTY = "dirty"
    DRAFT = "draft"
    HAS_HOOKS = "has_hooks"
    UNKNOWN = "unknown"
    UNSTABLE = "unstable"


class PullRequestSummary(BaseModel):
    """Pull request as returned by the list endpoint."""

    number: int
    labels: List[str] = Field(default_factory=list)
    draft: bool = False
    base_branch: str = ""
    head_sha: str = ""
    state: str = "open"

    def has_label(self, label: str) -> bool:
        return label in self.labels


class PullRequestDetail(BaseModel):
    """Single pull request fetched by number."""

    number: int
    # Raw string so diagnostics can quote whatever the platform sent
    mergeable_state: str | None = None
    # None while GitHub is still computing it
    rebaseable: bool | None = None
    labels: List[str] = Field(default_factory=list)

    @property
    def is_behind(self) -> bool:
        return self.mergeable_state == MergeableState.BEHIND.value

    def has_label(self, label: str) -> bool:
        return label in self.labels
