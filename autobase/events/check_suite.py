"""Event schema for GitHub check_suite webhook."""

from typing import List

from pydantic import BaseModel, Field


class CheckSuiteCompleted(BaseModel):
    """Check suite finished for a commit (check_suite webhook).

    pull_requests holds the numbers of open PRs whose head is the suite's
    commit; GitHub leaves it empty for forks.
    """

    repo: str = ""
    action: str | None = None
    conclusion: str | None = None
    pull_requests: List[int] = Field(default_factory=list)

    @property
    def is_completed(self) -> bool:
        return self.action == "completed"

    @property
    def succeeded(self) -> bool:
        return self.conclusion == "success"
