"""Event schema for GitHub pull_request webhook.

Only the merge matters here; the event is built for any pull_request
delivery and the dispatcher decides from was_merged and base_ref.
"""

from pydantic import BaseModel


class PullRequestMerged(BaseModel):
    """Pull request closed into base_ref (merged or not)."""

    repo: str = ""
    base_ref: str = ""
    was_merged: bool = False
