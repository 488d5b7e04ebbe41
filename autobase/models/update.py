"""Result of a branch update request."""

from pydantic import BaseModel


class BranchUpdateResult(BaseModel):
    """Accepted update-branch request (GitHub answers 202 with message and url)."""

    message: str = ""
    url: str = ""
