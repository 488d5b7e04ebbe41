"""Repository model."""

from pydantic import BaseModel


class Repository(BaseModel):
    """Repository metadata needed to pick the base branch."""

    full_name: str = ""
    default_branch: str = "main"
