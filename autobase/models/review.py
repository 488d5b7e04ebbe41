"""Pull request review model."""

from pydantic import BaseModel


class Review(BaseModel):
    """Review on a pull request (only its state matters for gating)."""

    id: int | None = None
    state: str
    author: str = ""

    @property
    def is_approved(self) -> bool:
        return self.state.upper() == "APPROVED"
