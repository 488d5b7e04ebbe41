"""Autobase - keep labeled pull requests rebased onto their base branch."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("autobase")
except PackageNotFoundError:
    # Package not installed, use fallback
    __version__ = "0.1.0.dev"

from autobase.dispatcher import dispatch, handle_github_event
from autobase.rebaser import rebase_next_pull_request
from autobase.report import RunReport

__all__ = [
    "RunReport",
    "dispatch",
    "handle_github_event",
    "rebase_next_pull_request",
    "__version__",
]
