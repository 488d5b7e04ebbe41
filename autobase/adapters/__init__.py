"""Git platform adapters."""

from autobase.adapters.base import GitPlatformError, PlatformAdapter
from autobase.adapters.github import GitHubAdapter

__all__ = ["PlatformAdapter", "GitPlatformError", "GitHubAdapter"]
