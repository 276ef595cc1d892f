"""Completion items for GitHub issues, pull requests and mentions."""

from gh_complete.provider import GitHubSource
from gh_complete.version import __version__

__all__ = ["GitHubSource", "__version__"]
