"""tether: event context and GitHub API client for webhook-driven apps."""

from __future__ import annotations

from .context import Context
from .events import Event, EventDecodeError
from .github import GitHubAPI, GitHubAPIConfig, HookRegistry
from .repo_config import RepoConfigError

__all__ = [
    "Context",
    "Event",
    "EventDecodeError",
    "GitHubAPI",
    "GitHubAPIConfig",
    "HookRegistry",
    "RepoConfigError",
]
