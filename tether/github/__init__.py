"""GitHub API client, hook pipeline and pagination."""

from __future__ import annotations

from .client import GitHubAPI
from .config import GitHubAPIConfig
from .errors import (
    GitHubConfigError,
    GraphQLError,
    GraphQLQueryError,
    PlatformError,
    ResponseShapeError,
)
from .hooks import HookPhase, HookRegistry
from .limiter import MinimumIntervalLimiter, RateLimiter
from .models import RequestOptions, Result
from .observability import ErrorCategory, categorize_error, install_request_logging
from .pagination import normalize_page, paginate

__all__ = [
    "ErrorCategory",
    "GitHubAPI",
    "GitHubAPIConfig",
    "GitHubConfigError",
    "GraphQLError",
    "GraphQLQueryError",
    "HookPhase",
    "HookRegistry",
    "MinimumIntervalLimiter",
    "PlatformError",
    "RateLimiter",
    "RequestOptions",
    "ResponseShapeError",
    "Result",
    "categorize_error",
    "install_request_logging",
    "normalize_page",
    "paginate",
]
