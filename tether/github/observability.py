"""Request logging and error categorization for the GitHub API client.

The client installs these hooks when ``GitHubAPIConfig.debug`` is set. They
are ordinary hooks, so applications can also install them on a shared
registry themselves.
"""

from __future__ import annotations

import enum
import typing as typ

from tether.logging import log_debug, log_warning

from .errors import (
    GitHubConfigError,
    GraphQLError,
    PlatformError,
    ResponseShapeError,
)

if typ.TYPE_CHECKING:
    from tether.logging import SupportsLog

    from .hooks import HookRegistry
    from .models import RequestOptions, Result


class ErrorCategory(enum.StrEnum):
    """Categories for error classification in logs and alerts."""

    TRANSIENT = "transient"
    NOT_FOUND = "not_found"
    CLIENT_ERROR = "client_error"
    GRAPHQL = "graphql"
    SCHEMA_DRIFT = "schema_drift"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (GraphQLError, ErrorCategory.GRAPHQL),
    (ResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
    (GitHubConfigError, ErrorCategory.CONFIGURATION),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize an exception raised while talking to GitHub."""
    # PlatformError needs its status code inspected
    if isinstance(exc, PlatformError):
        if exc.is_transient:
            return ErrorCategory.TRANSIENT
        if exc.is_not_found:
            return ErrorCategory.NOT_FOUND
        return ErrorCategory.CLIENT_ERROR

    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category

    return ErrorCategory.UNKNOWN


def _describe(options: RequestOptions) -> str:
    if options.is_graphql:
        return f"{options.method} {options.url} (graphql)"
    return f"{options.method} {options.url}"


def install_request_logging(hooks: HookRegistry, logger: SupportsLog) -> None:
    """Register hooks that log every request, response and failure.

    Failures are logged at WARNING, except 404s, which are logged at DEBUG.
    """

    def _log_request(options: RequestOptions) -> None:
        log_debug(logger, "[github.request] %s", _describe(options))

    def _log_response(result: Result, options: RequestOptions) -> None:
        log_debug(
            logger,
            "[github.response] %s status=%s",
            _describe(options),
            result.headers.get("status", result.status),
        )

    def _log_failure(error: PlatformError, options: RequestOptions) -> None:
        category = categorize_error(error)
        # missing resources are routine, e.g. absent repository config files
        emit = log_debug if category is ErrorCategory.NOT_FOUND else log_warning
        emit(
            logger,
            "[github.failed] %s code=%d category=%s error=%s",
            _describe(options),
            error.code,
            category,
            error,
        )

    hooks.before("request", _log_request)
    hooks.after("request", _log_response)
    hooks.error("request", _log_failure)
