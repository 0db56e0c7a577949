"""GitHub API client errors."""

from __future__ import annotations

import typing as typ

_HTTP_NOT_FOUND = 404
_HTTP_RATE_LIMITED = 429
_HTTP_SERVER_ERROR_THRESHOLD = 500


class PlatformError(RuntimeError):
    """Raised when a GitHub API request fails.

    Attributes
    ----------
    code
        HTTP status code, or ``0`` when no response was received.
    status
        HTTP reason phrase (``"Not Found"``) or a short transport label.
    headers
        Response headers, empty for transport failures.
    data
        Decoded response body, if any.

    """

    def __init__(
        self,
        message: str,
        *,
        code: int = 0,
        status: str = "",
        headers: dict[str, str] | None = None,
        data: object = None,
    ) -> None:
        """Initialise with a message and the failing response details."""
        self.code = code
        self.status = status
        self.headers = headers or {}
        self.data = data
        super().__init__(message)

    @property
    def message(self) -> str:
        """Return the human-readable error message."""
        return str(self)

    @property
    def is_not_found(self) -> bool:
        """Return True for 404 responses."""
        return self.code == _HTTP_NOT_FOUND

    @property
    def is_transient(self) -> bool:
        """Return True when retrying the request could succeed."""
        return (
            self.code == 0
            or self.code == _HTTP_RATE_LIMITED
            or self.code >= _HTTP_SERVER_ERROR_THRESHOLD
        )

    @classmethod
    def http_error(
        cls,
        code: int,
        status: str,
        *,
        headers: dict[str, str] | None = None,
        data: object = None,
    ) -> PlatformError:
        """Return an error for non-2xx HTTP responses.

        GitHub error bodies carry a ``message`` field; it is preferred over the
        reason phrase when present.
        """
        detail = status
        if isinstance(data, dict):
            body_message = data.get("message")
            if isinstance(body_message, str) and body_message:
                detail = body_message
        return cls(
            f"GitHub API HTTP {code}: {detail}",
            code=code,
            status=status,
            headers=headers,
            data=data,
        )

    @classmethod
    def timeout(cls) -> PlatformError:
        """Return an error for requests that timed out."""
        return cls("GitHub API request timed out", status="timeout")

    @classmethod
    def network_error(cls, detail: str) -> PlatformError:
        """Return an error for connection-level failures."""
        return cls(f"GitHub API network error: {detail}", status="network_error")


class GraphQLError(RuntimeError):
    """Raised when a GraphQL query returns errors and no data object."""

    def __init__(
        self,
        errors: list[typ.Any],
        query: str,
        variables: dict[str, typ.Any] | None = None,
    ) -> None:
        """Initialise with the GraphQL errors and the failing query."""
        self.errors = errors
        self.query = query
        self.variables = variables
        super().__init__(_graphql_message(errors))


class GraphQLQueryError(GraphQLError):
    """Raised when a GraphQL query returns errors alongside partial data."""

    def __init__(
        self,
        errors: list[typ.Any],
        query: str,
        variables: dict[str, typ.Any] | None,
        data: dict[str, typ.Any],
    ) -> None:
        """Initialise with the GraphQL errors and the partial ``data``."""
        self.data = data
        super().__init__(errors, query, variables)


def _graphql_message(errors: list[typ.Any]) -> str:
    messages = [
        error["message"]
        for error in errors
        if isinstance(error, dict) and isinstance(error.get("message"), str)
    ]
    if not messages:
        return f"GitHub GraphQL errors: {errors}"
    return "GitHub GraphQL errors: " + "; ".join(messages)


class ResponseShapeError(RuntimeError):
    """Raised when GitHub responses are missing expected fields."""

    @classmethod
    def missing(cls, field: str) -> ResponseShapeError:
        """Return an error for a missing response field."""
        return cls(f"GitHub API response missing expected field: {field}")


class GitHubConfigError(RuntimeError):
    """Raised when GitHub client configuration is invalid."""

    @classmethod
    def invalid_timeout(cls, raw: str) -> GitHubConfigError:
        """Return an error for a non-positive or non-numeric timeout."""
        return cls(f"TETHER_GITHUB_TIMEOUT_S must be a positive number, got: {raw!r}")

    @classmethod
    def invalid_flag(cls, name: str, raw: str) -> GitHubConfigError:
        """Return an error for an unrecognised boolean flag value."""
        return cls(f"{name} must be a boolean flag, got: {raw!r}")

    @classmethod
    def invalid_base_url(cls, raw: str) -> GitHubConfigError:
        """Return an error when the API base URL is not absolute HTTP(S)."""
        return cls(f"GitHub API base URL must be an http(s) URL, got: {raw!r}")

    @classmethod
    def unknown_hook_event(cls, when: str) -> GitHubConfigError:
        """Return an error for hook registrations on unsupported events."""
        return cls(f"hooks can only be registered for 'request', got: {when!r}")
