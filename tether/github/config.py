"""Configuration for the GitHub API client."""

from __future__ import annotations

import dataclasses
import os
import urllib.parse

from .errors import GitHubConfigError

_DEFAULT_BASE_URL = "https://api.github.com"
_DEFAULT_TIMEOUT_S = 20.0
_DEFAULT_USER_AGENT = "tether/0.1"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubAPIConfig:
    """Configuration for :class:`~tether.github.client.GitHubAPI`.

    Attributes
    ----------
    token
        Installation or personal access token. When ``None`` requests are sent
        unauthenticated; token minting is the caller's concern.
    base_url
        REST API root. GitHub Enterprise installs use ``https://host/api/v3``.
    timeout_s
        Per-request timeout handed to httpx.
    user_agent
        ``User-Agent`` header sent with every request.
    debug
        Install request-logging hooks on the client.

    """

    token: str | None = None
    base_url: str = _DEFAULT_BASE_URL
    timeout_s: float = _DEFAULT_TIMEOUT_S
    user_agent: str = _DEFAULT_USER_AGENT
    debug: bool = False

    def __post_init__(self) -> None:
        """Validate the API root."""
        parsed = urllib.parse.urlsplit(self.base_url)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise GitHubConfigError.invalid_base_url(self.base_url)

    @property
    def graphql_url(self) -> str:
        """Return the GraphQL endpoint matching ``base_url``.

        ``https://api.github.com`` maps to ``https://api.github.com/graphql``;
        Enterprise roots ending in ``/api/v3`` map to ``/api/graphql``.
        """
        root = self.base_url.rstrip("/")
        root = root.removesuffix("/v3")
        return f"{root}/graphql"

    @staticmethod
    def _parse_timeout_from_env() -> float:
        raw = os.environ.get("TETHER_GITHUB_TIMEOUT_S", "")
        if not raw.strip():
            return _DEFAULT_TIMEOUT_S
        try:
            timeout = float(raw)
        except ValueError as exc:
            raise GitHubConfigError.invalid_timeout(raw) from exc
        if timeout <= 0:
            raise GitHubConfigError.invalid_timeout(raw)
        return timeout

    @staticmethod
    def _parse_flag_from_env(name: str) -> bool:
        raw = os.environ.get(name, "")
        normalised = raw.strip().lower()
        if normalised in _TRUE_VALUES:
            return True
        if normalised in _FALSE_VALUES:
            return False
        raise GitHubConfigError.invalid_flag(name, raw)

    @classmethod
    def from_env(cls) -> GitHubAPIConfig:
        """Build configuration from environment variables.

        Reads the following environment variables:

        - ``TETHER_GITHUB_TOKEN``: Optional API token
        - ``TETHER_GITHUB_BASE_URL``: Optional REST API root override
        - ``TETHER_GITHUB_TIMEOUT_S``: Optional timeout (positive number)
        - ``TETHER_DEBUG``: Optional flag enabling request logging

        Returns
        -------
        GitHubAPIConfig
            Configuration populated from the environment or defaults.

        Raises
        ------
        GitHubConfigError
            If any variable holds an invalid value.

        """
        token = os.environ.get("TETHER_GITHUB_TOKEN", "").strip() or None
        base_url = (
            os.environ.get("TETHER_GITHUB_BASE_URL", "").strip() or _DEFAULT_BASE_URL
        )
        return cls(
            token=token,
            base_url=base_url,
            timeout_s=cls._parse_timeout_from_env(),
            debug=cls._parse_flag_from_env("TETHER_DEBUG"),
        )
