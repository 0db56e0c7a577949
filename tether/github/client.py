"""GitHub REST and GraphQL client with a before/after/error hook pipeline."""

from __future__ import annotations

import json
import re
import typing as typ
import urllib.parse

import httpx

from tether.logging import get_logger

from .config import GitHubAPIConfig
from .errors import GraphQLError, GraphQLQueryError, PlatformError, ResponseShapeError
from .hooks import HookRegistry
from .models import Headers, RequestOptions, Result, Variables
from .observability import install_request_logging
from .pagination import PageCallback, paginate

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import types

    from tether.logging import SupportsLog

    from .limiter import RateLimiter

_HTTP_ERROR_STATUS_THRESHOLD = 400
_DEFAULT_ACCEPT = "application/vnd.github.v3+json"
_BODYLESS_METHODS = frozenset({"GET", "HEAD"})
_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def _expand_url(
    template: str, params: dict[str, typ.Any]
) -> tuple[str, dict[str, typ.Any]]:
    """Fill ``{name}`` placeholders and return the unused params."""
    remaining = dict(params)

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in remaining:
            msg = f"missing URL parameter {name!r} for {template!r}"
            raise ValueError(msg)
        return urllib.parse.quote(str(remaining.pop(name)), safe="/")

    return _PLACEHOLDER.sub(_substitute, template), remaining


def _is_absolute(url: str) -> bool:
    return urllib.parse.urlsplit(url).scheme in {"http", "https"}


def _join_url(base_url: str, path: str) -> str:
    if _is_absolute(path):
        return path
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def _lower_keys(headers: Headers) -> Headers:
    return {key.lower(): value for key, value in headers.items()}


def _decode_body(response: httpx.Response) -> typ.Any:  # noqa: ANN401
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if "json" not in content_type:
        return response.text
    try:
        return response.json()
    except json.JSONDecodeError:
        return response.text


def _response_headers(response: httpx.Response) -> Headers:
    headers = {key.lower(): value for key, value in response.headers.items()}
    headers["status"] = f"{response.status_code} {response.reason_phrase}".strip()
    return headers


def _response_links(response: httpx.Response) -> dict[str, str]:
    return {
        rel: link["url"]
        for rel, link in response.links.items()
        if isinstance(link.get("url"), str)
    }


def _graphql_data(
    payload: object, query: str, variables: Variables | None
) -> dict[str, typ.Any]:
    """Classify a GraphQL response body and return its ``data`` field."""
    if not isinstance(payload, dict):
        raise ResponseShapeError.missing("response")

    data = payload.get("data")
    errors = payload.get("errors")
    if errors:
        error_list = errors if isinstance(errors, list) else [errors]
        if isinstance(data, dict):
            raise GraphQLQueryError(error_list, query, variables, data)
        raise GraphQLError(error_list, query, variables)

    if not isinstance(data, dict):
        raise ResponseShapeError.missing("data")
    return data


class GitHubAPI:
    """Dispatch GitHub API calls through a shared hook pipeline.

    The client wraps an :class:`httpx.AsyncClient` rather than extending a
    third-party client, and exposes only ``request``, ``query``, ``paginate``
    and hook registration via :attr:`hook`.

    Parameters
    ----------
    config
        API root, token and timeout settings. Defaults to public GitHub,
        unauthenticated.
    http_client
        Optional httpx client, mainly for tests. When omitted the instance
        creates and owns its own client.
    hooks
        Registry to dispatch through. Pass one registry to share hooks between
        clients; omitted means a fresh registry owned by this client.
    logger
        femtologging-compatible logger used by request logging.
    limiter
        Rate-limit policy awaited before each request is sent.

    Examples
    --------
    >>> import asyncio
    >>> from tether.github import GitHubAPI
    >>> github = GitHubAPI()
    >>> github.hook.before("request", lambda options: None)
    >>> asyncio.run(github.aclose())

    """

    def __init__(
        self,
        config: GitHubAPIConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        hooks: HookRegistry | None = None,
        logger: SupportsLog | None = None,
        limiter: RateLimiter | None = None,
    ) -> None:
        """Initialise the client and install debug logging if configured."""
        self._config = config or GitHubAPIConfig()
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=self._config.timeout_s
        )
        self.hook = hooks if hooks is not None else HookRegistry()
        self.log = logger if logger is not None else get_logger(__name__)
        self._limiter = limiter
        if self._config.debug:
            install_request_logging(self.hook, self.log)

    @property
    def config(self) -> GitHubAPIConfig:
        """Read-only access to the client configuration."""
        return self._config

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> GitHubAPI:
        """Return the client for use in ``async with`` blocks."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: types.TracebackType | None,
    ) -> None:
        """Close owned resources on exit."""
        await self.aclose()

    def _default_headers(self) -> Headers:
        headers = {
            "accept": _DEFAULT_ACCEPT,
            "user-agent": self._config.user_agent,
        }
        if self._config.token:
            headers["authorization"] = f"token {self._config.token}"
        return headers

    async def request(
        self,
        route: RequestOptions | str,
        **params: typ.Any,  # noqa: ANN401
    ) -> Result:
        """Send one REST request through the hook pipeline.

        Parameters
        ----------
        route
            Prepared :class:`RequestOptions`, or a route string such as
            ``"GET /repos/{owner}/{repo}/issues"``.
        **params
            Placeholder, query-string or body values. With a route string,
            ``headers`` and ``base_url`` are accepted too.

        Returns
        -------
        Result
            The successful response, or the value an ``error`` hook recovered
            the request with.

        Raises
        ------
        PlatformError
            If the transport fails or GitHub answers with status >= 400 and no
            ``error`` hook recovers.

        """
        if isinstance(route, RequestOptions):
            options = route
            options.params.update(params)
        else:
            options = RequestOptions.from_route(route, **params)
        options.headers = {**self._default_headers(), **_lower_keys(options.headers)}

        await self.hook.run_before(options)
        # hooks may add mixed-case names; later assignments win
        options.headers = _lower_keys(options.headers)
        if self._limiter is not None:
            await self._limiter.acquire(options)

        try:
            result = await self._send(options)
        except PlatformError as exc:
            return await self.hook.run_error(exc, options)

        await self.hook.run_after(result, options)
        return result

    async def _send(self, options: RequestOptions) -> Result:
        """Perform the HTTP call described by ``options``."""
        path, leftover = _expand_url(options.url, options.params)
        url = _join_url(options.base_url or self._config.base_url, path)
        method = options.method.upper()

        body: dict[str, typ.Any] | None = None
        query_params: dict[str, typ.Any] | None = None
        if options.is_graphql:
            body = {"query": options.query, "variables": options.variables or {}}
        elif method in _BODYLESS_METHODS:
            query_params = leftover or None
        elif leftover:
            body = leftover

        try:
            response = await self._client.request(
                method,
                url,
                headers=options.headers,
                params=query_params,
                json=body,
            )
        except httpx.TimeoutException as exc:
            raise PlatformError.timeout() from exc
        except httpx.RequestError as exc:
            raise PlatformError.network_error(str(exc)) from exc

        data = _decode_body(response)
        headers = _response_headers(response)
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise PlatformError.http_error(
                response.status_code,
                response.reason_phrase,
                headers=headers,
                data=data,
            )
        return Result(
            status=response.status_code,
            headers=headers,
            data=data,
            url=str(response.url),
            links=_response_links(response),
        )

    async def query(
        self,
        query: str,
        variables: Variables | None = None,
        headers: Headers | None = None,
    ) -> typ.Any:  # noqa: ANN401
        """Run a GraphQL query and return its ``data`` field.

        Raises
        ------
        GraphQLQueryError
            If the response has ``errors`` alongside a ``data`` object, even
            one holding only nulls.
        GraphQLError
            If the response has ``errors`` and ``data`` is missing or null.
        PlatformError
            If the HTTP request itself fails.

        """
        options = RequestOptions(
            method="POST",
            url=self._config.graphql_url,
            headers=dict(headers or {}),
            query=query,
            variables=variables,
        )
        result = await self.request(options)
        if not isinstance(result, Result):
            # an error hook recovered the request with a substitute value
            return result
        return _graphql_data(result.data, query, variables)

    async def paginate(
        self,
        response: cabc.Awaitable[Result] | Result,
        callback: PageCallback | None = None,
    ) -> list[typ.Any]:
        """Collect every page starting from ``response``; see :func:`paginate`."""
        return await paginate(self, response, callback)

    @staticmethod
    def has_next_page(result: Result) -> bool:
        """Return True when ``result`` links to a following page."""
        return result.next_url is not None

    async def get_next_page(self, result: Result) -> Result | None:
        """Fetch the page after ``result``, or return None on the last page."""
        next_url = result.next_url
        if next_url is None:
            return None
        return await self.request(RequestOptions(method="GET", url=next_url))
