"""Request and response models for the GitHub API client."""

from __future__ import annotations

import dataclasses
import typing as typ

type Headers = dict[str, str]
type Variables = dict[str, typ.Any]


@dataclasses.dataclass(slots=True)
class RequestOptions:
    """Description of one outbound GitHub API call.

    Instances are deliberately mutable: ``before`` hooks receive the options
    object and may rewrite headers, params or the URL in place.

    Attributes
    ----------
    method
        HTTP method, upper case.
    url
        Path relative to ``base_url`` (may contain ``{name}`` placeholders
        filled from ``params``) or an absolute URL.
    headers
        Request headers; merged over the client defaults.
    params
        Placeholder values, then query-string values for ``GET``/``HEAD`` or
        the JSON body for other methods.
    base_url
        Overrides the client's configured API root for this call.
    query
        GraphQL document; set only for GraphQL calls.
    variables
        GraphQL variables; set only for GraphQL calls.

    """

    method: str
    url: str
    headers: Headers = dataclasses.field(default_factory=dict)
    params: dict[str, typ.Any] = dataclasses.field(default_factory=dict)
    base_url: str | None = None
    query: str | None = None
    variables: Variables | None = None

    @property
    def is_graphql(self) -> bool:
        """Return True when the options describe a GraphQL call."""
        return self.query is not None

    @classmethod
    def from_route(cls, route: str, **params: typ.Any) -> RequestOptions:  # noqa: ANN401
        """Build options from an ``"METHOD /path"`` route string.

        A route without a method defaults to ``GET``; ``headers`` and
        ``base_url`` keyword arguments are lifted out of ``params``.

        Examples
        --------
        >>> options = RequestOptions.from_route("POST /markdown", text="# hi")
        >>> (options.method, options.url, options.params)
        ('POST', '/markdown', {'text': '# hi'})

        """
        method, _, url = route.strip().partition(" ")
        if not url:
            method, url = "GET", method
        headers = dict(params.pop("headers", None) or {})
        base_url = params.pop("base_url", None)
        return cls(
            method=method.upper(),
            url=url.strip(),
            headers=headers,
            params=params,
            base_url=base_url,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class Result:
    """Successful GitHub API response.

    ``headers`` holds lower-cased response headers plus a ``status`` entry with
    the status line (``"200 OK"``). ``links`` maps Link header relations such
    as ``next`` and ``last`` to absolute URLs.
    """

    status: int
    headers: Headers
    data: typ.Any
    url: str
    links: dict[str, str] = dataclasses.field(default_factory=dict)

    @property
    def next_url(self) -> str | None:
        """Return the URL of the next page, if the response has one."""
        return self.links.get("next")
