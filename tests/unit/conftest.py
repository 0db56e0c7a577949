"""Shared fixtures for tether unit tests."""

from __future__ import annotations

import secrets
import typing as typ

import httpx
import pytest
import pytest_asyncio

from tests.helpers.fakes import FakeLogger
from tether.github import GitHubAPI, GitHubAPIConfig, HookRegistry

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from tether.github import RateLimiter

TOKEN = secrets.token_hex(8)

type Handler = cabc.Callable[[httpx.Request], httpx.Response]


class GitHubFactory(typ.Protocol):
    """Callable fixture building clients backed by a mock transport."""

    def __call__(
        self,
        handler: Handler,
        *,
        config: GitHubAPIConfig | None = None,
        hooks: HookRegistry | None = None,
        logger: FakeLogger | None = None,
        limiter: RateLimiter | None = None,
    ) -> GitHubAPI: ...


@pytest.fixture
def fake_logger() -> FakeLogger:
    """Return a logger that records calls."""
    return FakeLogger()


@pytest.fixture
def token() -> str:
    """Return the API token configured on factory-built clients."""
    return TOKEN


@pytest_asyncio.fixture
async def github_factory() -> cabc.AsyncIterator[GitHubFactory]:
    """Yield a factory for GitHubAPI clients using httpx.MockTransport."""
    http_clients: list[httpx.AsyncClient] = []

    def _make(
        handler: Handler,
        *,
        config: GitHubAPIConfig | None = None,
        hooks: HookRegistry | None = None,
        logger: FakeLogger | None = None,
        limiter: RateLimiter | None = None,
    ) -> GitHubAPI:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        http_clients.append(http_client)
        return GitHubAPI(
            config or GitHubAPIConfig(token=TOKEN),
            http_client=http_client,
            hooks=hooks,
            logger=logger or FakeLogger(),
            limiter=limiter,
        )

    yield _make

    for http_client in http_clients:
        await http_client.aclose()
