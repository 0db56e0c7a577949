"""Unit tests for the per-event Context."""

from __future__ import annotations

import asyncio
import typing as typ

import httpx
import pytest

from tests.helpers.fakes import FakeLogger, repository_payload
from tether import Context, Event, GitHubAPI
from tether.logging import EventLogger

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from tests.unit.conftest import GitHubFactory


def _unused_transport(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected request: {request.url}")


def _event(**payload: typ.Any) -> Event:
    return Event(
        name="issues",
        id="delivery-9",
        payload=repository_payload(**payload),
        protocol="https",
        host="bot.test",
        url="https://bot.test/webhooks",
    )


@pytest.fixture
def github() -> cabc.Iterator[GitHubAPI]:
    """Yield a client whose transport must never be used."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_unused_transport))
    yield GitHubAPI(http_client=http_client)
    asyncio.run(http_client.aclose())


def test_exposes_event_fields(github: GitHubAPI) -> None:
    """Context mirrors the wrapped event's fields."""
    event = _event(action="opened")
    context = Context(event, github)

    assert context.name == "issues"
    assert context.event == "issues"
    assert context.id == "delivery-9"
    assert context.payload is event.payload
    assert context.protocol == "https"
    assert context.host == "bot.test"
    assert context.url == "https://bot.test/webhooks"
    assert context.github is github


def test_repo_and_issue_use_payload(github: GitHubAPI) -> None:
    """repo() and issue() derive params from the event payload."""
    context = Context(_event(issue={"number": 12}), github)

    assert context.repo(path="x") == {"owner": "octo", "repo": "reef", "path": "x"}
    assert context.issue({"body": "hi"}) == {
        "owner": "octo",
        "repo": "reef",
        "number": 12,
        "body": "hi",
    }


def test_is_bot_reflects_sender_type(github: GitHubAPI) -> None:
    """is_bot is True only for Bot senders."""
    human = Context(_event(), github)
    bot = Context(_event(sender={"login": "renovate[bot]", "type": "Bot"}), github)

    assert human.is_bot is False
    assert bot.is_bot is True


def test_default_logger_is_bound_to_delivery(github: GitHubAPI) -> None:
    """Without an explicit logger the context tags logs with the delivery."""
    context = Context(_event(), github)

    assert isinstance(context.log, EventLogger)
    assert context.log.target == "[issues delivery-9]"


def test_injected_logger_is_used(github: GitHubAPI) -> None:
    """A supplied EventLogger receives handler log calls."""
    fake = FakeLogger()
    log = EventLogger(fake, event="issues", delivery_id="delivery-9")
    context = Context(_event(), github, log)

    context.log("comment posted on #%d", 12)

    assert fake.messages("INFO") == ["[issues delivery-9] comment posted on #12"]


@pytest.mark.asyncio
async def test_config_reads_from_event_repository(
    github_factory: GitHubFactory,
) -> None:
    """config() looks the file up in the event's repository."""
    paths: list[str] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(404, json={"message": "Not Found"})

    context = Context(_event(), github_factory(_handler))

    assert await context.config("bot.yml", {"enabled": True}) == {"enabled": True}
    assert paths == ["/repos/octo/reef/contents/.github/bot.yml"]
