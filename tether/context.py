"""Per-event context handed to webhook handlers.

A :class:`Context` bundles one :class:`~tether.events.Event`, the GitHub API
client handlers should call back through, and a logger tagged with the
delivery. It lives for exactly one handler invocation.

Example handler::

    async def on_issue_opened(context: Context) -> None:
        if context.is_bot:
            return
        config = await context.config("greeter.yml", {"message": "Thanks!"})
        await context.github.request(
            "POST /repos/{owner}/{repo}/issues/{number}/comments",
            **context.issue(body=config["message"]),
        )
"""

from __future__ import annotations

import typing as typ

from tether.logging import EventLogger, get_logger
from tether.params import is_bot_event, issue_params, repo_params
from tether.repo_config import load_repo_config

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from tether.events import Event, ReceiveProtocol
    from tether.github.client import GitHubAPI


class Context:
    """Read-only view of one webhook event plus derivation helpers.

    Attributes
    ----------
    github
        GitHub API client; shares its hook registry with every other context
        created from the same client.
    log
        Logger whose messages are tagged with the event name and delivery id.

    """

    def __init__(
        self,
        event: Event,
        github: GitHubAPI,
        log: EventLogger | None = None,
    ) -> None:
        """Wrap ``event`` for one handler invocation."""
        self._event = event
        self.github = github
        self.log = log or EventLogger(
            get_logger("tether.context"), event=event.name, delivery_id=event.id
        )

    def __repr__(self) -> str:
        """Return a short description naming the event and delivery."""
        return f"Context(name={self.name!r}, id={self.id!r})"

    @property
    def name(self) -> str:
        """Return the webhook event name."""
        return self._event.name

    @property
    def id(self) -> str:
        """Return the webhook delivery id."""
        return self._event.id

    @property
    def payload(self) -> dict[str, typ.Any]:
        """Return the webhook payload."""
        return self._event.payload

    @property
    def protocol(self) -> ReceiveProtocol | None:
        """Return the protocol the delivery was received over."""
        return self._event.protocol

    @property
    def host(self) -> str | None:
        """Return the host the delivery was received on."""
        return self._event.host

    @property
    def url(self) -> str | None:
        """Return the URL the delivery was received at."""
        return self._event.url

    @property
    def event(self) -> str:
        """Alias of :attr:`name`."""
        return self._event.name

    @property
    def is_bot(self) -> bool:
        """Return True when the event was triggered by a bot account."""
        return is_bot_event(self._event.payload)

    def repo(
        self,
        extra: cabc.Mapping[str, typ.Any] | None = None,
        /,
        **overrides: typ.Any,  # noqa: ANN401
    ) -> dict[str, typ.Any]:
        """Return ``owner`` and ``repo`` params merged with caller values.

        >>> context.repo(path=".github/config.yml")  # doctest: +SKIP
        {'owner': 'username', 'repo': 'reponame', 'path': '.github/config.yml'}
        """
        return repo_params(self._event.payload, extra, **overrides)

    def issue(
        self,
        extra: cabc.Mapping[str, typ.Any] | None = None,
        /,
        **overrides: typ.Any,  # noqa: ANN401
    ) -> dict[str, typ.Any]:
        """Return ``owner``, ``repo`` and ``number`` params merged with caller values.

        >>> context.issue(body="Hello World!")  # doctest: +SKIP
        {'owner': 'username', 'repo': 'reponame', 'number': 123, 'body': 'Hello World!'}
        """
        return issue_params(self._event.payload, extra, **overrides)

    async def config(
        self,
        file_name: str,
        default_config: cabc.Mapping[str, typ.Any] | None = None,
    ) -> cabc.Mapping[str, typ.Any] | None:
        """Read ``.github/<file_name>`` from the event's repository.

        Keys from the file override ``default_config``. When the file does not
        exist the defaults are returned unchanged, or ``None`` without
        defaults. See :func:`tether.repo_config.load_repo_config`.
        """
        return await load_repo_config(
            self.github, self.repo(), file_name, default_config
        )
