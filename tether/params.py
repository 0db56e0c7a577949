"""Derive GitHub API request parameters from webhook payloads.

The derived shapes ``{"owner", "repo"}`` and ``{"owner", "repo", "number"}``
match the parameter names GitHub's REST routes use, so the results can be
passed straight to :meth:`tether.github.GitHubAPI.request`.

None of these helpers validate the payload: an event without a repository
yields ``None`` for ``owner`` and ``repo``. Calling them for such events is a
caller mistake, not a library error.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

BOT_ACTOR_TYPE = "Bot"

# Objects consulted for the issue/pull request number, highest priority first.
# The payload itself is the final fallback.
_NUMBER_SOURCES = ("issue", "pull_request")


def _as_mapping(value: object) -> cabc.Mapping[str, typ.Any]:
    if isinstance(value, cabc.Mapping):
        return value
    return {}


def _merge(
    derived: dict[str, typ.Any],
    extra: cabc.Mapping[str, typ.Any] | None,
    overrides: cabc.Mapping[str, typ.Any],
) -> dict[str, typ.Any]:
    merged = dict(derived)
    if extra:
        merged.update(extra)
    merged.update(overrides)
    return merged


def _repository_owner(repository: cabc.Mapping[str, typ.Any]) -> str | None:
    owner = _as_mapping(repository.get("owner"))
    # push payloads carry the owner's ``name`` rather than ``login``
    login = owner.get("login")
    if login is not None:
        return login
    return owner.get("name")


def repo_params(
    payload: cabc.Mapping[str, typ.Any],
    extra: cabc.Mapping[str, typ.Any] | None = None,
    /,
    **overrides: typ.Any,  # noqa: ANN401
) -> dict[str, typ.Any]:
    """Return ``owner`` and ``repo`` params merged with caller values.

    Caller-supplied keys win on collision, keyword arguments over ``extra``.

    Examples
    --------
    >>> payload = {"repository": {"name": "reef", "owner": {"login": "octo"}}}
    >>> repo_params(payload, path=".github/config.yml")
    {'owner': 'octo', 'repo': 'reef', 'path': '.github/config.yml'}

    """
    repository = _as_mapping(payload.get("repository"))
    derived = {
        "owner": _repository_owner(repository),
        "repo": repository.get("name"),
    }
    return _merge(derived, extra, overrides)


def issue_number(payload: cabc.Mapping[str, typ.Any]) -> typ.Any:  # noqa: ANN401
    """Return the issue or pull request number carried by ``payload``.

    The first number found wins, looking at ``issue``, then ``pull_request``,
    then the payload's own ``number`` field. Returns None if none has one.
    """
    for key in _NUMBER_SOURCES:
        number = _as_mapping(payload.get(key)).get("number")
        if number is not None:
            return number
    return payload.get("number")


def issue_params(
    payload: cabc.Mapping[str, typ.Any],
    extra: cabc.Mapping[str, typ.Any] | None = None,
    /,
    **overrides: typ.Any,  # noqa: ANN401
) -> dict[str, typ.Any]:
    """Return ``owner``, ``repo`` and ``number`` params merged with caller values.

    Examples
    --------
    >>> payload = {
    ...     "repository": {"name": "reef", "owner": {"login": "octo"}},
    ...     "issue": {"number": 7},
    ... }
    >>> issue_params(payload, body="Hello World!")
    {'owner': 'octo', 'repo': 'reef', 'number': 7, 'body': 'Hello World!'}

    """
    derived = repo_params(payload)
    derived["number"] = issue_number(payload)
    return _merge(derived, extra, overrides)


def is_bot_event(payload: cabc.Mapping[str, typ.Any]) -> bool:
    """Return True when the event's sender is classified as a bot account."""
    sender = _as_mapping(payload.get("sender"))
    return sender.get("type") == BOT_ACTOR_TYPE
