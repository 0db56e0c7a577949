"""Normalized webhook events."""

from __future__ import annotations

import dataclasses
import typing as typ

import msgspec

if typ.TYPE_CHECKING:
    import collections.abc as cabc

EVENT_HEADER = "x-github-event"
DELIVERY_HEADER = "x-github-delivery"

type ReceiveProtocol = typ.Literal["http", "https"]


class EventDecodeError(ValueError):
    """Raised when a webhook delivery cannot be turned into an event."""

    @classmethod
    def missing_header(cls, header: str) -> EventDecodeError:
        """Return an error for a delivery without a required header."""
        return cls(f"webhook delivery is missing the {header} header")

    @classmethod
    def invalid_body(cls, detail: str) -> EventDecodeError:
        """Return an error for a body that is not a JSON object."""
        return cls(f"webhook body must be a JSON object: {detail}")


@dataclasses.dataclass(frozen=True, slots=True)
class Event:
    """One inbound GitHub webhook delivery.

    Attributes
    ----------
    name
        Event name from the ``X-GitHub-Event`` header (``"issues"``, ``"push"``).
    id
        Delivery id from the ``X-GitHub-Delivery`` header.
    payload
        Decoded JSON body. Never mutated by tether.
    protocol, host, url
        Where the delivery was received, when the receiver records it.

    """

    name: str
    id: str
    payload: dict[str, typ.Any]
    protocol: ReceiveProtocol | None = None
    host: str | None = None
    url: str | None = None

    @property
    def action(self) -> str | None:
        """Return the payload's ``action`` field, if any."""
        action = self.payload.get("action")
        return action if isinstance(action, str) else None

    @property
    def qualified_name(self) -> str:
        """Return ``name.action`` for events with an action, else ``name``."""
        action = self.action
        return f"{self.name}.{action}" if action else self.name

    @classmethod
    def from_delivery(
        cls,
        headers: cabc.Mapping[str, str],
        body: bytes | str,
        **location: str | None,
    ) -> Event:
        """Build an event from raw webhook headers and JSON body.

        Header lookup is case-insensitive. ``location`` accepts ``protocol``,
        ``host`` and ``url``.

        Raises
        ------
        EventDecodeError
            If either header is missing or the body is not a JSON object.

        """
        lowered = {key.lower(): value for key, value in headers.items()}
        name = lowered.get(EVENT_HEADER)
        if not name:
            raise EventDecodeError.missing_header(EVENT_HEADER)
        delivery_id = lowered.get(DELIVERY_HEADER)
        if not delivery_id:
            raise EventDecodeError.missing_header(DELIVERY_HEADER)

        try:
            payload = msgspec.json.decode(body, type=dict[str, typ.Any])
        except msgspec.DecodeError as exc:
            raise EventDecodeError.invalid_body(str(exc)) from exc

        return cls(
            name=name,
            id=delivery_id,
            payload=payload,
            protocol=typ.cast("ReceiveProtocol | None", location.get("protocol")),
            host=location.get("host"),
            url=location.get("url"),
        )
