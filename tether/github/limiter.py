"""Rate-limit policies applied before each request reaches the transport."""

from __future__ import annotations

import asyncio
import time
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import RequestOptions


class RateLimiter(typ.Protocol):
    """Policy awaited once per request, after ``before`` hooks have run."""

    async def acquire(self, options: RequestOptions) -> None:
        """Suspend until the request may be sent."""
        ...


class MinimumIntervalLimiter:
    """Space request start times at least ``min_interval_s`` apart.

    Acquisitions are serialized, so concurrent callers queue in arrival order.
    """

    def __init__(
        self,
        min_interval_s: float,
        *,
        clock: cabc.Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialise the limiter with the minimum spacing between requests."""
        if min_interval_s < 0:
            msg = f"min_interval_s must be non-negative, got: {min_interval_s}"
            raise ValueError(msg)
        self.min_interval_s = min_interval_s
        self._clock = clock
        self._lock = asyncio.Lock()
        self._last_started: float | None = None

    async def acquire(self, options: RequestOptions) -> None:
        """Sleep until the configured interval since the last request elapses."""
        del options
        async with self._lock:
            if self._last_started is not None:
                wait = self._last_started + self.min_interval_s - self._clock()
                if wait > 0:
                    await asyncio.sleep(wait)
            self._last_started = self._clock()
