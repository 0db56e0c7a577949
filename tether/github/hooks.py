"""Before/after/error hook pipeline for outbound GitHub API requests.

Hooks are registered once at application setup on the :class:`HookRegistry`
owned by a :class:`~tether.github.client.GitHubAPI` instance. Every request
the client dispatches passes through three phases:

``before``
    Receives the mutable :class:`~tether.github.models.RequestOptions` and may
    rewrite it (inject auth headers, add preview media types).
``after``
    Observes the successful :class:`~tether.github.models.Result`.
``error``
    Observes the :class:`~tether.github.errors.PlatformError`. Returning a
    non-``None`` value recovers the request with that value; raising replaces
    the error.

Callbacks of one phase run strictly in registration order. Coroutine
callbacks are awaited to completion before the next callback starts, so a
later ``before`` hook always sees earlier mutations.
"""

from __future__ import annotations

import collections.abc as cabc
import enum
import inspect
import typing as typ

from .errors import GitHubConfigError

if typ.TYPE_CHECKING:
    from .errors import PlatformError
    from .models import RequestOptions, Result

HOOK_EVENT = "request"

type BeforeHook = cabc.Callable[[RequestOptions], object]
type AfterHook = cabc.Callable[[Result, RequestOptions], object]
type ErrorHook = cabc.Callable[[PlatformError, RequestOptions], object]
type Hook = BeforeHook | AfterHook | ErrorHook


class HookPhase(enum.StrEnum):
    """Phases of the request lifecycle that accept hooks."""

    BEFORE = "before"
    AFTER = "after"
    ERROR = "error"


async def _settle(value: object) -> object:
    if inspect.isawaitable(value):
        return await value
    return value


class HookRegistry:
    """Ordered, append-only hook lists keyed by phase."""

    def __init__(self) -> None:
        """Create empty hook lists for every phase."""
        self._hooks: dict[HookPhase, list[Hook]] = {phase: [] for phase in HookPhase}

    def register(self, phase: HookPhase | str, callback: Hook) -> None:
        """Append ``callback`` to the hooks for ``phase``."""
        self._hooks[HookPhase(phase)].append(callback)

    def before(self, when: str, callback: BeforeHook) -> None:
        """Register a hook that runs before each request is sent."""
        self._register_for(when, HookPhase.BEFORE, callback)

    def after(self, when: str, callback: AfterHook) -> None:
        """Register a hook that runs after each successful request."""
        self._register_for(when, HookPhase.AFTER, callback)

    def error(self, when: str, callback: ErrorHook) -> None:
        """Register a hook that runs when a request fails."""
        self._register_for(when, HookPhase.ERROR, callback)

    def _register_for(self, when: str, phase: HookPhase, callback: Hook) -> None:
        if when != HOOK_EVENT:
            raise GitHubConfigError.unknown_hook_event(when)
        self.register(phase, callback)

    def count(self, phase: HookPhase | str) -> int:
        """Return the number of hooks registered for ``phase``."""
        return len(self._hooks[HookPhase(phase)])

    async def run_before(self, options: RequestOptions) -> None:
        """Run ``before`` hooks; exceptions propagate and abort the request."""
        for callback in self._hooks[HookPhase.BEFORE]:
            await _settle(callback(options))

    async def run_after(self, result: Result, options: RequestOptions) -> None:
        """Run ``after`` hooks against a successful result."""
        for callback in self._hooks[HookPhase.AFTER]:
            await _settle(callback(result, options))

    async def run_error(
        self, error: PlatformError, options: RequestOptions
    ) -> typ.Any:  # noqa: ANN401
        """Run ``error`` hooks and return a recovery value or re-raise.

        The first hook returning something other than ``None`` recovers the
        request; remaining error hooks are skipped. A hook that raises
        propagates its exception immediately. When no hook recovers, ``error``
        is raised.
        """
        for callback in self._hooks[HookPhase.ERROR]:
            recovered = await _settle(callback(error, options))
            if recovered is not None:
                return recovered
        raise error
