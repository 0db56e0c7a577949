"""Unit tests for the request hook pipeline."""

from __future__ import annotations

import asyncio
import typing as typ

import httpx
import pytest

from tether.github import (
    GitHubConfigError,
    HookPhase,
    HookRegistry,
    PlatformError,
    RequestOptions,
    Result,
)

if typ.TYPE_CHECKING:
    from tests.unit.conftest import GitHubFactory

_HTTP_SERVER_ERROR = 502


def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"echo": request.headers.get("x-trace")})


def _fail(request: httpx.Request) -> httpx.Response:
    del request
    return httpx.Response(_HTTP_SERVER_ERROR, json={"message": "Bad gateway"})


def _recovered() -> Result:
    return Result(status=200, headers={"status": "200 OK"}, data="cached", url="")


class TestRegistration:
    """Tests for hook registration."""

    def test_registration_helpers_append_per_phase(self) -> None:
        """before/after/error append to their own phase lists."""
        hooks = HookRegistry()
        hooks.before("request", lambda options: None)
        hooks.before("request", lambda options: None)
        hooks.after("request", lambda result, options: None)
        hooks.register(HookPhase.ERROR, lambda error, options: None)

        assert hooks.count(HookPhase.BEFORE) == 2
        assert hooks.count("after") == 1
        assert hooks.count(HookPhase.ERROR) == 1

    def test_unknown_event_kind_is_rejected(self) -> None:
        """Hooks may only be registered for the request event."""
        hooks = HookRegistry()

        with pytest.raises(GitHubConfigError, match="request"):
            hooks.before("response", lambda options: None)


class TestBeforeHooks:
    """Tests for the before phase."""

    @pytest.mark.asyncio
    async def test_hooks_run_in_order_and_see_mutations(
        self, github_factory: GitHubFactory
    ) -> None:
        """A later hook observes an earlier hook's mutation before sending."""
        sent: list[str | None] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            sent.append(request.headers.get("x-trace"))
            return _ok(request)

        github = github_factory(_handler)

        async def _first(options: RequestOptions) -> None:
            await asyncio.sleep(0)
            options.headers["x-trace"] = "h1"

        def _second(options: RequestOptions) -> None:
            assert options.headers["x-trace"] == "h1", "Expected H1 to finish first."
            options.headers["x-trace"] += "+h2"

        github.hook.before("request", _first)
        github.hook.before("request", _second)

        result = await github.request("GET /meta")

        assert sent == ["h1+h2"]
        assert result.data == {"echo": "h1+h2"}

    @pytest.mark.asyncio
    async def test_hooks_can_inject_params(self, github_factory: GitHubFactory) -> None:
        """before hooks may supply URL placeholders."""
        paths: list[str] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200, json={})

        github = github_factory(_handler)
        github.hook.before("request", lambda options: options.params.update(owner="o"))

        await github.request("GET /users/{owner}")

        assert paths == ["/users/o"]

    @pytest.mark.asyncio
    async def test_failure_aborts_before_transport(
        self, github_factory: GitHubFactory
    ) -> None:
        """A raising before hook stops the request and skips error hooks."""
        sent: list[httpx.Request] = []
        errors: list[BaseException] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            sent.append(request)
            return _ok(request)

        def _boom(options: RequestOptions) -> None:
            msg = "no credentials"
            raise RuntimeError(msg)

        github = github_factory(_handler)
        github.hook.before("request", _boom)
        github.hook.error("request", lambda error, options: errors.append(error))

        with pytest.raises(RuntimeError, match="no credentials"):
            await github.request("GET /meta")

        assert sent == []
        assert errors == []


class TestAfterHooks:
    """Tests for the after phase."""

    @pytest.mark.asyncio
    async def test_after_hooks_observe_result(
        self, github_factory: GitHubFactory
    ) -> None:
        """after hooks receive the result and the options, in order."""
        seen: list[tuple[str, int, str]] = []
        github = github_factory(_ok)
        github.hook.after(
            "request", lambda result, options: seen.append(("a", result.status, options.url))
        )

        async def _second(result: Result, options: RequestOptions) -> None:
            await asyncio.sleep(0)
            seen.append(("b", result.status, options.url))

        github.hook.after("request", _second)

        await github.request("GET /meta")

        assert seen == [("a", 200, "/meta"), ("b", 200, "/meta")]

    @pytest.mark.asyncio
    async def test_after_hooks_skipped_on_failure(
        self, github_factory: GitHubFactory
    ) -> None:
        """after hooks do not run for failed requests."""
        seen: list[Result] = []
        github = github_factory(_fail)
        github.hook.after("request", lambda result, options: seen.append(result))

        with pytest.raises(PlatformError):
            await github.request("GET /meta")

        assert seen == []


class TestErrorHooks:
    """Tests for the error phase."""

    @pytest.mark.asyncio
    async def test_observing_hooks_do_not_swallow(
        self, github_factory: GitHubFactory
    ) -> None:
        """Hooks returning None observe; the original error propagates."""
        observed: list[int] = []
        github = github_factory(_fail)
        github.hook.error("request", lambda error, options: observed.append(error.code))

        with pytest.raises(PlatformError) as exc:
            await github.request("GET /meta")

        assert observed == [_HTTP_SERVER_ERROR]
        assert exc.value.code == _HTTP_SERVER_ERROR
        assert exc.value.is_transient

    @pytest.mark.asyncio
    async def test_recovery_replaces_the_error(
        self, github_factory: GitHubFactory
    ) -> None:
        """A hook returning a value resolves the request with that value."""
        later: list[PlatformError] = []
        github = github_factory(_fail)

        async def _recover(error: PlatformError, options: RequestOptions) -> Result | None:
            return _recovered() if error.is_transient else None

        github.hook.error("request", _recover)
        github.hook.error("request", lambda error, options: later.append(error))

        result = await github.request("GET /meta")

        assert result.data == "cached"
        assert later == [], "Expected hooks after a recovery to be skipped."

    @pytest.mark.asyncio
    async def test_raising_hook_replaces_the_error(
        self, github_factory: GitHubFactory
    ) -> None:
        """An error hook may raise its own exception instead."""
        github = github_factory(_fail)

        def _translate(error: PlatformError, options: RequestOptions) -> None:
            msg = f"upstream unavailable for {options.url}"
            raise LookupError(msg) from error

        github.hook.error("request", _translate)

        with pytest.raises(LookupError, match="/meta"):
            await github.request("GET /meta")

    @pytest.mark.asyncio
    async def test_run_error_reraises_without_hooks(self) -> None:
        """With no hooks registered the error is raised unchanged."""
        hooks = HookRegistry()
        error = PlatformError.http_error(404, "Not Found")

        with pytest.raises(PlatformError) as exc:
            await hooks.run_error(error, RequestOptions(method="GET", url="/x"))

        assert exc.value is error
