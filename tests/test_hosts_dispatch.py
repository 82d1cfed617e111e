"""Tests for hostmux.hosts.dispatch: HostDispatchMiddleware decisions."""

from typing import Any

import pytest

from hostmux.app import App
from hostmux.config import HostRoutingConfig
from hostmux.hosts.dispatch import HostDecision, HostDispatchMiddleware
from hostmux.hosts.entry import BoundHost, HostRoute
from hostmux.hosts.normalize import normalize_host
from hostmux.hosts.registry import HostRegistry
from hostmux.http.headers import Headers
from hostmux.http.request import Request
from hostmux.http.response import Response


async def _receive() -> dict[str, Any]:
    return {"type": "http.request", "body": b"", "more_body": False}


def _request(host: str | None, path: str = "/") -> Request:
    headers = {"host": host} if host is not None else {}
    return Request("GET", path, Headers.from_dict(headers), _receive=_receive)


def _engine(body: str) -> App:
    engine = App()

    @engine.route("/")
    def index():
        return body

    engine.freeze()
    return engine


def _registry(*hosts: str, normalize: bool = True) -> HostRegistry:
    bound = [BoundHost(HostRoute(h, lambda routes: None), _engine(f"engine {h}")) for h in hosts]
    return HostRegistry.build(bound, key=normalize_host if normalize else str)


async def _shared(request: Request) -> Response:
    return Response("shared")


class TestResolve:
    def test_dedicated(self) -> None:
        mw = HostDispatchMiddleware(_registry("a.example"), ["g.example"])
        assert mw.resolve("a.example") is HostDecision.DEDICATED

    def test_generic(self) -> None:
        mw = HostDispatchMiddleware(_registry("a.example"), ["g.example"])
        assert mw.resolve("g.example") is HostDecision.GENERIC

    def test_unknown_secure(self) -> None:
        mw = HostDispatchMiddleware(_registry("a.example"), ["g.example"])
        assert mw.resolve("x.example") is HostDecision.REJECT

    def test_unknown_insecure(self) -> None:
        mw = HostDispatchMiddleware(
            _registry("a.example"), ["g.example"], HostRoutingConfig(secure=False)
        )
        assert mw.resolve("x.example") is HostDecision.FALLTHROUGH

    def test_registered_wins_over_generic(self) -> None:
        mw = HostDispatchMiddleware(_registry("a.example"), ["a.example"])
        assert mw.resolve("a.example") is HostDecision.DEDICATED

    def test_missing_host_never_matches(self) -> None:
        mw = HostDispatchMiddleware(_registry("a.example"), ["g.example"])
        assert mw.resolve("") is HostDecision.REJECT

    def test_deterministic(self) -> None:
        mw = HostDispatchMiddleware(_registry("a.example"), ["g.example"])
        for host in ("a.example", "g.example", "x.example", ""):
            decisions = {mw.resolve(host) for _ in range(5)}
            assert len(decisions) == 1

    @pytest.mark.parametrize("host", ["A.EXAMPLE", "a.example:8080", "a.example."])
    def test_normalized_variants(self, host: str) -> None:
        mw = HostDispatchMiddleware(_registry("a.example"))
        assert mw.resolve(host) is HostDecision.DEDICATED

    def test_generic_hosts_are_normalized(self) -> None:
        mw = HostDispatchMiddleware(_registry(), ["G.Example:80"])
        assert mw.generic_hosts == frozenset({"g.example"})
        assert mw.resolve("g.example:443") is HostDecision.GENERIC

    def test_exact_matching_when_normalization_off(self) -> None:
        config = HostRoutingConfig(normalize=False)
        mw = HostDispatchMiddleware(_registry("a.example", normalize=False), (), config)
        assert mw.resolve("a.example") is HostDecision.DEDICATED
        assert mw.resolve("A.EXAMPLE") is HostDecision.REJECT
        assert mw.resolve("a.example:8080") is HostDecision.REJECT


class TestDispatch:
    async def test_dedicated_host_answered_by_engine(self) -> None:
        mw = HostDispatchMiddleware(_registry("a.example", "b.example"))

        async def shared(request: Request) -> Response:
            raise AssertionError("shared chain must not run")

        response = await mw(_request("b.example"), shared)
        assert response.text == "engine b.example"

    async def test_generic_host_continues_chain(self) -> None:
        mw = HostDispatchMiddleware(_registry("a.example"), ["g.example"])
        response = await mw(_request("g.example"), _shared)
        assert response.text == "shared"

    async def test_unknown_host_rejected(self) -> None:
        mw = HostDispatchMiddleware(_registry("a.example"))
        response = await mw(_request("x.example"), _shared)
        assert response.status == 404
        assert response.text == "Unknown host"
        assert response.content_type == "text/plain; charset=utf-8"

    async def test_missing_host_header_rejected(self) -> None:
        mw = HostDispatchMiddleware(_registry("a.example"))
        response = await mw(_request(None), _shared)
        assert response.text == "Unknown host"

    async def test_unknown_host_insecure_continues_chain(self) -> None:
        mw = HostDispatchMiddleware(_registry("a.example"), (), HostRoutingConfig(secure=False))
        response = await mw(_request("x.example"), _shared)
        assert response.text == "shared"

    async def test_custom_unknown_host_response(self) -> None:
        config = HostRoutingConfig(unknown_host_status=421, unknown_host_body="Misdirected")
        mw = HostDispatchMiddleware(_registry("a.example"), (), config)
        response = await mw(_request("x.example"), _shared)
        assert response.status == 421
        assert response.text == "Misdirected"

    async def test_engine_errors_stay_in_engine(self) -> None:
        mw = HostDispatchMiddleware(_registry("a.example"))
        response = await mw(_request("a.example", "/missing"), _shared)
        assert response.status == 404
        assert response.text.startswith("No route matches")

    async def test_rejection_logged_at_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        mw = HostDispatchMiddleware(_registry("a.example"))
        with caplog.at_level("DEBUG", logger="hostmux.hosts"):
            await mw(_request("x.example", "/secret"), _shared)
        assert "Rejected unknown host 'x.example': GET /secret" in caplog.text

    async def test_host_normalized_once_per_request(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[str] = []

        def counting(host: str) -> str:
            calls.append(host)
            return normalize_host(host)

        monkeypatch.setattr("hostmux.hosts.dispatch.normalize_host", counting)
        mw = HostDispatchMiddleware(_registry("a.example"))
        calls.clear()

        response = await mw(_request("A.Example:8080"), _shared)
        assert response.text == "engine a.example"
        assert calls == ["A.Example:8080"]
