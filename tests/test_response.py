"""Tests for hostmux.http.response: chainable immutable Response."""

import pytest

from hostmux.http.response import Response


class TestResponse:
    def test_defaults(self) -> None:
        response = Response()
        assert response.status == 200
        assert response.body == ""
        assert response.content_type == "text/html; charset=utf-8"
        assert response.headers == ()

    def test_with_status_returns_new(self) -> None:
        original = Response("hi")
        changed = original.with_status(404)
        assert changed.status == 404
        assert original.status == 200

    def test_with_header_appends(self) -> None:
        response = Response().with_header("X-A", "1").with_header("X-A", "2")
        assert response.headers == (("X-A", "1"), ("X-A", "2"))

    def test_with_headers(self) -> None:
        response = Response().with_headers({"X-A": "1", "X-B": "2"})
        assert response.headers == (("X-A", "1"), ("X-B", "2"))

    def test_plain(self) -> None:
        response = Response.plain("Unknown host", 404)
        assert response.status == 404
        assert response.content_type == "text/plain; charset=utf-8"

    def test_header_lookup_case_insensitive(self) -> None:
        response = Response().with_header("X-Host", "a.example")
        assert response.header("x-host") == "a.example"
        assert response.header("missing") is None

    def test_body_conversions(self) -> None:
        assert Response("héllo").body_bytes == "héllo".encode()
        assert Response(b"bytes").text == "bytes"

    def test_frozen(self) -> None:
        response = Response()
        with pytest.raises(AttributeError):
            response.status = 500  # type: ignore[misc]
