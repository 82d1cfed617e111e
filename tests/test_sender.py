"""Tests for hostmux.server.sender response emission rules."""

from hostmux.http.response import Response
from hostmux.server.sender import send_response


async def _collect(response: Response, *, head: bool = False) -> list[dict]:
    messages: list[dict] = []

    async def send(message: dict) -> None:
        messages.append(message)

    await send_response(response, send, head=head)
    return messages


class TestSendResponse:
    async def test_start_then_body(self) -> None:
        messages = await _collect(Response("hello").with_header("X-Host", "a.example"))

        assert messages[0]["type"] == "http.response.start"
        assert messages[0]["status"] == 200
        headers = dict(messages[0]["headers"])
        assert headers[b"content-type"] == b"text/html; charset=utf-8"
        assert headers[b"x-host"] == b"a.example"
        assert headers[b"content-length"] == b"5"
        assert messages[1] == {"type": "http.response.body", "body": b"hello"}

    async def test_head_keeps_length_drops_body(self) -> None:
        messages = await _collect(Response("hello"), head=True)

        assert dict(messages[0]["headers"])[b"content-length"] == b"5"
        assert messages[1]["body"] == b""

    async def test_204_drops_body(self) -> None:
        messages = await _collect(Response("unexpected-body").with_status(204))

        assert dict(messages[0]["headers"])[b"content-length"] == b"0"
        assert messages[1]["body"] == b""

    async def test_304_drops_body(self) -> None:
        messages = await _collect(Response("unexpected-body").with_status(304))

        assert messages[1]["body"] == b""
