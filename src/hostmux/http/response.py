"""Response values produced by handlers, middleware and host dispatch.

Responses are frozen; the ``with_*`` helpers return modified copies so a
prebuilt response (such as the unknown-host reply) can be shared by
every request.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace

PLAIN_TEXT = "text/plain; charset=utf-8"


@dataclass(frozen=True, slots=True)
class Response:
    """Status, content type, extra headers and a body.

    ``headers`` holds ``(name, value)`` pairs in the order they were
    added; ``content-type`` and ``content-length`` are written by the
    sender and never appear there.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    @classmethod
    def plain(cls, body: str, status: int = 200) -> Response:
        """A ``text/plain`` response, used for the built-in error bodies."""
        return cls(body=body, status=status, content_type=PLAIN_TEXT)

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        return replace(self, headers=self.headers + tuple(headers.items()))

    def header(self, name: str) -> str | None:
        """Value of the first header called *name*, ignoring case."""
        name = name.lower()
        return next((v for k, v in self.headers if k.lower() == name), None)

    @property
    def body_bytes(self) -> bytes:
        return self.body.encode("utf-8") if isinstance(self.body, str) else self.body

    @property
    def text(self) -> str:
        return self.body.decode("utf-8") if isinstance(self.body, bytes) else self.body


@dataclass(frozen=True, slots=True)
class Redirect:
    """Handler return value for a redirect to *url* (302 unless told otherwise)."""

    url: str
    status: int = 302
    headers: tuple[tuple[str, str], ...] = ()
