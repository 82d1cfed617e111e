"""The request object handed to middleware, handlers and error handlers.

A request is built once per ASGI call by the shared app. When host
dispatch delegates to an isolated engine it passes this same object on,
so every engine sees the raw ``Host`` header and the body is read from
the ASGI channel at most once.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import parse_qs

from hostmux._internal.asgi import Receive, Scope
from hostmux.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """One HTTP request. Immutable apart from the lazily read body."""

    method: str
    path: str
    headers: Headers
    query_string: bytes = b""
    path_params: dict[str, str] = field(default_factory=dict)
    client: tuple[str, int] | None = None
    _receive: Receive | None = field(default=None, repr=False)
    # Shared by every copy made with with_path_params()
    _body: dict[str, bytes] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(scope.get("headers", ())),
            query_string=scope.get("query_string", b""),
            client=tuple(client) if client else None,
            _receive=receive,
        )

    @property
    def host(self) -> str:
        """The ``Host`` header exactly as sent, ``""`` when absent.

        Normalization is left to host dispatch, which may be configured
        for exact matching.
        """
        return self.headers.get("host", "")

    @property
    def query(self) -> dict[str, list[str]]:
        """Parsed query string; repeated keys keep every value."""
        return parse_qs(self.query_string.decode("latin-1"), keep_blank_values=True)

    @property
    def url(self) -> str:
        """Path plus query string, as the client requested it."""
        if self.query_string:
            return f"{self.path}?{self.query_string.decode('latin-1')}"
        return self.path

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        return replace(self, path_params=path_params)

    async def stream(self) -> AsyncIterator[bytes]:
        """Yield body chunks straight from the ASGI channel."""
        if self._receive is None:
            return
        more = True
        while more:
            message = await self._receive()
            more = message.get("more_body", False)
            if chunk := message.get("body", b""):
                yield chunk

    async def body(self) -> bytes:
        """The whole body, read on first call and cached afterwards."""
        if "data" not in self._body:
            self._body["data"] = b"".join([chunk async for chunk in self.stream()])
        return self._body["data"]

    async def text(self) -> str:
        return (await self.body()).decode("utf-8")

    async def json(self) -> Any:
        return json.loads(await self.body())
