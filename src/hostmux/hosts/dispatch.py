"""Host dispatch middleware.

Installed on the shared app by ``setup_host_routes()``. For every
request it reads the ``Host`` header and picks one of four outcomes, in
this order:

1. ``DEDICATED``:   the host has an isolated engine; the engine answers.
2. ``GENERIC``:     the host is generic; the shared app's chain continues.
3. ``REJECT``:      unknown host in secure mode; fixed 404 response.
4. ``FALLTHROUGH``: unknown host, insecure mode; treated as generic.

A host that is both registered and generic is DEDICATED.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from hostmux.config import HostRoutingConfig
from hostmux.hosts.normalize import normalize_host
from hostmux.hosts.registry import HostRegistry
from hostmux.http.request import Request
from hostmux.http.response import Response
from hostmux.middleware.protocol import AnyResponse, Next

if TYPE_CHECKING:
    from hostmux.app import App

logger = logging.getLogger("hostmux.hosts")


class HostDecision(enum.Enum):
    """Outcome of matching a request's Host against the configuration."""

    DEDICATED = "dedicated"
    GENERIC = "generic"
    REJECT = "reject"
    FALLTHROUGH = "fallthrough"


class HostDispatchMiddleware:
    """Route requests by ``Host`` header to isolated engines.

    Usage (normally done for you by ``setup_host_routes()``)::

        app.add_middleware(HostDispatchMiddleware(registry, {"www.example"}))

    The registry, the generic set, and the config are fixed at
    construction; ``resolve()`` is a pure function of them and the host.
    """

    __slots__ = ("_generic", "_key", "_unknown_host", "config", "registry")

    def __init__(
        self,
        registry: HostRegistry,
        generic_hosts: Iterable[str] = (),
        config: HostRoutingConfig | None = None,
    ) -> None:
        self.config = config or HostRoutingConfig()
        self.registry = registry
        self._key = normalize_host if self.config.normalize else str
        self._generic: frozenset[str] = frozenset(self._key(h) for h in generic_hosts)
        self._unknown_host = Response.plain(
            self.config.unknown_host_body, self.config.unknown_host_status
        )

    @property
    def generic_hosts(self) -> frozenset[str]:
        return self._generic

    def resolve(self, host: str) -> HostDecision:
        """Decide how a request for *host* is handled."""
        return self._match(host)[0]

    def _match(self, host: str) -> tuple[HostDecision, App | None]:
        key = self._key(host)
        engine = self.registry.lookup(key)
        if engine is not None:
            return HostDecision.DEDICATED, engine
        if key in self._generic:
            return HostDecision.GENERIC, None
        if self.config.secure:
            return HostDecision.REJECT, None
        return HostDecision.FALLTHROUGH, None

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        host = request.host
        decision, engine = self._match(host)

        if engine is not None:
            return await engine.serve(request)

        if decision is HostDecision.REJECT:
            logger.debug("Rejected unknown host %r: %s %s", host, request.method, request.path)
            return self._unknown_host

        return await next(request)
