"""Host route definitions and the protocols they are built from."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from hostmux.app import App
    from hostmux.routing.group import RouteSurface


class RouteBuilder(Protocol):
    """Registers one host's routes onto a route surface.

    Called once with the host's isolated engine and, when the host has a
    prefix, once more with a ``RouteGroup`` on the shared app. Anything
    the builder captures is shared by both calls, so builders should
    only depend on the surface they are given::

        def blog_routes(routes: RouteSurface) -> None:
            @routes.route("/")
            def index():
                return "blog"
    """

    def __call__(self, routes: RouteSurface) -> None: ...


class HostExtension(Protocol):
    """Configures an engine for a host during setup.

    Receives the hostname and the engine: the host's isolated ``App``, or
    the shared ``App`` for generic hosts. Raising aborts the whole setup.
    Typical uses are a not-found responder or recovery middleware, see
    ``hostmux.hosts.extensions``.
    """

    def __call__(self, host: str, engine: App) -> None: ...


@dataclass(frozen=True, slots=True)
class HostRoute:
    """One configured host.

    ``prefix`` is optional; when set, the same routes are also mounted
    under ``/<prefix>`` on the shared app so generic hosts can reach
    them by path::

        HostRoute("blog.example", blog_routes, prefix="blog")
    """

    host: str
    routes: RouteBuilder
    prefix: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "prefix", self.prefix.strip("/"))

    @property
    def mount_path(self) -> str | None:
        """``/<prefix>`` on the shared app, or ``None`` without a prefix."""
        return f"/{self.prefix}" if self.prefix else None


@dataclass(frozen=True, slots=True)
class BoundHost:
    """A ``HostRoute`` together with the isolated engine built for it.

    The engine belongs to this entry alone and is frozen before the
    entry is recorded.
    """

    route: HostRoute
    engine: App

    @property
    def host(self) -> str:
        return self.route.host
