"""Route groups: register routes under a shared path prefix.

A ``RouteGroup`` records routes on its owning ``App`` with the group's
prefix prepended. ``App`` and ``RouteGroup`` both satisfy
``RouteSurface``, so a route builder written against the protocol can be
pointed at an isolated engine or at a prefixed slice of the shared app::

    def shop_routes(routes: RouteSurface) -> None:
        @routes.route("/")
        def index():
            return "shop"

    shop_routes(shop_engine)          # GET /      on the shop engine
    shop_routes(shared.group("/s"))   # GET /s/    on the shared app
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

from hostmux._internal.types import Handler
from hostmux.routing.router import join_path

if TYPE_CHECKING:
    from hostmux.app import App


class RouteSurface(Protocol):
    """Anything routes can be registered on: an ``App`` or a ``RouteGroup``."""

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]: ...

    def group(self, prefix: str) -> RouteGroup: ...


class RouteGroup:
    """A prefixed view onto an app's route table.

    Groups hold no routes of their own; every registration goes straight
    to the owning app, so the app's freeze rules apply unchanged.
    """

    __slots__ = ("_app", "prefix")

    def __init__(self, app: App, prefix: str) -> None:
        self._app = app
        self.prefix = join_path(prefix, "")

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler under this group's prefix."""
        return self._app.route(join_path(self.prefix, path), methods=methods, name=name)

    def group(self, prefix: str) -> RouteGroup:
        """Return a nested group: ``/a`` then ``/b`` mounts under ``/a/b``."""
        return RouteGroup(self._app, join_path(self.prefix, prefix))

    def __repr__(self) -> str:
        return f"RouteGroup({self.prefix!r})"
