"""Host-based routing.

Serve several logically separate apps from one process, chosen by the
``Host`` header:

- hosts with a ``HostRoute`` get their own isolated ``App`` (engine);
- generic hosts fall through to the shared app, where every host's
  routes are also reachable under its ``/<prefix>``;
- anything else is rejected (secure mode) or treated as generic.

Usage::

    from hostmux import App
    from hostmux.hosts import HostRoute, not_found, setup_host_routes

    app = App()
    setup_host_routes(
        app,
        [HostRoute("a.example", a_routes, prefix="1")],
        ["www.example"],
        extensions=[not_found("No known route")],
    )
"""

from hostmux.hosts.dispatch import HostDecision, HostDispatchMiddleware
from hostmux.hosts.entry import BoundHost, HostExtension, HostRoute, RouteBuilder
from hostmux.hosts.extensions import not_found, recovery, with_middleware
from hostmux.hosts.normalize import normalize_host
from hostmux.hosts.registry import HostRegistry
from hostmux.hosts.setup import setup_host_routes

__all__ = [
    "BoundHost",
    "HostDecision",
    "HostDispatchMiddleware",
    "HostExtension",
    "HostRegistry",
    "HostRoute",
    "RouteBuilder",
    "normalize_host",
    "not_found",
    "recovery",
    "setup_host_routes",
    "with_middleware",
]
