"""Multihost: two sites and a portal behind one socket.

``a.example`` and ``b.example`` each get an isolated app. The portal
hostnames ``g1.example`` and ``g2.example`` share the main app, where the
two sites are also reachable under ``/1/`` and ``/2/``. Any other Host is
answered with ``404 Unknown host``.

Run:
    python app.py

Then:
    curl -H "Host: a.example" localhost:8000/
    curl -H "Host: g1.example" localhost:8000/2/
"""

import logging

from hostmux import App, Request
from hostmux.hosts import HostRoute, not_found, recovery, setup_host_routes
from hostmux.routing.group import RouteSurface


def site_a(routes: RouteSurface) -> None:
    @routes.route("/")
    def index():
        return "Hello from a"

    @routes.route("/hi")
    def hi():
        return "Hi from a"


def site_b(routes: RouteSurface) -> None:
    @routes.route("/")
    def index():
        return "Hello from b"

    @routes.route("/echo", methods=["POST"])
    async def echo(request: Request):
        return {"host": request.host, "body": await request.text()}


app = App()


@app.route("/")
def portal():
    return {"sites": {"a.example": "/1/", "b.example": "/2/"}}


registry = setup_host_routes(
    app,
    [
        HostRoute("a.example", site_a, prefix="1"),
        HostRoute("b.example", site_b, prefix="2"),
    ],
    ["g1.example", "g2.example"],
    extensions=[not_found("No known route"), recovery()],
)


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    app.run()
