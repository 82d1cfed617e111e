"""Ready-made host extensions for ``setup_host_routes(extensions=...)``.

Each factory returns a ``HostExtension``: a callable taking the hostname
and the engine being configured. Extensions run for every isolated
engine and, for generic hosts, against the shared app, so they should
be safe to apply to the shared app more than once.
"""

import inspect
from collections.abc import Callable
from typing import Any

from hostmux._internal.invoke import invoke
from hostmux.app import App
from hostmux.hosts.entry import HostExtension
from hostmux.http.request import Request
from hostmux.http.response import Response
from hostmux.middleware.protocol import Middleware
from hostmux.middleware.recovery import RecoveryMiddleware


def not_found(responder: str | Callable[..., Any], *, status: int = 404) -> HostExtension:
    """Install a "no route matched" responder on every engine.

    *responder* is either a fixed body or an error handler callable
    (taking zero, one ``request`` or two ``request, exc`` arguments).
    A callable's answer gets *status* unless it picked a status itself.
    Re-registering on the shared app replaces the previous handler.
    """
    if isinstance(responder, str):
        body = responder

        def handler(request: Request, exc: Exception) -> Response:
            return Response.plain(body, status)

    else:
        arity = len(inspect.signature(responder).parameters)

        async def handler(request: Request, exc: Exception) -> Any:
            result = await invoke(responder, *(request, exc)[:arity])
            if isinstance(result, tuple) or (
                isinstance(result, Response) and result.status != 200
            ):
                return result
            return (result, status)

    def extension(host: str, engine: App) -> None:
        engine.error(404)(handler)

    return extension


def with_middleware(*middleware: Middleware) -> HostExtension:
    """Add *middleware* to every isolated engine.

    An app that already carries one of them is not given it again, so
    the shared app receives each once, however many generic hosts there
    are.
    """

    def extension(host: str, engine: App) -> None:
        present = engine.middleware
        for mw in middleware:
            if mw not in present:
                engine.add_middleware(mw)

    return extension


def recovery(body: str = "Internal Server Error", *, status: int = 500) -> HostExtension:
    """Answer unexpected handler exceptions with a logged 500 on every engine."""
    return with_middleware(RecoveryMiddleware(body, status))
