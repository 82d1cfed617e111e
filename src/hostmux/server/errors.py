"""Turn exceptions raised inside an app's pipeline into responses.

Lookup happens in the error handlers of the app running the pipeline.
A 404 raised inside an isolated host engine is therefore answered by
that engine's not-found responder, never by the shared app's. An error
handler that raises is logged and answered with the same app's plain 500.
"""

import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any

from kida import Environment

from hostmux._internal.invoke import invoke
from hostmux.errors import HTTPError
from hostmux.http.request import Request
from hostmux.http.response import Response
from hostmux.server.negotiation import negotiate

logger = logging.getLogger("hostmux.server")

type ErrorHandlers = Mapping[int | type, Callable[..., Any]]


def find_handler(handlers: ErrorHandlers, exc: Exception, status: int) -> Callable[..., Any] | None:
    """Handler registered for the exception's class, else for *status*."""
    return handlers.get(type(exc)) or handlers.get(status)


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
    status: int,
    kida_env: Environment | None,
) -> Response:
    """Run *handler* with as many of ``(request, exc)`` as it accepts.

    A handler that returns a plain value gets *status* instead of 200.
    """
    arity = len(inspect.signature(handler).parameters)
    response = negotiate(await invoke(handler, *(request, exc)[:arity]), kida_env=kida_env)
    return response.with_status(status) if response.status == 200 else response


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    handlers: ErrorHandlers,
    kida_env: Environment | None,
    debug: bool,
) -> Response:
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    handler = find_handler(handlers, exc, exc.status)
    if handler is not None:
        return await _guarded(handler, request, exc, exc.status, kida_env, debug)

    body = exc.detail or f"Error {exc.status}"
    if debug and exc.detail:
        body = str(exc)
    return Response.plain(body, exc.status).with_headers(dict(exc.headers))


async def handle_internal_error(
    exc: Exception,
    request: Request,
    handlers: ErrorHandlers,
    kida_env: Environment | None,
    debug: bool,
) -> Response:
    """Log an unexpected exception and answer 500."""
    logger.exception("500 %s %s (host %r)", request.method, request.path, request.host)

    handler = find_handler(handlers, exc, 500)
    if handler is not None:
        return await _guarded(handler, request, exc, 500, kida_env, debug)
    return _plain_500(exc, debug)


async def _guarded(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
    status: int,
    kida_env: Environment | None,
    debug: bool,
) -> Response:
    """Run an error handler; if it raises too, answer this app's plain 500."""
    try:
        return await call_error_handler(handler, request, exc, status, kida_env)
    except Exception as handler_exc:
        logger.exception(
            "Error handler for %d failed on %s %s (host %r)",
            status,
            request.method,
            request.path,
            request.host,
        )
        return _plain_500(handler_exc, debug)


def _plain_500(exc: Exception, debug: bool) -> Response:
    body = f"{type(exc).__name__}: {exc}" if debug else "Internal Server Error"
    return Response.plain(body, 500)
