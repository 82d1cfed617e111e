"""Request pipeline: from ASGI scope to response, and the part in between.

``handle_request`` is the only code that reads an HTTP scope. It builds
the ``Request`` once and hands it to ``serve``. ``process_request`` is
the app pipeline proper (middleware chain, routing, handler call, error
mapping). It knows nothing about ASGI, which lets the host dispatch
middleware run an isolated engine's pipeline on a request that reached
the shared app.
"""

import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from kida import Environment

from hostmux._internal.asgi import Receive, Scope, Send
from hostmux._internal.invoke import invoke
from hostmux.context import request_var
from hostmux.errors import HTTPError
from hostmux.http.request import Request
from hostmux.middleware.protocol import AnyResponse, Next
from hostmux.routing.router import Router
from hostmux.server.errors import handle_http_error, handle_internal_error
from hostmux.server.negotiation import negotiate
from hostmux.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    serve: Callable[[Request], Awaitable[AnyResponse]],
) -> None:
    """Answer one ASGI ``http`` call with *serve*."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    token = request_var.set(request)
    try:
        response = await serve(request)
    finally:
        request_var.reset(token)
    await send_response(response, send, head=request.method == "HEAD")


def build_chain(middleware: tuple[Callable[..., Any], ...], endpoint: Next) -> Next:
    """Wrap *endpoint* so ``middleware[0]`` sees the request first."""
    chain = endpoint
    for mw in reversed(middleware):
        chain = _link(mw, chain)
    return chain


def _link(mw: Callable[..., Any], next_: Next) -> Next:
    async def call(request: Request) -> AnyResponse:
        return await mw(request, next_)

    return call


async def process_request(
    request: Request,
    *,
    router: Router,
    middleware: tuple[Callable[..., Any], ...],
    error_handlers: Mapping[int | type, Callable[..., Any]],
    kida_env: Environment | None = None,
    debug: bool = False,
) -> AnyResponse:
    """Run *request* through one app and return its response.

    Request-level failures never escape: ``HTTPError`` and any other
    exception are turned into responses with this app's error handlers.
    """

    async def endpoint(req: Request) -> AnyResponse:
        match = router.match(req.method, req.path)
        req = req.with_path_params(match.path_params)
        handler = match.route.handler
        result = await invoke(handler, **handler_arguments(handler, req))
        return negotiate(result, kida_env=kida_env)

    try:
        return await build_chain(middleware, endpoint)(request)
    except HTTPError as exc:
        return await handle_http_error(exc, request, error_handlers, kida_env, debug)
    except Exception as exc:
        return await handle_internal_error(exc, request, error_handlers, kida_env, debug)


def handler_arguments(handler: Callable[..., Any], request: Request) -> dict[str, Any]:
    """Keyword arguments for *handler*, taken from its signature.

    A parameter named ``request`` (or annotated ``Request``) receives the
    request. Parameters named after path parameters receive their value,
    passed through the annotation when there is one (``id: int``). If
    that conversion fails the raw string is passed.
    """
    kwargs: dict[str, Any] = {}
    for name, param in inspect.signature(handler, eval_str=True).parameters.items():
        if name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif name in request.path_params:
            value: Any = request.path_params[name]
            if param.annotation is not inspect.Parameter.empty:
                try:
                    value = param.annotation(value)
                except (TypeError, ValueError):
                    pass
            kwargs[name] = value
    return kwargs
