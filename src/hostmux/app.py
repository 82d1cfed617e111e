"""The ``App``: routes, middleware, error handlers and lifespan hooks.

One class plays both roles in host routing. The shared app receives every
request from the server; each isolated host engine is another ``App``
that only ever runs behind the shared app's dispatch middleware.

An app is configured first and frozen afterwards. Freezing compiles the
route table and snapshots the middleware list; from then on any attempt
to register something raises ``RuntimeError``.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from kida import Environment

from hostmux._internal.asgi import Receive, Scope, Send
from hostmux._internal.invoke import invoke
from hostmux._internal.types import ErrorHandler, Handler
from hostmux.config import AppConfig
from hostmux.http.request import Request
from hostmux.middleware.protocol import AnyResponse, Middleware
from hostmux.routing.group import RouteGroup
from hostmux.routing.route import Route
from hostmux.routing.router import Router
from hostmux.server.handler import handle_request, process_request
from hostmux.templating.integration import create_environment

logger = logging.getLogger("hostmux.app")


@dataclass(frozen=True, slots=True)
class _Compiled:
    """Everything the request path reads, built once by ``freeze()``."""

    router: Router
    middleware: tuple[Middleware, ...]
    kida_env: Environment


class App:
    """A hostmux application or isolated host engine.

    Usage::

        app = App(AppConfig(debug=True))

        @app.route("/items/{id:int}")
        def item(id: int):
            return {"id": id}

        app.run()

    Freezing happens on ``freeze()``, ``run()``, the ASGI lifespan
    startup or the first request, whichever comes first. Several server
    workers may race to it; a lock with a second check inside makes sure
    exactly one of them compiles.
    """

    __slots__ = (
        "_compiled",
        "_engines",
        "_error_handlers",
        "_lock",
        "_middleware",
        "_routes",
        "_shutdown",
        "_startup",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()
        self._routes: list[Route] = []
        self._middleware: list[Middleware] = []
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._startup: list[Callable[..., Any]] = []
        self._shutdown: list[Callable[..., Any]] = []
        self._engines: list[App] = []
        self._lock = threading.Lock()
        self._compiled: _Compiled | None = None

    def __repr__(self) -> str:
        state = "frozen" if self.frozen else "configuring"
        return f"<App {state}, {len(self._routes)} routes, {len(self._engines)} engines>"

    # -- Registration --

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Decorator registering a handler for *path*.

        ``{name}`` and ``{name:int|float|path}`` capture path parameters.
        *methods* defaults to GET; HEAD is answered by the GET handler.
        """
        verbs = frozenset(m.upper() for m in methods or ("GET",))

        def register(handler: Handler) -> Handler:
            self._check_not_frozen()
            self._routes.append(Route(path, handler, verbs, name))
            return handler

        return register

    def group(self, prefix: str) -> RouteGroup:
        """A ``RouteGroup`` registering on this app under *prefix*."""
        self._check_not_frozen()
        return RouteGroup(self, prefix)

    def error(
        self, code_or_exception: int | type[Exception]
    ) -> Callable[[ErrorHandler], ErrorHandler]:
        """Decorator registering an error handler for a status or exception class.

        ``@app.error(404)`` is the app's "no route matched" responder.
        """

        def register(handler: ErrorHandler) -> ErrorHandler:
            self._check_not_frozen()
            self._error_handlers[code_or_exception] = handler
            return handler

        return register

    def add_middleware(self, middleware: Middleware) -> None:
        """Append *middleware*; the earliest added runs outermost."""
        self._check_not_frozen()
        self._middleware.append(middleware)

    def add_engine(self, engine: App) -> None:
        """Run *engine*'s lifespan hooks together with this app's.

        Engine startup follows this app's startup; engine shutdown comes
        first on the way down. Routing is the dispatch middleware's job.
        """
        self._check_not_frozen()
        if engine is self:
            msg = "An app cannot be its own engine."
            raise ValueError(msg)
        self._engines.append(engine)

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        """Registered middleware, outermost first."""
        return tuple(self._middleware)

    @property
    def engines(self) -> tuple[App, ...]:
        return tuple(self._engines)

    # -- Lifespan --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Decorator for a sync or async hook run at server startup."""
        self._check_not_frozen()
        self._startup.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Decorator for a sync or async hook run at server shutdown."""
        self._check_not_frozen()
        self._shutdown.append(func)
        return func

    async def startup(self) -> None:
        for hook in self._startup:
            await invoke(hook)
        for engine in self._engines:
            await engine.startup()

    async def shutdown(self) -> None:
        for engine in reversed(self._engines):
            await engine.shutdown()
        for hook in self._shutdown:
            await invoke(hook)

    # -- Serving --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve this app with pounce.

        Debug mode runs one auto-reloading worker; otherwise
        ``config.workers`` workers are started.
        """
        from hostmux.server.dev import run_server

        self.freeze()
        host = host or self.config.host
        port = port or self.config.port
        if self.config.debug:
            run_server(
                self,
                host,
                port,
                reload=True,
                reload_include=self.config.reload_include,
                reload_dirs=self.config.reload_dirs,
            )
        else:
            run_server(self, host, port, workers=self.config.workers)

    async def serve(self, request: Request) -> AnyResponse:
        """Answer an already-built *request* with this app's pipeline.

        This is how host dispatch hands a request to an isolated engine:
        the engine's middleware, routes and error handlers take over.
        """
        compiled = self._ensure_compiled()
        return await process_request(
            request,
            router=compiled.router,
            middleware=compiled.middleware,
            error_handlers=self._error_handlers,
            kida_env=compiled.kida_env,
            debug=self.config.debug,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point (``http`` and ``lifespan``)."""
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return
        self._ensure_compiled()
        await handle_request(scope, receive, send, serve=self.serve)

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        self._ensure_compiled()
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                try:
                    await self.startup()
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Freezing --

    @property
    def frozen(self) -> bool:
        return self._compiled is not None

    @property
    def routes(self) -> list[Route]:
        """Compiled routes in registration order; empty before freezing."""
        return self._compiled.router.routes if self._compiled else []

    def freeze(self) -> None:
        """Compile now rather than on first use. Safe to call repeatedly."""
        self._ensure_compiled()

    def _ensure_compiled(self) -> _Compiled:
        compiled = self._compiled
        if compiled is None:
            with self._lock:
                if self._compiled is None:
                    self._compiled = self._compile()
                compiled = self._compiled
        return compiled

    def _compile(self) -> _Compiled:
        router = Router()
        for route in self._routes:
            router.add(route)
        router.compile()
        logger.debug("Compiled %d routes, %d middleware", len(self._routes), len(self._middleware))
        return _Compiled(router, tuple(self._middleware), create_environment(self.config))

    def _check_not_frozen(self) -> None:
        if self._compiled is not None:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, middleware and host routing before app.run()."
            )
            raise RuntimeError(msg)
