"""Request-scoped context via ContextVar.

``request_var`` holds the request being served. It is set once by the
ASGI handler of the app that received the request; when host dispatch
delegates to an isolated engine the same request stays current.

Thread safety:
    ``ContextVar`` is task-local under asyncio and thread-local under
    free-threading. No locks needed.
"""

from contextvars import ContextVar

from hostmux.http.request import Request

request_var: ContextVar[Request] = ContextVar("hostmux_request")
"""The current request. Set by the ASGI handler before dispatch."""


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()
