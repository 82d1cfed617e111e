"""The shape every middleware has.

Plain ``async def`` functions and objects with an async ``__call__`` both
qualify; nothing has to subclass anything. Host dispatch is a middleware
too, one that sometimes answers on a different app instead of calling
``next``.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from hostmux.http.request import Request
from hostmux.http.response import Response

type AnyResponse = Response

# Rest of the chain, ending in the router
type Next = Callable[[Request], Awaitable[AnyResponse]]


class Middleware(Protocol):
    """``async (request, next) -> response``.

    Example that tags every answer with the host it was served for::

        async def tag_host(request: Request, next: Next) -> AnyResponse:
            response = await next(request)
            return response.with_header("X-Served-Host", request.host)
    """

    async def __call__(self, request: Request, next: Next) -> AnyResponse: ...
