"""Recovery middleware: turn unexpected handler exceptions into 500s.

Installed per engine (usually through the ``recovery()`` host extension)
so a crashing handler on one host is answered and logged by that host's
own chain. ``HTTPError`` passes through untouched to the app's error
handlers.
"""

import logging

from hostmux.errors import HTTPError
from hostmux.http.request import Request
from hostmux.http.response import Response
from hostmux.middleware.protocol import AnyResponse, Next

logger = logging.getLogger("hostmux.server")


class RecoveryMiddleware:
    """Catch exceptions raised further down the chain and answer 500.

    Usage::

        app.add_middleware(RecoveryMiddleware())
        app.add_middleware(RecoveryMiddleware(body="Oops", status=503))
    """

    __slots__ = ("body", "status")

    def __init__(self, body: str = "Internal Server Error", status: int = 500) -> None:
        self.body = body
        self.status = status

    async def __call__(self, request: Request, next: Next) -> AnyResponse:
        try:
            return await next(request)
        except HTTPError:
            raise
        except Exception:
            logger.exception(
                "recovered %s %s (host %r)", request.method, request.path, request.host
            )
            return Response.plain(self.body, self.status)
