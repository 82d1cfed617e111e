"""Middleware: Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    RecoveryMiddleware -- Log unexpected exceptions and answer 500
    HostDispatchMiddleware -- Route by Host header (see hostmux.hosts)
"""

from hostmux.middleware.protocol import AnyResponse, Middleware, Next
from hostmux.middleware.recovery import RecoveryMiddleware

__all__ = [
    "AnyResponse",
    "Middleware",
    "Next",
    "RecoveryMiddleware",
]
