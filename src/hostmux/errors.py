"""Exceptions raised by hostmux.

``HTTPError`` subclasses become responses inside the pipeline of the app
that raised them. The rest signal mistakes made while wiring an app up.
"""

from dataclasses import dataclass


class HostmuxError(Exception):
    """Base for all hostmux-specific errors."""


class ConfigurationError(HostmuxError):
    """Invalid routes or host routing.

    ``setup_host_routes()`` raises it before the shared app is touched;
    the router raises it when an app is frozen.
    """


class DuplicateHostError(ConfigurationError):
    """The same hostname was configured for more than one host route."""

    def __init__(self, host: str) -> None:
        self.host = host
        super().__init__(f"Host {host!r} is configured more than once.")


class HostSetupError(HostmuxError):
    """An extension or route builder failed while setting up host routing.

    The original exception is chained as ``__cause__``. The shared app
    must not serve traffic after this is raised: the dispatch middleware
    is only attached once every host has been configured.
    """

    def __init__(self, host: str, stage: str, *, generic: bool = False) -> None:
        self.host = host
        self.stage = stage
        self.generic = generic
        kind = "generic host" if generic else "host"
        super().__init__(f"Setup failed for {kind} {host!r} during {stage}.")


@dataclass(frozen=True, slots=True)
class HTTPError(HostmuxError):
    """Raise from a handler or middleware to answer with *status*.

    The app whose pipeline is running looks up ``@app.error(status)``
    (or a handler for the exception class) and falls back to a plain
    text body.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        return f"{self.status}: {self.detail}" if self.detail else str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: nothing is registered at this path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: the path exists, the method does not. Carries ``Allow``."""

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=detail or f"{allow} only",
            headers=(("Allow", allow),),
        )
