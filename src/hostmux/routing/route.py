"""Compiled route records."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Route:
    """A handler bound to a path pattern and a set of methods.

    ``path`` is the full pattern as registered on the app, including any
    group prefix (``/1/hi`` for ``/hi`` mounted under ``/1``).
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str] = frozenset({"GET"})
    name: str | None = None

    def __str__(self) -> str:
        return f"{'|'.join(sorted(self.methods))} {self.path}"


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """The route picked for a request and the raw path parameter strings."""

    route: Route
    path_params: dict[str, str] = field(default_factory=dict)
