"""Per-app route table backed by a segment trie.

Each ``App`` (the shared one and every isolated host engine) owns one
``Router``. Routes are added while the app is being set up; ``compile()``
closes the table before the first request.
"""

import re
from dataclasses import dataclass

from hostmux.errors import ConfigurationError, MethodNotAllowed, NotFound
from hostmux.routing.params import CONVERTERS
from hostmux.routing.route import Route, RouteMatch


def join_path(prefix: str, path: str) -> str:
    """Join a group prefix and a route path into one absolute path.

    Examples::

        join_path("/1", "/")     -> "/1/"
        join_path("/1", "")      -> "/1"
        join_path("/1/", "/hi")  -> "/1/hi"
        join_path("", "/hi")     -> "/hi"
    """
    prefix = "/" + prefix.strip("/") if prefix.strip("/") else ""
    if not path:
        return prefix or "/"
    return f"{prefix}/{path.lstrip('/')}"


@dataclass(frozen=True, slots=True)
class Segment:
    """One ``/``-separated piece of a route pattern.

    ``users`` is static; ``{id:int}`` has ``param="id"`` and
    ``converter="int"``; ``{rest:path}`` swallows the remainder of the path.
    """

    text: str
    param: str | None = None
    converter: str = "str"

    @property
    def is_param(self) -> bool:
        return self.param is not None


def parse_path(path: str) -> list[Segment]:
    """Split a route pattern into segments. ``/`` has none.

    Raises ``ConfigurationError`` for ``<param>`` placeholders and unknown
    converters, so typos fail at setup instead of producing 404s.
    """
    segments: list[Segment] = []
    for text in filter(None, path.split("/")):
        if text[0] == "<" and text[-1] == ">":
            msg = f"Route {path!r} uses <param> syntax. Use {{param}} for path parameters instead."
            raise ConfigurationError(msg)
        if text[0] == "{" and text[-1] == "}":
            name, _, converter = text[1:-1].partition(":")
            converter = converter or "str"
            if converter not in CONVERTERS:
                msg = f"Route {path!r} uses unknown converter {converter!r}."
                raise ConfigurationError(msg)
            segments.append(Segment(text, name, converter))
        else:
            segments.append(Segment(text))
    return segments


class _Node:
    """Trie node. ``param`` and ``rest`` hold at most one edge each."""

    __slots__ = ("param", "rest", "routes", "static")

    def __init__(self) -> None:
        self.static: dict[str, _Node] = {}
        self.param: tuple[Segment, re.Pattern[str], _Node] | None = None
        self.rest: tuple[str, _Node] | None = None
        self.routes: dict[str, Route] = {}

    def param_child(self, segment: Segment, path: str) -> "_Node":
        if self.param is None:
            pattern, _ = CONVERTERS[segment.converter]
            self.param = (segment, re.compile(pattern), _Node())
        elif self.param[0] != segment:
            msg = (
                f"Route {path!r} declares {segment.text} where another route "
                f"already declares {self.param[0].text}."
            )
            raise ConfigurationError(msg)
        return self.param[2]

    def rest_child(self, name: str) -> "_Node":
        if self.rest is None:
            self.rest = (name, _Node())
        return self.rest[1]

    def bind(self, route: Route) -> None:
        for method in route.methods:
            if method in self.routes:
                msg = f"Route {method} {route.path!r} is already registered."
                raise ConfigurationError(msg)
            self.routes[method] = route


class Router:
    """Maps ``(method, path)`` to a ``RouteMatch``.

    Usage::

        router = Router()
        router.add(Route("/", index))
        router.add(Route("/items/{id:int}", item))
        router.compile()
        router.match("GET", "/items/7").path_params  # {"id": "7"}

    Static segments win over parameters, parameters over ``path``
    catch-alls. Trailing slashes are ignored, so ``/1`` and ``/1/`` are
    the same route.
    """

    __slots__ = ("_compiled", "_root", "_routes")

    def __init__(self) -> None:
        self._root = _Node()
        self._routes: list[Route] = []
        self._compiled = False

    @property
    def routes(self) -> list[Route]:
        """Registered routes in registration order."""
        return list(self._routes)

    def add(self, route: Route) -> None:
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        node = self._root
        for segment in parse_path(route.path):
            if segment.converter == "path":
                node = node.rest_child(segment.param or "path")
                break
            if segment.is_param:
                node = node.param_child(segment, route.path)
            else:
                node = node.static.setdefault(segment.text, _Node())
        node.bind(route)
        self._routes.append(route)

    def compile(self) -> None:
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Find the route for *method* and *path*.

        ``HEAD`` falls back to a ``GET`` route. Raises ``NotFound`` when
        no pattern matches the path and ``MethodNotAllowed`` when one
        does but not for *method*.
        """
        found = _walk(self._root, [p for p in path.split("/") if p], {})
        if found is None:
            raise NotFound(f"No route matches {method} {path!r}")

        node, params = found
        route = node.routes.get(method)
        if route is None and method == "HEAD":
            route = node.routes.get("GET")
        if route is None:
            raise MethodNotAllowed(frozenset(node.routes))
        return RouteMatch(route, params)


def _walk(
    node: _Node, parts: list[str], params: dict[str, str]
) -> tuple[_Node, dict[str, str]] | None:
    if not parts:
        return (node, params) if node.routes else None

    head, tail = parts[0], parts[1:]
    child = node.static.get(head)
    if child is not None and (found := _walk(child, tail, params)):
        return found
    if node.param is not None:
        segment, regex, child = node.param
        if regex.fullmatch(head) and (found := _walk(child, tail, {**params, segment.param: head})):
            return found
    if node.rest is not None:
        name, child = node.rest
        return child, {**params, name: "/".join(parts)}
    return None
