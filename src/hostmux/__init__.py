"""Hostmux: host-based request dispatch for ASGI apps.

Serve several logically distinct apps from one process and one socket,
told apart by the ``Host`` header. Each configured host gets an isolated
app of its own; generic hosts share one app where the per-host routes are
also mounted under path prefixes.

Basic usage::

    from hostmux import App, HostRoute, setup_host_routes

    def blog_routes(routes):
        @routes.route("/")
        def index():
            return "Hello from the blog"

    app = App()
    setup_host_routes(app, [HostRoute("blog.example", blog_routes, prefix="blog")],
                      ["www.example"])
    app.run()
"""

# Declare free-threading support (PEP 703)
_Py_mod_gil = 0

__version__ = "0.1.0"
__all__ = [
    "AnyResponse",
    "App",
    "AppConfig",
    "ConfigurationError",
    "DuplicateHostError",
    "HTTPError",
    "HostRoute",
    "HostRoutingConfig",
    "HostSetupError",
    "HostmuxError",
    "MethodNotAllowed",
    "Middleware",
    "Next",
    "NotFound",
    "Redirect",
    "Request",
    "Response",
    "Template",
    "get_request",
    "setup_host_routes",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import hostmux`` fast while providing a clean top-level API.
    """
    if name == "App":
        from hostmux.app import App

        return App

    if name in ("AppConfig", "HostRoutingConfig"):
        from hostmux import config as _config

        return getattr(_config, name)

    if name == "Request":
        from hostmux.http.request import Request

        return Request

    if name in ("Response", "Redirect"):
        from hostmux.http import response as _resp

        return getattr(_resp, name)

    if name == "Template":
        from hostmux.templating.returns import Template

        return Template

    if name in ("AnyResponse", "Middleware", "Next"):
        from hostmux.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in ("HostRoute", "setup_host_routes"):
        from hostmux import hosts as _hosts

        return getattr(_hosts, name)

    if name == "get_request":
        from hostmux.context import get_request

        return get_request

    if name in (
        "ConfigurationError",
        "DuplicateHostError",
        "HTTPError",
        "HostSetupError",
        "HostmuxError",
        "MethodNotAllowed",
        "NotFound",
    ):
        from hostmux import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
