"""Host routing setup.

``setup_host_routes()`` builds one isolated engine per configured host,
mounts prefixed copies of the host routes on the shared app, and finally
installs ``HostDispatchMiddleware`` on the shared app::

    app = App()

    @app.error(404)
    def no_route():
        return "No known route"

    setup_host_routes(
        app,
        [
            HostRoute("a.example", a_routes, prefix="1"),
            HostRoute("b.example", b_routes, prefix="2"),
        ],
        ["www.example"],
        extensions=[not_found("No known route")],
    )

Setup is all-or-nothing from the caller's point of view: the first
failing extension or route builder aborts it with ``HostSetupError`` and
the dispatch middleware is never attached. An app whose setup failed
must not be served.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace

from hostmux.app import App
from hostmux.config import HostRoutingConfig
from hostmux.errors import ConfigurationError, DuplicateHostError, HostSetupError
from hostmux.hosts.dispatch import HostDispatchMiddleware
from hostmux.hosts.entry import BoundHost, HostExtension, HostRoute
from hostmux.hosts.normalize import normalize_host
from hostmux.hosts.registry import HostRegistry

logger = logging.getLogger("hostmux.hosts")


def setup_host_routes(
    app: App,
    hosts: Sequence[HostRoute],
    generic_hosts: Iterable[str] = (),
    *,
    secure: bool | None = None,
    extensions: Sequence[HostExtension] = (),
    config: HostRoutingConfig | None = None,
    engine_factory: Callable[[str], App] | None = None,
) -> HostRegistry:
    """Configure host-based routing on *app* and return the host registry.

    Args:
        app: The shared app. Must not be frozen yet.
        hosts: One ``HostRoute`` per dedicated host, processed in order.
        generic_hosts: Hostnames served by the shared app's own routes.
        secure: Reject unknown hosts. Overrides ``config.secure`` when given.
        extensions: Called as ``ext(host, engine)`` for every host engine
            (in order, before its routes are built) and then as
            ``ext(host, app)`` for every generic host.
        config: Dispatch options; defaults to ``HostRoutingConfig()``.
        engine_factory: Builds the isolated engine for a hostname.
            Defaults to ``App(app.config)``.

    Raises:
        ConfigurationError: Invalid input, checked before *app* is touched.
        DuplicateHostError: A hostname appears twice.
        HostSetupError: An extension or route builder raised.
    """
    config = config or HostRoutingConfig()
    if secure is not None:
        config = replace(config, secure=secure)
    key = normalize_host if config.normalize else str
    generic = tuple(generic_hosts)

    if app.frozen:
        msg = "Host routing must be set up before the app starts serving requests."
        raise RuntimeError(msg)
    _validate(hosts, generic, key, reject_duplicates=config.reject_duplicates)

    def make_engine(host: str) -> App:
        if engine_factory is not None:
            return engine_factory(host)
        return App(app.config)

    bound: list[BoundHost] = []
    for entry in hosts:
        engine = make_engine(entry.host)
        if engine is app:
            msg = f"engine_factory returned the shared app for host {entry.host!r}."
            raise ConfigurationError(msg)

        for extension in extensions:
            _apply(extension, entry.host, engine)

        try:
            entry.routes(engine)
            if entry.mount_path is not None:
                entry.routes(app.group(entry.mount_path))
            engine.freeze()
        except Exception as exc:
            raise HostSetupError(entry.host, "routes") from exc

        app.add_engine(engine)
        bound.append(BoundHost(entry, engine))
        logger.debug(
            "Host %r: %d routes%s",
            entry.host,
            len(engine.routes),
            f", mounted at {entry.mount_path}" if entry.mount_path else "",
        )

    for host in generic:
        for extension in extensions:
            _apply(extension, host, app, generic=True)

    registry = HostRegistry.build(bound, key=key, reject_duplicates=config.reject_duplicates)
    app.add_middleware(HostDispatchMiddleware(registry, generic, config))

    logger.info(
        "Host routing ready: %d dedicated, %d generic, %s",
        len(registry),
        len(generic),
        "secure" if config.secure else "insecure",
    )
    return registry


def _apply(extension: HostExtension, host: str, engine: App, *, generic: bool = False) -> None:
    try:
        extension(host, engine)
    except Exception as exc:
        raise HostSetupError(host, "extension", generic=generic) from exc


def _validate(
    hosts: Sequence[HostRoute],
    generic: Sequence[str],
    key: Callable[[str], str],
    *,
    reject_duplicates: bool,
) -> None:
    """Reject configurations that could not be dispatched unambiguously."""
    seen_hosts: set[str] = set()
    seen_prefixes: dict[str, str] = {}
    for entry in hosts:
        name = key(entry.host)
        if not name:
            msg = "HostRoute.host must not be empty."
            raise ConfigurationError(msg)
        if reject_duplicates and name in seen_hosts:
            raise DuplicateHostError(name)
        seen_hosts.add(name)

        if entry.prefix:
            other = seen_prefixes.get(entry.prefix)
            if other is not None:
                msg = f"Prefix {entry.prefix!r} is used by both {other!r} and {entry.host!r}."
                raise ConfigurationError(msg)
            seen_prefixes[entry.prefix] = entry.host

    for host in generic:
        if not key(host):
            msg = "Generic hostnames must not be empty."
            raise ConfigurationError(msg)
