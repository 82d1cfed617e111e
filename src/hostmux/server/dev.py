"""Server startup via pounce.

Pounce's ``run()`` takes an import string (e.g. ``"myapp:app"``), but
hostmux has a live ``App`` object, so ``pounce.Server`` is used
directly with the ASGI callable. Only the shared app is served; isolated
host engines are reached through it.
"""


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    workers: int = 1,
    reload: bool = False,
    reload_include: tuple[str, ...] = (),
    reload_dirs: tuple[str, ...] = (),
) -> None:
    """Start a pounce server for the given hostmux App.

    Args:
        app: ASGI callable (the shared hostmux App).
        host: Bind host address.
        port: Bind port number.
        workers: Worker count; ``0`` lets pounce pick from the CPU count.
        reload: Enable auto-reload on file changes.
        reload_include: Extra file extensions to watch when reload is active.
        reload_dirs: Extra directories to watch alongside cwd.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=workers,
        reload=reload,
        reload_include=reload_include,
        reload_dirs=reload_dirs,
    )
    Server(config, app).run()
