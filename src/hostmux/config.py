"""Application and host routing configuration.

Both configs are frozen dataclasses: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(debug=True, port=3000)

    Isolated host engines built by ``setup_host_routes()`` reuse the
    shared app's config unless an ``engine_factory`` says otherwise.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Reload (development mode, requires debug=True)
    reload_include: tuple[str, ...] = ()  # Extra extensions to watch (e.g. ".html", ".css")
    reload_dirs: tuple[str, ...] = ()  # Extra directories to watch alongside cwd

    # Templates (None = only inline templates are available)
    template_dir: str | Path | None = None
    autoescape: bool = True
    trim_blocks: bool = True
    lstrip_blocks: bool = True

    # Production
    workers: int = 0  # 0 = auto-detect from CPU count
    log_level: str = "info"


@dataclass(frozen=True, slots=True)
class HostRoutingConfig:
    """Host dispatch configuration.

    Defaults are secure: requests for a host that is neither registered
    nor generic are rejected with ``404 Unknown host``::

        HostRoutingConfig(secure=False)  # treat unknown hosts as generic
    """

    secure: bool = True

    # Lower-case, drop ":port" and a trailing dot before matching.
    # False = exact string comparison against the Host header.
    normalize: bool = True

    # False = last entry for a repeated hostname wins
    reject_duplicates: bool = True

    unknown_host_status: int = 404
    unknown_host_body: str = "Unknown host"
