"""The host registry: hostname to isolated engine, frozen at build.

Built once by ``setup_host_routes()`` and read on every request. The
backing dict is private and only exposed through a ``MappingProxyType``,
so there is no code path that mutates the registry after ``build()``
returns and no lock is needed on the request path.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from hostmux.errors import DuplicateHostError
from hostmux.hosts.entry import BoundHost

if TYPE_CHECKING:
    from hostmux.app import App


class HostRegistry(Mapping[str, BoundHost]):
    """Read-only mapping of hostname to ``BoundHost``.

    Keys are the hostnames as they will be compared against requests,
    i.e. already normalized when host normalization is on.
    """

    __slots__ = ("_entries",)

    _entries: MappingProxyType[str, BoundHost]

    def __init__(self, entries: Mapping[str, BoundHost] | None = None) -> None:
        object.__setattr__(self, "_entries", MappingProxyType(dict(entries or {})))

    @classmethod
    def build(
        cls,
        bound: Iterable[BoundHost],
        *,
        key: Callable[[str], str] = str,
        reject_duplicates: bool = True,
    ) -> HostRegistry:
        """Freeze *bound* into a registry, keyed by ``key(entry.host)``.

        With ``reject_duplicates=False`` a repeated hostname keeps the
        last entry.
        """
        entries: dict[str, BoundHost] = {}
        for entry in bound:
            name = key(entry.host)
            if reject_duplicates and name in entries:
                raise DuplicateHostError(name)
            entries[name] = entry
        return cls(entries)

    def __setattr__(self, name: str, value: object) -> None:
        msg = "HostRegistry is immutable"
        raise AttributeError(msg)

    def __getitem__(self, host: str) -> BoundHost:
        return self._entries[host]

    def __contains__(self, host: object) -> bool:
        return host in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"HostRegistry({sorted(self._entries)!r})"

    def lookup(self, host: str) -> App | None:
        """The engine registered for *host*, or ``None``."""
        entry = self._entries.get(host)
        return entry.engine if entry is not None else None

    @property
    def hosts(self) -> tuple[str, ...]:
        """Registered hostnames in registration order."""
        return tuple(self._entries)
