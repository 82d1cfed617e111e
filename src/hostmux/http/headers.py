"""Request headers as a read-only, case-insensitive mapping.

Header names are folded to lower case and values decoded as latin-1 once,
when the mapping is built. Host dispatch reads ``Host`` on every request,
so lookups are plain dict hits afterwards.
"""

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Read-only view of the headers a client sent.

    ``headers["host"]`` is the first value sent under that name;
    ``headers.get_list("x-forwarded-for")`` keeps every value in order.
    """

    __slots__ = ("_values",)

    _values: dict[str, list[str]]

    def __init__(self, pairs: Iterable[tuple[bytes, bytes]] = ()) -> None:
        values: dict[str, list[str]] = {}
        for name, value in pairs:
            values.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))
        object.__setattr__(self, "_values", values)

    @classmethod
    def from_dict(cls, headers: Mapping[str, str]) -> "Headers":
        """Build headers from ``str`` names and values (handy in tests)."""
        return cls((k.encode("latin-1"), v.encode("latin-1")) for k, v in headers.items())

    def __setattr__(self, name: str, value: object) -> None:
        msg = "Headers are read-only"
        raise AttributeError(msg)

    def __getitem__(self, name: str) -> str:
        return self._values[name.lower()][0]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Headers({dict(self)!r})"

    def get_list(self, name: str) -> list[str]:
        """Every value sent for *name*, in arrival order."""
        return list(self._values.get(name.lower(), ()))
