"""Hostname normalization for Host-header matching.

Clients send ``Example.com``, ``example.com:8080`` and ``example.com.``
for the same site. Configured hostnames and request headers go through
the same function so they compare equal.
"""


def normalize_host(host: str) -> str:
    """Lower-case *host*, drop a ``:port`` suffix and a trailing dot.

    IPv6 literals keep their brackets::

        normalize_host("Example.COM:8080")  -> "example.com"
        normalize_host("example.com.")      -> "example.com"
        normalize_host("example.com:")      -> "example.com"
        normalize_host("[::1]:8000")        -> "[::1]"
        normalize_host("")                  -> ""
    """
    host = host.strip().lower()
    if host.startswith("["):
        end = host.find("]")
        if end != -1:
            return host[: end + 1]
        return host
    # A bare IPv6 address has several colons and no port to strip
    if host.count(":") == 1:
        name, _, port = host.partition(":")
        if not port or port.isdigit():
            host = name
    return host.rstrip(".")
