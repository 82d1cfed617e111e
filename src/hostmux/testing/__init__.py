"""Test utilities for hostmux applications::

    from hostmux.testing import TestClient
"""

from hostmux.testing.client import TestClient

__all__ = ["TestClient"]
