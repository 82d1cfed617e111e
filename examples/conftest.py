"""Shared pytest configuration for hostmux examples.

``example_app`` imports the ``app.py`` sitting next to the requesting test
under a fresh module name, so each test gets a new shared app with its own
isolated host engines.
"""

import importlib.util
from pathlib import Path

import pytest


@pytest.fixture
def example_app(request: pytest.FixtureRequest):
    """The ``app`` object from the sibling app.py, loaded fresh."""
    app_path = Path(request.path).parent / "app.py"
    spec = importlib.util.spec_from_file_location(f"example_{app_path.parent.name}", app_path)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module.app
