"""Fixtures for the runnable stencil examples.

Each example directory holds an ``app.py`` that builds and loads an
``Engine`` at import time, and a test module beside it. ``example_app``
imports that app.py afresh for every test, so no cached template sets leak
between tests; ``example_engine`` hands out the app's engine directly.
"""

import importlib.util
from pathlib import Path
from types import ModuleType

import pytest

from stencil import Engine


def _import_app(test_file: Path) -> ModuleType:
    app_path = test_file.parent / "app.py"
    loader_spec = importlib.util.spec_from_file_location(
        f"stencil_example_{app_path.parent.name}", app_path
    )
    assert loader_spec is not None and loader_spec.loader is not None, app_path
    module = importlib.util.module_from_spec(loader_spec)
    loader_spec.loader.exec_module(module)
    return module


@pytest.fixture
def example_app(request: pytest.FixtureRequest) -> ModuleType:
    """The example's app.py, freshly imported."""
    return _import_app(Path(request.path))


@pytest.fixture
def example_engine(example_app: ModuleType) -> Engine:
    """The loaded engine the example app renders with."""
    engine = example_app.engine
    assert isinstance(engine, Engine)
    assert engine.loaded
    return engine
