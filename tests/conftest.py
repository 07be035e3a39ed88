"""Root conftest — shared fixtures.

Invariants:
    - Every test gets a fresh registry and dispatcher (no shared capability state)
    - Settings cache cleared around each test so env overrides take effect
"""

import pytest

from demo_server.config import get_settings
from demo_server.services.define_capabilities import build_registry
from demo_server.services.dispatch import Dispatcher


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def registry():
    return build_registry()


@pytest.fixture
def dispatcher(registry):
    return Dispatcher(registry)
