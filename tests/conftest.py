"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from recall.item_store import ItemStore  # noqa: E402
from recall.persistence import MemoryBackend  # noqa: E402
from recall.session_manager import SessionManager  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (file-backed store)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """Fixed reference time."""
    return datetime(2026, 3, 1, 9, 30, 0)


@pytest.fixture
def backend():
    """Fresh in-memory persistence backend."""
    return MemoryBackend()


@pytest.fixture
def item_store(backend):
    """ItemStore over the in-memory backend."""
    return ItemStore(backend)


@pytest.fixture
def session_manager(item_store):
    """SessionManager sharing the item store's backend."""
    return SessionManager(item_store)


@pytest.fixture
def due_items(item_store, now):
    """Three items created two days ago, all due at `now`."""
    created = now - timedelta(days=2)
    items = []
    for name in ("TCP", "UDP", "ARP"):
        item = item_store.create_item(name, f"{name} description", now=created)
        items.append(item_store.add(item))
    return items
