"""Pytest configuration and fixtures for taskorbit tests."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from taskorbit.config import Settings
from taskorbit.context import AppContext
from taskorbit.storage import MemoryBlobStore
from taskorbit.store import DataStore

# Wednesday; keeps the ISO week and month boundaries away from the test data
FIXED_NOW = datetime(2024, 6, 12, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return FIXED_NOW


@pytest.fixture
def backend():
    return MemoryBlobStore()


@pytest.fixture
def make_store():
    """Build a store with a frozen clock over ``backend`` (a fresh in-memory one by default)."""

    def _make(backend=None, seed_samples=False):
        backend = backend if backend is not None else MemoryBlobStore()
        return DataStore(backend, clock=lambda: FIXED_NOW, seed_samples=seed_samples)

    return _make


@pytest.fixture
def store(backend, make_store):
    """An empty store (no sample data) with a frozen clock."""
    return make_store(backend)


@pytest.fixture
def seeded_store(make_store):
    """A store loaded with the sample dataset."""
    return make_store(seed_samples=True)


@pytest.fixture
def make_ctx():
    """Build a fake MCP request context whose lifespan context wraps ``store``."""

    def _make(store):
        ctx = MagicMock()
        ctx.request_context.lifespan_context = AppContext(settings=Settings(), store=store)
        return ctx

    return _make


@pytest.fixture
def ctx(store, make_ctx):
    return make_ctx(store)
