"""
Shared pytest fixtures and configuration for devspine tests.

This module provides:
- Logging/settings isolation between tests
- Stub lifecycle clients
- An outcome-collecting sink

Fixtures are auto-discovered by pytest; request them as function arguments.
"""

import os
import sys
from pathlib import Path

import pytest
import structlog

# Ensure devspine package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from devspine.core.settings import get_settings
from devspine.lifecycle.stub import StubLifecycleClient
from devspine.reconcile.events import CollectingSink


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def _isolate_global_state(monkeypatch):
    """Fresh settings and default structlog config for every test."""
    for key in list(os.environ):
        if key.startswith("DEVSPINE_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    yield
    get_settings.cache_clear()
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


# =============================================================================
# Lifecycle Fixtures
# =============================================================================


@pytest.fixture
def stub_client() -> StubLifecycleClient:
    """Scripted client where every identifier succeeds."""
    return StubLifecycleClient()


@pytest.fixture
def runtime_client() -> StubLifecycleClient:
    """Stateful client with a small set of containers and images."""
    return StubLifecycleClient(
        containers={"web": True, "worker": True, "db": False},
        images={"app:latest", "app:1.0", "redis:7"},
    )


@pytest.fixture
def sink() -> CollectingSink:
    return CollectingSink()
