"""Pytest configuration and fixtures.

Provides a scripted Redis client double for Graph tests, a static name
mapping for parser tests, and automatic skipping of integration tests
when no RedisGraph server is configured.
"""

from __future__ import annotations

import os
from typing import List

import pytest

from tests.helpers import FakeClient, StaticMapping

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def mapping() -> StaticMapping:
    return StaticMapping()


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep a developer's .env or REDIS_* variables out of unit tests."""
    for key in (
        "REDIS_URL",
        "REDIS_PASSWORD",
        "REDIS_SOCKET_TIMEOUT",
        "REDIS_MAX_CONNECTIONS",
        "REDISGRAPH_GRAPH",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


# =============================================================================
# Markers
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: List[pytest.Item]) -> None:
    if os.environ.get("REDISGRAPH_TEST_URL"):
        return
    skip = pytest.mark.skip(reason="REDISGRAPH_TEST_URL not set")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)
