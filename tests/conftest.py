"""
Shared pytest fixtures and configuration for taskbind tests.

This module provides:
- Registry and settings cleanup for test isolation
- A fixed clock for expiration tests
- Descriptor factories

Fixtures are auto-discovered by pytest; use them as function arguments.
"""

from collections.abc import Generator
from datetime import UTC, datetime

import pytest
import structlog

from taskbind.core.settings import clear_settings_cache
from taskbind.execution.descriptor import TaskDescriptor
from taskbind.execution.registry import TargetRegistry, reset_default_registry


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark every test without an explicit marker as a unit test."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_state(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Fresh default registry, settings and logging for each test, no TASKBIND_ env leakage."""
    for var in (
        "TASKBIND_DEFAULT_TTL_SECONDS",
        "TASKBIND_ALLOW_IMPORT_RESOLUTION",
        "TASKBIND_ALLOWED_LIBRARIES",
        "TASKBIND_LOG_LEVEL",
        "TASKBIND_LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)
    reset_default_registry()
    clear_settings_cache()
    structlog.reset_defaults()
    yield
    reset_default_registry()
    clear_settings_cache()
    structlog.reset_defaults()


@pytest.fixture
def registry() -> TargetRegistry:
    """An isolated registry."""
    return TargetRegistry()


# =============================================================================
# Clock / Descriptor Fixtures
# =============================================================================


@pytest.fixture
def fixed_now() -> datetime:
    """A fixed aware UTC 'now' for deterministic age checks."""
    return datetime(2025, 1, 15, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def make_descriptor():
    """Factory for descriptors with sensible defaults."""

    def _make(
        library: str = "core",
        type_name: str = "MathOps",
        method: str = "Add",
        args=(2, 3),
        **kwargs,
    ) -> TaskDescriptor:
        return TaskDescriptor.create(library, type_name, method, args, **kwargs)

    return _make
