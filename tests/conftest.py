"""
Test configuration for DupSieve.

Provides engine fixtures shared by the unit and integration suites.
"""

# Standard library imports
import itertools
from typing import Callable, Iterator

# Third-party imports
import pytest

# Local imports
from dupsieve.config import DedupConfig, MonitoringConfig
from dupsieve.dedup import DeduplicationEngine

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")
    config.addinivalue_line("markers", "slow: Tests that take >10 seconds")


_engine_names = (f"test-engine-{i}" for i in itertools.count())


# ============================================================================
# Core Test Fixtures
# ============================================================================


@pytest.fixture
def engine_name() -> str:
    """Unique metrics label so counters from other tests do not interfere."""
    return next(_engine_names)


@pytest.fixture
def make_engine(engine_name: str) -> Callable[..., DeduplicationEngine]:
    """Factory building engines with overridable config fields."""

    def _make(**overrides) -> DeduplicationEngine:
        overrides.setdefault("engine_name", engine_name)
        return DeduplicationEngine(DedupConfig(**overrides), MonitoringConfig())

    return _make


@pytest.fixture
def engine(make_engine) -> Iterator[DeduplicationEngine]:
    """Engine with default settings."""
    eng = make_engine()
    yield eng
    eng.clear()
