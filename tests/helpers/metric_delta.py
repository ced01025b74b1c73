"""
Helpers for validating metric value changes during tests.

Provides context managers to ensure metrics are properly updated by the code under test.
"""

from contextlib import contextmanager
from typing import Dict, Optional

from prometheus_client import REGISTRY


def sample_value(name: str, labels: Optional[Dict[str, str]] = None) -> float:
    """Current value of a sample in the default registry (0.0 if never set)."""
    value = REGISTRY.get_sample_value(name, labels or {})
    return 0.0 if value is None else value


@contextmanager
def metric_delta(name: str, labels: Optional[Dict[str, str]] = None, expected_delta: float = 1):
    """
    Context manager to validate sample value changes.

    Usage:
        with metric_delta("dupsieve_decisions_total", {"engine": "e", "outcome": "exact"}):
            # Code that should increment the counter by 1
            pass
    """
    initial_value = sample_value(name, labels)

    yield

    final_value = sample_value(name, labels)
    actual_delta = final_value - initial_value

    if actual_delta != expected_delta:
        raise AssertionError(
            f"Expected {name} to change by {expected_delta}, "
            f"but it changed by {actual_delta} "
            f"(from {initial_value} to {final_value})"
        )


@contextmanager
def histogram_observes(name: str, labels: Optional[Dict[str, str]] = None, min_observations: int = 1):
    """
    Context manager to validate histogram observations.

    Usage:
        with histogram_observes("dupsieve_add_latency_seconds", {"engine": "e"}):
            # Code that should record at least one timing observation
            pass
    """
    initial_count = sample_value(f"{name}_count", labels)

    yield

    final_count = sample_value(f"{name}_count", labels)
    actual_observations = final_count - initial_count

    if actual_observations < min_observations:
        raise AssertionError(
            f"Expected at least {min_observations} histogram observations, "
            f"but got {actual_observations} "
            f"(count went from {initial_count} to {final_count})"
        )
