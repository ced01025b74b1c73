"""
Defines Prometheus metrics for the deduplication engine.
"""

from __future__ import annotations

from typing import Any, Dict

from prometheus_client import REGISTRY as _PROM_REGISTRY
from prometheus_client import Counter as _OrigCounter
from prometheus_client import Gauge as _OrigGauge
from prometheus_client import Histogram as _OrigHistogram

# ---------------------------------------------------------------------------
# Duplicate-safe Prometheus metric wrappers
# ---------------------------------------------------------------------------
# Importing this module twice (e.g. under different test collectors) must not
# raise "Duplicated timeseries in CollectorRegistry".


def _duplicate_safe_factory(metric_cls):
    """Return a factory that reuses an existing collector if already present."""

    def _factory(name: str, documentation: str, *args, **kwargs):  # type: ignore[override]
        existing = _PROM_REGISTRY._names_to_collectors.get(name)
        if existing is not None:
            return existing  # type: ignore[return-value]

        try:
            return metric_cls(name, documentation, *args, **kwargs)  # type: ignore[call-arg]
        except ValueError:
            # Registration lost the race, fall back to the now-existing collector.
            return _PROM_REGISTRY._names_to_collectors[name]  # type: ignore[return-value]

    return _factory


Counter = _duplicate_safe_factory(_OrigCounter)  # type: ignore[assignment]
Gauge = _duplicate_safe_factory(_OrigGauge)  # type: ignore[assignment]
Histogram = _duplicate_safe_factory(_OrigHistogram)  # type: ignore[assignment]


def _create_metrics() -> Dict[str, Any]:
    return {
        "decisions_total": Counter(
            "dupsieve_decisions_total",
            "Total number of deduplication decisions by outcome",
            ["engine", "outcome"],
        ),
        "invalid_input_total": Counter(
            "dupsieve_invalid_input_total",
            "Total number of documents rejected as invalid input",
            ["engine"],
        ),
        "add_latency_seconds": Histogram(
            "dupsieve_add_latency_seconds",
            "Time taken to decide on a single document",
            ["engine"],
            buckets=[0.0001, 0.0005, 0.001, 0.002, 0.005, 0.01, 0.02, 0.05, 0.1, 0.5],
        ),
        "window_size": Gauge(
            "dupsieve_window_size",
            "Number of sketches currently retained in the near-duplicate window",
            ["engine"],
        ),
        "exact_index_size": Gauge(
            "dupsieve_exact_index_size",
            "Number of fingerprints currently held by the exact index",
            ["engine"],
        ),
        "window_evictions_total": Counter(
            "dupsieve_window_evictions_total",
            "Total number of sketches evicted from the near-duplicate window",
            ["engine"],
        ),
    }


METRICS: Dict[str, Any] = _create_metrics()


class EngineMetrics:
    """Per-engine view of the shared collectors, bound to one ``engine`` label."""

    def __init__(self, engine_name: str, enabled: bool = True) -> None:
        self.engine_name = engine_name
        self.enabled = enabled

    def record_decision(self, outcome: str, duration: float) -> None:
        if not self.enabled:
            return
        METRICS["decisions_total"].labels(engine=self.engine_name, outcome=outcome).inc()
        METRICS["add_latency_seconds"].labels(engine=self.engine_name).observe(duration)

    def record_invalid_input(self) -> None:
        if self.enabled:
            METRICS["invalid_input_total"].labels(engine=self.engine_name).inc()

    def record_evictions(self, count: int) -> None:
        if self.enabled and count:
            METRICS["window_evictions_total"].labels(engine=self.engine_name).inc(count)

    def set_sizes(self, exact_count: int, window_count: int) -> None:
        if not self.enabled:
            return
        METRICS["exact_index_size"].labels(engine=self.engine_name).set(exact_count)
        METRICS["window_size"].labels(engine=self.engine_name).set(window_count)


def export_prometheus() -> str:
    """Export metrics in Prometheus text format."""
    from prometheus_client import generate_latest

    return generate_latest().decode("utf-8")
