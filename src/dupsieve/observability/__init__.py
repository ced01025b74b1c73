"""Logging and metrics for DupSieve."""

from __future__ import annotations

from .logging import configure_logging
from .metrics import METRICS, EngineMetrics, export_prometheus

__all__ = ["configure_logging", "METRICS", "EngineMetrics", "export_prometheus"]
