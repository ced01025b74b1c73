"""
DupSieve - exact and near-duplicate detection for document collection pipelines.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .config import DedupConfig, MonitoringConfig, Settings
from .dedup import DeduplicationEngine, HashComputationError, InvalidInputError
from .protocols import Accepted, Decision, DecisionKind, EngineSize, RejectedExact, RejectedNearDuplicate

__all__ = [
    "__version__",
    "DedupConfig",
    "MonitoringConfig",
    "Settings",
    "DeduplicationEngine",
    "HashComputationError",
    "InvalidInputError",
    "Accepted",
    "Decision",
    "DecisionKind",
    "EngineSize",
    "RejectedExact",
    "RejectedNearDuplicate",
]
