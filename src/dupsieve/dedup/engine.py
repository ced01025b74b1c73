"""
Deduplication Engine.

Combines the exact and near-duplicate layers into one decision per document:
1. Normalize text (empty/whitespace-only input is rejected)
2. Exact layer: fingerprint lookup, short-circuit on hit
3. Near layer: SimHash sketch scanned against the retention window
4. Accept: register fingerprint and sketch, allocate a new id

Only the Accepted path mutates state. The whole check-then-insert sequence
runs under one lock per engine, so two concurrent identical documents can
never both be accepted.
"""

import threading
import time
from typing import Any, Dict, Iterable, List, Optional, Tuple

import structlog

from ..config import DedupConfig, MonitoringConfig, Settings
from ..observability.metrics import EngineMetrics
from ..protocols import Accepted, Decision, EngineSize, RejectedExact, RejectedNearDuplicate
from .errors import InvalidInputError
from .fingerprint import ExactFingerprintIndex
from .normalizer import TextNormalizer
from .sketch import LocalitySensitiveSketcher
from .window import NearDuplicateWindow

logger = structlog.get_logger(__name__)


class DeduplicationEngine:
    """
    Streaming exact + near-duplicate detector with bounded sketch memory.

    Each instance owns its indices; several engines (e.g. one per
    investigation) can live in the same process without sharing state.
    """

    def __init__(self, config: Optional[DedupConfig] = None, monitoring: Optional[MonitoringConfig] = None):
        """
        Initialize the engine.

        Args:
            config: Deduplication options (defaults apply when omitted)
            monitoring: Controls metric recording

        Raises:
            HashComputationError: If the configured hash primitive is unavailable
        """
        self.config = config or DedupConfig()
        monitoring = monitoring or MonitoringConfig()

        self.normalizer = TextNormalizer()
        self.exact_index = ExactFingerprintIndex(
            algorithm=self.config.hash_algorithm,
            capacity=None if self.config.exact_index_unbounded else self.config.exact_index_capacity,
        )
        self.sketcher = LocalitySensitiveSketcher(
            width=self.config.sketch_width_bits,
            algorithm=self.config.hash_algorithm,
        )
        self.window = NearDuplicateWindow(
            capacity=self.config.window_capacity,
            band_count=self.config.band_count,
        )

        self.metrics = EngineMetrics(self.config.engine_name, enabled=monitoring.metrics_enabled)
        self._lock = threading.RLock()
        self._next_id = 1

        # Statistics
        self._total_checks = 0
        self._accepted = 0
        self._exact_hits = 0
        self._near_hits = 0
        self._invalid_inputs = 0
        self._evictions = 0
        self._start_time = time.time()

        self.metrics.set_sizes(0, 0)
        logger.info(
            "Initialized DeduplicationEngine",
            engine=self.config.engine_name,
            window_capacity=self.config.window_capacity,
            hamming_threshold=self.config.hamming_threshold,
            exact_index_unbounded=self.config.exact_index_unbounded,
            sketch_version=self.sketcher.version,
            band_count=self.config.band_count,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "DeduplicationEngine":
        """Build an engine from loaded application settings."""
        return cls(config=settings.dedup, monitoring=settings.monitoring)

    @property
    def sketch_version(self) -> str:
        return self.sketcher.version

    def add(self, text: str, metadata: Any = None) -> Decision:
        """
        Decide whether ``text`` is new, an exact duplicate or a near duplicate.

        Args:
            text: Raw extracted document text
            metadata: Opaque caller data echoed back on the decision

        Returns:
            Accepted, RejectedExact or RejectedNearDuplicate

        Raises:
            InvalidInputError: If text is not a string or is empty after
                normalization; nothing is mutated
        """
        start_time = time.perf_counter()

        if not isinstance(text, str):
            self._reject_invalid()
            raise InvalidInputError(f"Document text must be str, got {type(text).__name__}")

        with self._lock:
            normalized = self.normalizer.normalize(text)
            if not normalized:
                self._reject_invalid()
                raise InvalidInputError("Document text is empty after normalization")

            fingerprint = self.exact_index.fingerprint(normalized)
            self._total_checks += 1

            matched_id = self.exact_index.lookup(fingerprint)
            if matched_id is not None:
                self._exact_hits += 1
                decision: Decision = RejectedExact(matched_id=matched_id, metadata=metadata)
                self._finish(decision, start_time)
                return decision

            sketch = self.sketcher.sketch(normalized)

            match = self.window.scan(sketch, self.config.hamming_threshold)
            if match is not None:
                self._near_hits += 1
                decision = RejectedNearDuplicate(matched_id=match.doc_id, distance=match.distance, metadata=metadata)
                self._finish(decision, start_time)
                return decision

            doc_id = self._next_id
            self._next_id += 1
            self.exact_index.insert(fingerprint, doc_id)
            evicted = self.window.insert(doc_id, sketch)

            self._accepted += 1
            self._evictions += len(evicted)
            self.metrics.record_evictions(len(evicted))
            self.metrics.set_sizes(len(self.exact_index), len(self.window))

            decision = Accepted(doc_id=doc_id, metadata=metadata)
            self._finish(decision, start_time)
            return decision

    def _finish(self, decision: Decision, start_time: float) -> None:
        duration = time.perf_counter() - start_time
        self.metrics.record_decision(decision.kind.value, duration)
        logger.debug(
            "Deduplication decision",
            engine=self.config.engine_name,
            outcome=decision.kind.value,
            doc_id=getattr(decision, "doc_id", None),
            matched_id=getattr(decision, "matched_id", None),
            distance=getattr(decision, "distance", None),
            duration_ms=duration * 1000,
        )

    def _reject_invalid(self) -> None:
        with self._lock:
            self._invalid_inputs += 1
        self.metrics.record_invalid_input()

    def add_batch(self, documents: Iterable[Tuple[str, Any]]) -> List[Decision]:
        """
        Decide on several documents in order.

        Each document is committed independently; an ``InvalidInputError``
        stops the batch and propagates, leaving earlier documents committed.

        Args:
            documents: Iterable of (text, metadata) tuples

        Returns:
            One decision per document
        """
        return [self.add(text, metadata) for text, metadata in documents]

    def size(self) -> EngineSize:
        """Return (exact_count, window_count)."""
        with self._lock:
            return EngineSize(exact_count=len(self.exact_index), window_count=len(self.window))

    def clear(self) -> None:
        """
        Reset both indices to empty.

        The id counter is not rewound, so ids stay unique for the engine's
        lifetime.
        """
        with self._lock:
            self.exact_index.clear()
            self.window.clear()
            self.metrics.set_sizes(0, 0)
        logger.info("Cleared deduplication indices", engine=self.config.engine_name)

    def get_stats(self) -> Dict[str, Any]:
        """Get comprehensive deduplication statistics."""
        with self._lock:
            uptime = time.time() - self._start_time
            checks = max(1, self._total_checks)
            return {
                "engine": self.config.engine_name,
                "total_checks": self._total_checks,
                "accepted": self._accepted,
                "exact_hits": self._exact_hits,
                "near_hits": self._near_hits,
                "invalid_inputs": self._invalid_inputs,
                "evictions": self._evictions,
                "exact_hit_rate": self._exact_hits / checks,
                "near_hit_rate": self._near_hits / checks,
                "overall_duplicate_rate": (self._exact_hits + self._near_hits) / checks,
                "uptime_seconds": uptime,
                "sketch_version": self.sketcher.version,
                "exact_index_stats": self.exact_index.get_stats(),
                "window_stats": self.window.get_stats(),
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self.window)
