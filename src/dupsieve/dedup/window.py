"""
Bounded FIFO window of recently accepted sketches.

Implements the near-duplicate layer of the deduplication engine:
- Holds at most ``capacity`` (id, sketch) pairs; inserting past capacity
  evicts the oldest entry, so memory stays bounded
- ``scan`` returns the closest retained sketch within a Hamming threshold
- Optional banded candidate index: with ``band_count > threshold`` any
  sketch within the threshold shares at least one identical band
  (pigeonhole), so banded scans return exactly what a linear scan would;
  wider thresholds fall back to the linear scan
"""

from collections import OrderedDict
from typing import Dict, Iterator, List, Optional, Set, Tuple

import structlog

from ..protocols import NearDuplicateMatch
from .sketch import Sketch, hamming_distance

logger = structlog.get_logger(__name__)


class NearDuplicateWindow:
    """
    FIFO store of the most recent sketches answering threshold queries.

    Scans are O(window size) without banding. Ties on distance resolve to
    the oldest retained entry.
    """

    def __init__(self, capacity: int = 5000, band_count: Optional[int] = None):
        """
        Initialize the window.

        Args:
            capacity: Max sketches retained
            band_count: Number of bands for candidate lookup, or None for
                a linear scan
        """
        if capacity < 1:
            raise ValueError("capacity must be positive")
        if band_count is not None and band_count < 1:
            raise ValueError("band_count must be positive or None")

        self.capacity = capacity
        self.band_count = band_count

        self._entries: "OrderedDict[int, Sketch]" = OrderedDict()
        self._order: Dict[int, int] = {}
        self._next_seq = 0
        self._buckets: List[Dict[int, Set[int]]] = [dict() for _ in range(band_count or 0)]

        self._evictions = 0
        self._scans = 0
        self._comparisons = 0

    def scan(self, sketch: Sketch, threshold: int) -> Optional[NearDuplicateMatch]:
        """
        Find the closest retained sketch with distance <= ``threshold``.

        Args:
            sketch: Candidate sketch
            threshold: Max Hamming distance for a match

        Returns:
            NearDuplicateMatch(doc_id, distance), or None
        """
        if threshold < 0:
            raise ValueError("threshold must be non-negative")

        self._scans += 1
        best: Optional[NearDuplicateMatch] = None

        for doc_id, retained in self._candidates(sketch, threshold):
            self._comparisons += 1
            distance = hamming_distance(sketch, retained)
            if distance > threshold:
                continue
            if best is None or distance < best.distance:
                best = NearDuplicateMatch(doc_id=doc_id, distance=distance)
                if distance == 0:
                    break

        return best

    def _candidates(self, sketch: Sketch, threshold: int) -> Iterator[Tuple[int, Sketch]]:
        """Yield retained entries worth comparing, oldest first."""
        # Bands only guarantee a shared bucket while threshold < band_count
        if not self.band_count or threshold >= self.band_count:
            yield from self._entries.items()
            return

        if sketch.width != self._width():
            # Width mismatch is reported by hamming_distance
            yield from self._entries.items()
            return

        ids: Set[int] = set()
        for band, value in enumerate(sketch.bands(self.band_count)):
            ids.update(self._buckets[band].get(value, ()))

        for doc_id in sorted(ids, key=self._order.__getitem__):
            yield doc_id, self._entries[doc_id]

    def _width(self) -> Optional[int]:
        for retained in self._entries.values():
            return retained.width
        return None

    def insert(self, doc_id: int, sketch: Sketch) -> List[int]:
        """
        Append ``(doc_id, sketch)``, evicting the oldest entries past capacity.

        Returns:
            Ids evicted by this insert (oldest first)
        """
        if doc_id in self._entries:
            raise ValueError(f"Document id {doc_id} is already retained")

        width = self._width()
        if width is not None and width != sketch.width:
            raise ValueError(f"Sketch width {sketch.width} does not match window width {width}")

        self._entries[doc_id] = sketch
        self._order[doc_id] = self._next_seq
        self._next_seq += 1
        if self.band_count:
            for band, value in enumerate(sketch.bands(self.band_count)):
                self._buckets[band].setdefault(value, set()).add(doc_id)

        evicted = []
        while len(self._entries) > self.capacity:
            evicted.append(self._evict_oldest())
        return evicted

    def _evict_oldest(self) -> int:
        doc_id, sketch = self._entries.popitem(last=False)
        del self._order[doc_id]
        if self.band_count:
            for band, value in enumerate(sketch.bands(self.band_count)):
                bucket = self._buckets[band][value]
                bucket.discard(doc_id)
                if not bucket:
                    del self._buckets[band][value]

        self._evictions += 1
        logger.debug("Evicted sketch from window", doc_id=doc_id)
        return doc_id

    def clear(self) -> None:
        self._entries.clear()
        self._order.clear()
        for buckets in self._buckets:
            buckets.clear()

    def get(self, doc_id: int) -> Optional[Sketch]:
        return self._entries.get(doc_id)

    def get_stats(self) -> dict:
        """Get window statistics."""
        return {
            "retained": len(self._entries),
            "capacity": self.capacity,
            "band_count": self.band_count,
            "evictions": self._evictions,
            "scans": self._scans,
            "avg_comparisons_per_scan": self._comparisons / max(1, self._scans),
        }

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)
