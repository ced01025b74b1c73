"""
Streaming deduplication for document collection pipelines.

Two layers:
1. Exact layer: normalized text -> cryptographic fingerprint -> in-memory index
2. Near layer: SimHash sketch -> bounded FIFO window scanned by Hamming distance

Key features:
- One decision per document (Accepted / RejectedExact / RejectedNearDuplicate)
- Bounded memory for sketches; eviction drops matching capability
- Rejections never mutate engine state
- Thread-safe check-then-insert per engine instance
"""

from .engine import DeduplicationEngine
from .errors import DedupError, HashComputationError, InvalidInputError
from .fingerprint import ExactFingerprintIndex, compute_fingerprint
from .normalizer import TextNormalizer, normalize
from .sketch import LocalitySensitiveSketcher, Sketch, hamming_distance
from .window import NearDuplicateWindow

__all__ = [
    "DeduplicationEngine",
    "DedupError",
    "HashComputationError",
    "InvalidInputError",
    "ExactFingerprintIndex",
    "compute_fingerprint",
    "TextNormalizer",
    "normalize",
    "LocalitySensitiveSketcher",
    "Sketch",
    "hamming_distance",
    "NearDuplicateWindow",
]
