"""
Exact Fingerprint Index.

Implements the exact layer of the deduplication engine:
- Cryptographic digest (SHA-256 by default) of normalized text
- In-memory hash map from fingerprint to accepted document id
- Unbounded by default; optionally capped with FIFO eviction
"""

import hashlib
from collections import OrderedDict
from typing import Optional

import structlog

from ..config import HashAlgorithm
from .errors import HashComputationError

logger = structlog.get_logger(__name__)


def check_hash_algorithm(algorithm: HashAlgorithm) -> int:
    """
    Verify the hash primitive is usable in this interpreter.

    Returns:
        Digest size in bits

    Raises:
        HashComputationError: If hashlib cannot provide the algorithm
    """
    name = HashAlgorithm(algorithm).value
    try:
        probe = hashlib.new(name)
        probe.update(b"dupsieve")
        probe.digest()
    except (ValueError, TypeError) as e:
        raise HashComputationError(f"Hash algorithm {name!r} is unavailable: {e}") from e
    return probe.digest_size * 8


def compute_fingerprint(normalized_text: str, algorithm: HashAlgorithm = HashAlgorithm.SHA256) -> str:
    """
    Compute the fingerprint (hex digest) of already-normalized text.

    Args:
        normalized_text: Output of ``normalize``
        algorithm: hashlib algorithm

    Returns:
        Hex-encoded digest
    """
    return hashlib.new(HashAlgorithm(algorithm).value, normalized_text.encode("utf-8")).hexdigest()


class ExactFingerprintIndex:
    """
    Fingerprint -> document id map.

    No false negatives for bit-identical normalized text while the
    fingerprint is retained. With ``capacity=None`` nothing is ever evicted.
    """

    def __init__(self, algorithm: HashAlgorithm = HashAlgorithm.SHA256, capacity: Optional[int] = None):
        """
        Initialize the index.

        Args:
            algorithm: hashlib algorithm used by ``fingerprint``
            capacity: Max fingerprints retained, or None for unbounded

        Raises:
            HashComputationError: If the algorithm is unavailable
            ValueError: If capacity is not positive
        """
        if capacity is not None and capacity < 1:
            raise ValueError("capacity must be positive or None")

        self.algorithm = HashAlgorithm(algorithm)
        self.digest_bits = check_hash_algorithm(self.algorithm)
        self.capacity = capacity

        self._ids: "OrderedDict[str, int]" = OrderedDict()
        self._evictions = 0

    def fingerprint(self, normalized_text: str) -> str:
        return compute_fingerprint(normalized_text, self.algorithm)

    def lookup(self, fp: str) -> Optional[int]:
        """Return the id registered for ``fp``, if any."""
        return self._ids.get(fp)

    def insert(self, fp: str, doc_id: int) -> None:
        """
        Register ``fp`` for ``doc_id``.

        Re-inserting an existing fingerprint keeps its original position and
        overwrites the id.
        """
        self._ids[fp] = doc_id

        if self.capacity is not None:
            while len(self._ids) > self.capacity:
                evicted_fp, evicted_id = self._ids.popitem(last=False)
                self._evictions += 1
                logger.debug("Evicted fingerprint", doc_id=evicted_id, fingerprint=evicted_fp[:16])

    def clear(self) -> None:
        self._ids.clear()

    def get_stats(self) -> dict:
        return {
            "fingerprints": len(self._ids),
            "capacity": self.capacity,
            "evictions": self._evictions,
            "algorithm": self.algorithm.value,
        }

    def __contains__(self, fp: object) -> bool:
        return fp in self._ids

    def __len__(self) -> int:
        return len(self._ids)
