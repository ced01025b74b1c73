"""
SimHash sketches for near-duplicate detection.

Each token is hashed to a fixed-width integer; every bit position keeps a
signed accumulator (+1 when the token hash has the bit set, -1 otherwise).
The sketch bit is 1 only when its accumulator is strictly positive, so a
tie (accumulator == 0) always yields 0.

Documents sharing most of their tokens end up a few bits apart; unrelated
documents differ in roughly half of the bits.

Sketches are only comparable when tokenizer, hash algorithm and width all
match; ``LocalitySensitiveSketcher.version`` names that combination.
"""

import hashlib
from collections import Counter
from dataclasses import dataclass
from typing import List

from ..config import HashAlgorithm
from .fingerprint import check_hash_algorithm

SKETCH_ALGORITHM = "simhash-v1"


@dataclass(frozen=True)
class Sketch:
    """Immutable fixed-width bit vector."""

    value: int
    width: int = 64

    def __post_init__(self) -> None:
        if self.width < 1:
            raise ValueError("Sketch width must be positive")
        if not 0 <= self.value < (1 << self.width):
            raise ValueError(f"Sketch value does not fit in {self.width} bits")

    def distance(self, other: "Sketch") -> int:
        return hamming_distance(self, other)

    def bands(self, count: int) -> List[int]:
        """
        Split the sketch into ``count`` contiguous bit bands, low bits first.

        Band widths differ by at most one bit.
        """
        if not 1 <= count <= self.width:
            raise ValueError(f"band count must be between 1 and {self.width}")

        base, extra = divmod(self.width, count)
        values = []
        offset = 0
        for i in range(count):
            size = base + (1 if i < extra else 0)
            values.append((self.value >> offset) & ((1 << size) - 1))
            offset += size
        return values

    def __str__(self) -> str:
        return format(self.value, f"0{(self.width + 3) // 4}x")


def hamming_distance(a: Sketch, b: Sketch) -> int:
    """
    Count differing bit positions between two sketches of equal width.

    Raises:
        ValueError: If the widths differ
    """
    if a.width != b.width:
        raise ValueError(f"Cannot compare sketches of width {a.width} and {b.width}")
    return (a.value ^ b.value).bit_count()


class LocalitySensitiveSketcher:
    """
    SimHash sketcher over whitespace-delimited tokens.

    Token hash: the first ``width // 8`` bytes (big-endian) of the configured
    hashlib digest of the UTF-8 encoded token.
    """

    def __init__(self, width: int = 64, algorithm: HashAlgorithm = HashAlgorithm.SHA256):
        if width < 8 or width % 8 != 0:
            raise ValueError("Sketch width must be a positive multiple of 8")

        self.algorithm = HashAlgorithm(algorithm)
        digest_bits = check_hash_algorithm(self.algorithm)
        if width > digest_bits:
            raise ValueError(f"Sketch width {width} exceeds {self.algorithm.value} digest size ({digest_bits} bits)")

        self.width = width
        self._width_bytes = width // 8

    @property
    def version(self) -> str:
        return f"{SKETCH_ALGORITHM}/{self.algorithm.value}/{self.width}"

    def token_hash(self, token: str) -> int:
        digest = hashlib.new(self.algorithm.value, token.encode("utf-8")).digest()
        return int.from_bytes(digest[: self._width_bytes], "big")

    def sketch(self, normalized_text: str) -> Sketch:
        """
        Build the sketch of already-normalized text.

        Args:
            normalized_text: Output of ``normalize``

        Returns:
            Sketch of ``self.width`` bits (all zero for text without tokens)
        """
        accumulators = [0] * self.width

        # Repeated tokens contribute once per occurrence
        for token, weight in Counter(normalized_text.split()).items():
            h = self.token_hash(token)
            for i in range(self.width):
                if (h >> i) & 1:
                    accumulators[i] += weight
                else:
                    accumulators[i] -= weight

        value = 0
        for i, acc in enumerate(accumulators):
            if acc > 0:
                value |= 1 << i
        return Sketch(value=value, width=self.width)
