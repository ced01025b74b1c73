"""
Unit tests for the exact fingerprint index.
"""

import hashlib

import pytest

from dupsieve.config import HashAlgorithm
from dupsieve.dedup.errors import HashComputationError
from dupsieve.dedup.fingerprint import ExactFingerprintIndex, check_hash_algorithm, compute_fingerprint


class TestFingerprint:
    """Test fingerprint computation."""

    def test_sha256_by_default(self):
        expected = hashlib.sha256("the quick brown fox".encode("utf-8")).hexdigest()

        assert compute_fingerprint("the quick brown fox") == expected

    def test_deterministic(self):
        assert compute_fingerprint("same text") == compute_fingerprint("same text")

    def test_different_text_different_fingerprint(self):
        assert compute_fingerprint("text a") != compute_fingerprint("text b")

    @pytest.mark.parametrize("algorithm", list(HashAlgorithm))
    def test_all_pinned_algorithms_available(self, algorithm):
        bits = check_hash_algorithm(algorithm)

        assert bits >= 256
        assert len(compute_fingerprint("x", algorithm)) == bits // 4

    def test_unavailable_algorithm_raises(self, monkeypatch):
        def broken_new(name, *args, **kwargs):
            raise ValueError(f"unsupported hash type {name}")

        monkeypatch.setattr(hashlib, "new", broken_new)

        with pytest.raises(HashComputationError):
            check_hash_algorithm(HashAlgorithm.SHA256)

        with pytest.raises(HashComputationError):
            ExactFingerprintIndex()


class TestExactFingerprintIndex:
    """Test lookup/insert semantics."""

    def test_lookup_miss_then_hit(self):
        index = ExactFingerprintIndex()
        fp = index.fingerprint("hello world")

        assert index.lookup(fp) is None

        index.insert(fp, 7)

        assert index.lookup(fp) == 7
        assert fp in index
        assert len(index) == 1

    def test_unbounded_keeps_everything(self):
        index = ExactFingerprintIndex()
        for i in range(1000):
            index.insert(index.fingerprint(f"doc {i}"), i)

        assert len(index) == 1000
        assert index.lookup(index.fingerprint("doc 0")) == 0

    def test_bounded_evicts_oldest(self):
        index = ExactFingerprintIndex(capacity=3)
        fps = [index.fingerprint(f"doc {i}") for i in range(4)]
        for i, fp in enumerate(fps):
            index.insert(fp, i)

        assert len(index) == 3
        assert index.lookup(fps[0]) is None
        assert [index.lookup(fp) for fp in fps[1:]] == [1, 2, 3]
        assert index.get_stats()["evictions"] == 1

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            ExactFingerprintIndex(capacity=0)

    def test_clear(self):
        index = ExactFingerprintIndex()
        fp = index.fingerprint("hello")
        index.insert(fp, 1)

        index.clear()

        assert len(index) == 0
        assert index.lookup(fp) is None

    def test_stats(self):
        index = ExactFingerprintIndex(algorithm=HashAlgorithm.BLAKE2B)

        stats = index.get_stats()

        assert stats["algorithm"] == "blake2b"
        assert stats["capacity"] is None
        assert stats["fingerprints"] == 0
