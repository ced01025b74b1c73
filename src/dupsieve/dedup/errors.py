"""
Exceptions raised by the deduplication core.
"""
from __future__ import annotations


class DedupError(Exception):
    """Base exception for deduplication errors."""
    pass


class InvalidInputError(DedupError, ValueError):
    """Raised when a document is empty or whitespace-only after normalization."""
    pass


class HashComputationError(DedupError):
    """Raised when the configured hash primitive cannot be used."""
    pass
