"""
Text normalization for deterministic hashing.

- Collapse runs of whitespace (spaces, tabs, newlines) to a single space
- Remove leading/trailing whitespace
- Case-fold

Identical input always yields identical output, which is what makes the
exact-match layer sound.
"""

import re


class TextNormalizer:
    """Canonicalizes raw document text before fingerprinting and sketching."""

    def __init__(self) -> None:
        self._whitespace_pattern = re.compile(r"\s+")
        self._processed_count = 0

    def normalize(self, text: str) -> str:
        """
        Normalize text for consistent hashing.

        Never fails on a ``str``; empty or whitespace-only input yields ``""``
        and is rejected upstream by the engine.

        Args:
            text: Raw extracted text

        Returns:
            Canonical text
        """
        self._processed_count += 1
        if not text:
            return ""

        normalized = self._whitespace_pattern.sub(" ", text).strip()

        # "STRASSE" and "straße" both fold to "strasse"
        return normalized.casefold()

    def get_stats(self) -> dict:
        """Get processing statistics."""
        return {"processed_count": self._processed_count}


def normalize(text: str) -> str:
    """
    Convenience function for text normalization.

    Args:
        text: Raw text

    Returns:
        Normalized text
    """
    return TextNormalizer().normalize(text)
