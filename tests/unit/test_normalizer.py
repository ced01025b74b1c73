"""
Unit tests for text normalization.

Normalization is what makes the exact layer tolerant to whitespace and case
differences between copies of the same document.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from dupsieve.dedup.normalizer import TextNormalizer, normalize


class TestTextNormalizer:
    """Test the TextNormalizer class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.normalizer = TextNormalizer()

    def test_whitespace_collapse(self):
        """Runs of spaces, tabs and newlines become a single space."""
        text = "Line breaks\n\nand    tabs\t\tshould   be\r\n normalized"

        assert self.normalizer.normalize(text) == "line breaks and tabs should be normalized"

    def test_trim_and_lowercase(self):
        assert self.normalizer.normalize("   The Quick Brown FOX.  ") == "the quick brown fox."

    def test_case_folding_beyond_ascii(self):
        assert self.normalizer.normalize("STRASSE") == self.normalizer.normalize("straße")

    @pytest.mark.parametrize("text", ["", "   ", "\n\t \r\n"])
    def test_empty_and_whitespace_only(self, text):
        """Normalization is total; blank input yields an empty string."""
        assert self.normalizer.normalize(text) == ""

    def test_equivalent_variants(self):
        a = self.normalizer.normalize("The quick brown fox jumps.")
        b = self.normalizer.normalize("the   quick  brown fox jumps.")

        assert a == b

    def test_punctuation_preserved(self):
        """Only whitespace and case are canonicalized."""
        assert self.normalizer.normalize("fox, jumps!") == "fox, jumps!"

    def test_stats(self):
        self.normalizer.normalize("a")
        self.normalizer.normalize("b")

        assert self.normalizer.get_stats()["processed_count"] == 2


def test_convenience_function():
    assert normalize("  Hello\tWorld ") == "hello world"


@given(st.text(alphabet="abcXYZ019 .\t\n"))
def test_normalization_is_idempotent(text):
    once = normalize(text)

    assert normalize(once) == once
    assert "  " not in once
    assert once == once.strip()


@given(st.lists(st.sampled_from(["fox", "Fox", "FOX", "jumps", "Jumps"]), min_size=1), st.sampled_from([" ", "  ", "\t", "\n"]))
def test_separator_choice_does_not_matter(words, separator):
    assert normalize(separator.join(words)) == normalize(" ".join(words))
