"""
Synthetic documents with known deduplication outcomes.
"""

from typing import List


def make_document(topic: int, length: int = 40) -> str:
    """Document whose vocabulary is disjoint from every other topic's."""
    return " ".join(f"topic{topic}term{i}" for i in range(length))


def make_near_duplicate_pair(topic: int) -> List[str]:
    """
    Two documents that differ only in a trailing attribution word.

    The shared body has an odd number of distinct tokens, each repeated three
    times, so every accumulator is at least 3 away from zero; the two
    trailing single-weight tokens cannot flip any bit and the sketches are
    identical while the fingerprints differ.
    """
    body = " ".join(f"story{topic}word{i}" for i in range(21))
    repeated = " ".join([body] * 3)
    return [f"{repeated} via reuters", f"{repeated} via associated"]


COUNCIL_REPORT = (
    "the city council met on tuesday evening to debate the proposed budget for the coming fiscal year. "
    "members argued over funding for road repairs, public libraries and the new community health clinic "
    "planned for the east side. after nearly four hours of discussion the council voted seven to two in "
    "favor of the plan, which raises property taxes by a modest amount while cutting spending on "
    "consultants and office renovations. the mayor said the vote showed that residents can expect better "
    "services without a large increase in their monthly bills."
)


def make_synonym_pair() -> List[str]:
    """A 90-token news paragraph and the same paragraph with one verb swapped."""
    return [COUNCIL_REPORT, COUNCIL_REPORT.replace("to debate", "to discuss")]
