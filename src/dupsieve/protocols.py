"""
Protocols and dataclasses shared by DupSieve and the pipelines that embed it.

The engine returns one ``Decision`` per submitted document:

- ``Accepted``: new content, registered under a fresh id
- ``RejectedExact``: identical (post-normalization) to an accepted document
- ``RejectedNearDuplicate``: sketch within the Hamming threshold of a
  recently accepted document

Duplicates are ordinary return values; only malformed input raises.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, NamedTuple, Protocol, Tuple, Union, runtime_checkable

# ============================================================================
# Enums and Constants
# ============================================================================


class DecisionKind(Enum):
    """Outcome of a single ``add`` call."""

    ACCEPTED = "accepted"
    EXACT = "exact"
    NEAR_DUPLICATE = "near_duplicate"


# ============================================================================
# Decisions
# ============================================================================


@dataclass(frozen=True)
class Accepted:
    """Document is new; its fingerprint and sketch were registered."""

    doc_id: int
    metadata: Any = field(default=None, compare=False)

    kind = DecisionKind.ACCEPTED

    @property
    def is_duplicate(self) -> bool:
        return False


@dataclass(frozen=True)
class RejectedExact:
    """Document normalizes to the same text as ``matched_id``."""

    matched_id: int
    metadata: Any = field(default=None, compare=False)

    kind = DecisionKind.EXACT

    @property
    def is_duplicate(self) -> bool:
        return True


@dataclass(frozen=True)
class RejectedNearDuplicate:
    """Document's sketch is ``distance`` bits away from ``matched_id``'s sketch."""

    matched_id: int
    distance: int
    metadata: Any = field(default=None, compare=False)

    kind = DecisionKind.NEAR_DUPLICATE

    @property
    def is_duplicate(self) -> bool:
        return True


Decision = Union[Accepted, RejectedExact, RejectedNearDuplicate]


class EngineSize(NamedTuple):
    """Occupancy of the two engine indices."""

    exact_count: int
    window_count: int


# ============================================================================
# Protocols
# ============================================================================


@runtime_checkable
class DeduplicatorProtocol(Protocol):
    """Contract an ingestion pipeline relies on."""

    def add(self, text: str, metadata: Any = None) -> Decision:
        """Decide on one document, registering it only if accepted."""
        ...

    def add_batch(self, documents: Iterable[Tuple[str, Any]]) -> List[Decision]:
        """Decide on several documents in submission order."""
        ...

    def size(self) -> EngineSize:
        """Return (exact_count, window_count)."""
        ...

    def clear(self) -> None:
        """Reset both indices."""
        ...


class NearDuplicateMatch(NamedTuple):
    """Closest retained sketch found by a window scan."""

    doc_id: int
    distance: int

