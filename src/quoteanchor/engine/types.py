"""Core types for quotation anchoring: leaves, indexes, matches, spans."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, TypeAlias


MatchKind: TypeAlias = Literal["exact", "prefix-fallback"]
OutcomeStatus: TypeAlias = Literal["anchored", "clipped", "dropped", "unmatched", "rejected"]


class LeafOrderError(ValueError):
    """Supplied leaves are not contiguous or not in document order."""


@dataclass(frozen=True, slots=True)
class LeafSegment:
    """One text-bearing leaf of a rendered document."""

    leaf_id: str
    text: str
    position: int

    def __post_init__(self) -> None:
        if not self.leaf_id:
            raise ValueError("leaf_id cannot be empty")
        if self.position < 0:
            raise ValueError(f"position must be >= 0, got {self.position}")


@dataclass(frozen=True, slots=True)
class DocumentText:
    """Ordered leaves plus their raw offsets in the logical concatenation."""

    leaves: tuple[LeafSegment, ...]
    leaf_starts: tuple[int, ...]
    raw_text: str

    def __post_init__(self) -> None:
        if len(self.leaf_starts) != len(self.leaves):
            raise ValueError("leaf_starts length must equal number of leaves")
        if sum(len(leaf.text) for leaf in self.leaves) != len(self.raw_text):
            raise ValueError("leaf text lengths must sum to len(raw_text)")

    def leaf_bounds(self, index: int) -> tuple[int, int]:
        start = self.leaf_starts[index]
        return start, start + len(self.leaves[index].text)

    def __len__(self) -> int:
        return len(self.raw_text)


@dataclass(frozen=True, slots=True)
class NormalizedIndex:
    """Canonical matching text plus its reverse map to raw offsets.

    ``normalized_to_raw[k]`` is the raw offset of the character that
    produced canonical position ``k``. The final entry is the sentinel for
    the end of the canonical text and always equals ``len(raw_text)``.
    """

    raw_text: str
    normalized_text: str
    normalized_to_raw: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.normalized_to_raw) != len(self.normalized_text) + 1:
            raise ValueError(
                "normalized_to_raw length must equal len(normalized_text) + 1",
            )
        if self.normalized_to_raw[-1] != len(self.raw_text):
            raise ValueError("end sentinel must equal len(raw_text)")

    def raw_offset(self, pos: int) -> int:
        if not 0 <= pos <= len(self.normalized_text):
            raise IndexError(f"canonical position out of range: {pos}")
        return self.normalized_to_raw[pos]

    def raw_range(self, start: int, end: int) -> tuple[int, int]:
        """Map a canonical ``[start, end)`` range to the raw range behind it.

        The raw end is one past the source of the last canonical character,
        so a match never swallows the whitespace run that follows it.
        """
        if end <= start:
            raw = self.raw_offset(start)
            return raw, raw
        return self.raw_offset(start), self.raw_offset(end - 1) + 1


@dataclass(frozen=True, slots=True)
class Quotation:
    """Externally supplied text to anchor, with its category and explanation."""

    text: str
    category: str
    explanation: str


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Where a quotation was found, in canonical and raw coordinates."""

    norm_start: int
    norm_end: int
    raw_start: int
    raw_end: int
    kind: MatchKind
    confidence: float

    def __post_init__(self) -> None:
        if self.norm_end < self.norm_start:
            raise ValueError("norm_end must be >= norm_start")
        if self.raw_end < self.raw_start:
            raise ValueError("raw_end must be >= raw_start")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError("confidence must be in [0.0, 1.0]")

    @property
    def is_fallback(self) -> bool:
        return self.kind == "prefix-fallback"


@dataclass(frozen=True, slots=True)
class HighlightSpan:
    """Leaf-local range to mark for one quotation."""

    leaf_id: str
    local_start: int
    local_end: int
    leaf_length: int
    category: str
    explanation: str
    kind: MatchKind = "exact"
    quotation_index: int = -1

    def __post_init__(self) -> None:
        if self.local_start < 0:
            raise ValueError(f"local_start must be >= 0, got {self.local_start}")
        if self.local_end <= self.local_start:
            raise ValueError(
                f"local_end must be > local_start, got {self.local_end} <= {self.local_start}",
            )
        if self.local_end > self.leaf_length:
            raise ValueError(
                f"local_end {self.local_end} exceeds leaf length {self.leaf_length}",
            )


@dataclass(frozen=True, slots=True)
class Fragment:
    """A piece of a leaf after marking. Marked pieces carry their quotation."""

    leaf_id: str
    text: str
    local_start: int
    local_end: int
    marked: bool = False
    category: str | None = None
    explanation: str | None = None
    kind: MatchKind | None = None
    quotation_index: int | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "leaf_id": self.leaf_id,
            "text": self.text,
            "local_start": self.local_start,
            "local_end": self.local_end,
            "marked": self.marked,
            "category": self.category,
            "explanation": self.explanation,
            "kind": self.kind,
            "quotation_index": self.quotation_index,
        }


@dataclass(frozen=True, slots=True)
class QuotationOutcome:
    """What happened to one quotation during a pass."""

    index: int
    quotation: Quotation
    status: OutcomeStatus
    match: MatchResult | None = None
    raw_ranges: tuple[tuple[int, int], ...] = ()
    span_count: int = 0

    @property
    def has_marker(self) -> bool:
        return self.status in ("anchored", "clipped")

    def as_dict(self) -> dict[str, Any]:
        match = self.match
        return {
            "index": self.index,
            "text": self.quotation.text,
            "category": self.quotation.category,
            "status": self.status,
            "kind": match.kind if match else None,
            "confidence": match.confidence if match else None,
            "raw_ranges": [list(r) for r in self.raw_ranges],
            "span_count": self.span_count,
        }
