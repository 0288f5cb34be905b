"""Distribute a raw document range across the leaves it overlaps."""

from __future__ import annotations

from bisect import bisect_right

from quoteanchor.engine.types import (
    DocumentText,
    HighlightSpan,
    MatchKind,
    MatchResult,
    NormalizedIndex,
    Quotation,
)


def match_to_raw_range(index: NormalizedIndex, match: MatchResult) -> tuple[int, int]:
    """Raw ``[start, end)`` behind a match's canonical range."""
    return index.raw_range(match.norm_start, match.norm_end)


def distribute_range(
    document: DocumentText,
    raw_start: int,
    raw_end: int,
    *,
    quotation: Quotation,
    kind: MatchKind = "exact",
    quotation_index: int = -1,
) -> list[HighlightSpan]:
    """Split a raw range into leaf-local spans, in document order.

    The first candidate leaf is found by binary search over the leaf start
    table, then leaves are walked until one starts at or past *raw_end*.
    An empty range yields no spans.
    """
    raw_start = max(0, raw_start)
    raw_end = min(len(document), raw_end)
    if raw_start >= raw_end or not document.leaves:
        return []

    spans: list[HighlightSpan] = []
    i = max(0, bisect_right(document.leaf_starts, raw_start) - 1)
    while i < len(document.leaves):
        leaf_start, leaf_end = document.leaf_bounds(i)
        if leaf_start >= raw_end:
            break
        overlap_start = max(leaf_start, raw_start)
        overlap_end = min(leaf_end, raw_end)
        if overlap_start < overlap_end:
            leaf = document.leaves[i]
            spans.append(HighlightSpan(
                leaf_id=leaf.leaf_id,
                local_start=overlap_start - leaf_start,
                local_end=overlap_end - leaf_start,
                leaf_length=len(leaf.text),
                category=quotation.category,
                explanation=quotation.explanation,
                kind=kind,
                quotation_index=quotation_index,
            ))
        i += 1
    return spans
