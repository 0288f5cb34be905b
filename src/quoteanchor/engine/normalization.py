"""Document snapshot construction and match-only text normalization."""

from __future__ import annotations

from collections.abc import Iterable

from quoteanchor.engine.types import (
    DocumentText,
    LeafOrderError,
    LeafSegment,
    NormalizedIndex,
)


def leaves_from_pairs(pairs: Iterable[tuple[str, str]]) -> list[LeafSegment]:
    """Build leaves from ordered ``(leaf_id, text)`` pairs."""
    return [
        LeafSegment(leaf_id=leaf_id, text=text, position=i)
        for i, (leaf_id, text) in enumerate(pairs)
    ]


def build_document_text(leaves: Iterable[LeafSegment]) -> DocumentText:
    """Validate leaf order and build the cumulative-offset table.

    Raises:
        LeafOrderError: positions are not exactly 0..n-1 in list order, or
            a leaf id appears twice.
    """
    ordered = tuple(leaves)
    seen: set[str] = set()
    starts: list[int] = []
    offset = 0
    for i, leaf in enumerate(ordered):
        if leaf.position != i:
            raise LeafOrderError(
                f"leaf {leaf.leaf_id!r} has position {leaf.position}, expected {i}",
            )
        if leaf.leaf_id in seen:
            raise LeafOrderError(f"duplicate leaf id {leaf.leaf_id!r}")
        seen.add(leaf.leaf_id)
        starts.append(offset)
        offset += len(leaf.text)

    return DocumentText(
        leaves=ordered,
        leaf_starts=tuple(starts),
        raw_text="".join(leaf.text for leaf in ordered),
    )


def _fold(ch: str) -> str:
    low = ch.lower()
    # Multi-char lower forms (e.g. U+0130) would break the 1:1 offset map.
    return low if len(low) == 1 else ch


def normalize_for_matching(text: str) -> NormalizedIndex:
    """Collapse whitespace runs and lower-case, keeping a reverse offset map.

    Every maximal whitespace run becomes one space mapped to the start of
    the run, including a run at the very start of the text. Nothing is
    trimmed, so canonical positions stay aligned with the whole raw text.
    """
    raw = text or ""
    norm_chars: list[str] = []
    norm_to_raw: list[int] = []

    i = 0
    n = len(raw)
    while i < n:
        ch = raw[i]
        if ch.isspace():
            norm_chars.append(" ")
            norm_to_raw.append(i)
            i += 1
            while i < n and raw[i].isspace():
                i += 1
            continue
        norm_chars.append(_fold(ch))
        norm_to_raw.append(i)
        i += 1

    norm_to_raw.append(n)
    return NormalizedIndex(
        raw_text=raw,
        normalized_text="".join(norm_chars),
        normalized_to_raw=tuple(norm_to_raw),
    )


def canonicalize(text: str) -> str:
    """Canonical form of *text*, without the offset map."""
    return normalize_for_matching(text).normalized_text
