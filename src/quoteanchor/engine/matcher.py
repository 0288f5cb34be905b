"""Locate a quotation inside a document's canonical text.

Exact search first, then a bounded prefix of the quotation. Only the first
occurrence is ever reported.
"""
from __future__ import annotations

from quoteanchor.engine.normalization import canonicalize
from quoteanchor.engine.types import MatchResult, NormalizedIndex

DEFAULT_MIN_LENGTH = 10
DEFAULT_PREFIX_CHARS = 50


def prepare_quotation(text: str, min_length: int = DEFAULT_MIN_LENGTH) -> str | None:
    """Return the canonical quotation, or None when it is too short to try.

    Args:
        text: Quotation as supplied by the analysis step.
        min_length: Minimum length after trimming and whitespace collapse.

    Returns:
        Trimmed, whitespace-collapsed, lower-cased text, or None.
    """
    canonical = canonicalize(text).strip(" ")
    if len(canonical) < min_length:
        return None
    return canonical


def find_in_index(
    index: NormalizedIndex,
    canonical_quote: str,
    *,
    prefix_chars: int = DEFAULT_PREFIX_CHARS,
) -> MatchResult | None:
    """Search for a prepared quotation, falling back to its prefix.

    The fallback match ends where the prefix ends; it is never stretched to
    the full quotation length.

    Args:
        index: Normalized index of the whole document.
        canonical_quote: Output of :func:`prepare_quotation`.
        prefix_chars: Length cap for the fallback prefix.

    Returns:
        A MatchResult, or None when neither step finds anything.
    """
    if not canonical_quote:
        return None
    haystack = index.normalized_text

    pos = haystack.find(canonical_quote)
    if pos >= 0:
        return _result(index, pos, pos + len(canonical_quote), "exact", 1.0)

    prefix = canonical_quote[:min(prefix_chars, len(canonical_quote))]
    if not prefix or len(prefix) == len(canonical_quote):
        return None
    pos = haystack.find(prefix)
    if pos < 0:
        return None
    confidence = round(len(prefix) / len(canonical_quote), 4)
    return _result(index, pos, pos + len(prefix), "prefix-fallback", confidence)


def _result(
    index: NormalizedIndex,
    start: int,
    end: int,
    kind: str,
    confidence: float,
) -> MatchResult:
    raw_start, raw_end = index.raw_range(start, end)
    return MatchResult(
        norm_start=start,
        norm_end=end,
        raw_start=raw_start,
        raw_end=raw_end,
        kind=kind,  # type: ignore[arg-type]
        confidence=confidence,
    )
