"""Quotation anchoring engine: pure functions over an ordered leaf list."""

from quoteanchor.engine.config import AnchorConfig, load_config
from quoteanchor.engine.matcher import (
    DEFAULT_MIN_LENGTH,
    DEFAULT_PREFIX_CHARS,
    find_in_index,
    prepare_quotation,
)
from quoteanchor.engine.mutator import apply_highlights, group_spans_by_leaf, split_leaf
from quoteanchor.engine.normalization import (
    build_document_text,
    canonicalize,
    leaves_from_pairs,
    normalize_for_matching,
)
from quoteanchor.engine.overlap import ClaimLedger, OverlapPolicy
from quoteanchor.engine.pipeline import AnchorResult, anchor_quotations
from quoteanchor.engine.range_mapper import distribute_range, match_to_raw_range
from quoteanchor.engine.types import (
    DocumentText,
    Fragment,
    HighlightSpan,
    LeafOrderError,
    LeafSegment,
    MatchKind,
    MatchResult,
    NormalizedIndex,
    OutcomeStatus,
    Quotation,
    QuotationOutcome,
)

__all__ = [
    "DEFAULT_MIN_LENGTH",
    "DEFAULT_PREFIX_CHARS",
    "AnchorConfig",
    "AnchorResult",
    "ClaimLedger",
    "DocumentText",
    "Fragment",
    "HighlightSpan",
    "LeafOrderError",
    "LeafSegment",
    "MatchKind",
    "MatchResult",
    "NormalizedIndex",
    "OutcomeStatus",
    "OverlapPolicy",
    "Quotation",
    "QuotationOutcome",
    "anchor_quotations",
    "apply_highlights",
    "build_document_text",
    "canonicalize",
    "distribute_range",
    "find_in_index",
    "group_spans_by_leaf",
    "leaves_from_pairs",
    "load_config",
    "match_to_raw_range",
    "normalize_for_matching",
    "prepare_quotation",
    "split_leaf",
]
