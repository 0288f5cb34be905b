"""One anchoring pass: normalize, match, resolve overlaps, map, mutate.

The pass is a pure function of the leaf snapshot and the quotation list.
Quotations that cannot be anchored are reported, never raised.
"""
from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from quoteanchor.engine.config import AnchorConfig
from quoteanchor.engine.matcher import find_in_index, prepare_quotation
from quoteanchor.engine.mutator import apply_highlights
from quoteanchor.engine.normalization import build_document_text, normalize_for_matching
from quoteanchor.engine.overlap import ClaimLedger
from quoteanchor.engine.range_mapper import distribute_range
from quoteanchor.engine.types import (
    DocumentText,
    Fragment,
    HighlightSpan,
    LeafSegment,
    NormalizedIndex,
    Quotation,
    QuotationOutcome,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AnchorResult:
    """Fragments plus one outcome per input quotation, in input order."""

    fragments: tuple[Fragment, ...]
    outcomes: tuple[QuotationOutcome, ...]

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def anchored(self) -> int:
        return sum(1 for o in self.outcomes if o.has_marker)

    @property
    def skipped(self) -> int:
        return self.total - self.anchored

    def status_counts(self) -> dict[str, int]:
        return dict(sorted(Counter(o.status for o in self.outcomes).items()))

    def unanchored(self) -> list[Quotation]:
        """Quotations with no in-document marker, for listing elsewhere."""
        return [o.quotation for o in self.outcomes if not o.has_marker]

    def marked_fragments(self) -> list[Fragment]:
        return [f for f in self.fragments if f.marked]

    def as_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "anchored": self.anchored,
            "skipped": self.skipped,
            "status_counts": self.status_counts(),
            "outcomes": [o.as_dict() for o in self.outcomes],
            "marked_fragments": [f.as_dict() for f in self.marked_fragments()],
        }


def anchor_quotations(
    leaves: Iterable[LeafSegment],
    quotations: Sequence[Quotation],
    *,
    config: AnchorConfig | None = None,
) -> AnchorResult:
    """Anchor *quotations*, in priority order, onto *leaves*.

    Raises:
        LeafOrderError: the leaf list is not contiguous and ordered. This is
            checked before any quotation is looked at.
    """
    config = config or AnchorConfig()
    document = build_document_text(leaves)
    index = normalize_for_matching(document.raw_text)
    ledger = ClaimLedger()

    outcomes: list[QuotationOutcome] = []
    spans: list[HighlightSpan] = []
    for i, quotation in enumerate(quotations):
        outcome, quote_spans = _anchor_one(
            i, quotation, document, index, ledger, config,
        )
        if not outcome.has_marker:
            log.debug("quotation %d %s: %.60r", i, outcome.status, quotation.text)
        outcomes.append(outcome)
        spans.extend(quote_spans)

    fragments = apply_highlights(document, spans, max_workers=config.max_workers)
    result = AnchorResult(fragments=tuple(fragments), outcomes=tuple(outcomes))
    log.info(
        "anchored %d/%d quotations (%d skipped) across %d leaves",
        result.anchored, result.total, result.skipped, len(document.leaves),
    )
    return result


def _anchor_one(
    i: int,
    quotation: Quotation,
    document: DocumentText,
    index: NormalizedIndex,
    ledger: ClaimLedger,
    config: AnchorConfig,
) -> tuple[QuotationOutcome, list[HighlightSpan]]:
    canonical = prepare_quotation(quotation.text, config.min_length)
    if canonical is None:
        return QuotationOutcome(i, quotation, "rejected"), []

    match = find_in_index(index, canonical, prefix_chars=config.prefix_chars)
    if match is None:
        return QuotationOutcome(i, quotation, "unmatched"), []

    pieces = ledger.resolve(match.raw_start, match.raw_end, config.overlap_policy)
    if not pieces:
        return QuotationOutcome(i, quotation, "dropped", match=match), []

    spans: list[HighlightSpan] = []
    for start, end in pieces:
        spans.extend(distribute_range(
            document, start, end,
            quotation=quotation, kind=match.kind, quotation_index=i,
        ))
    clipped = pieces != [(match.raw_start, match.raw_end)]
    return QuotationOutcome(
        index=i,
        quotation=quotation,
        status="clipped" if clipped else "anchored",
        match=match,
        raw_ranges=tuple(pieces),
        span_count=len(spans),
    ), spans
