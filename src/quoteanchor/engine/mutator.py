"""Split leaves into plain and marked fragments without touching their text."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor

from quoteanchor.engine.types import DocumentText, Fragment, HighlightSpan, LeafSegment


def group_spans_by_leaf(
    spans: Iterable[HighlightSpan],
) -> dict[str, list[HighlightSpan]]:
    """Group spans per leaf, sorted by local start, rejecting overlaps."""
    grouped: dict[str, list[HighlightSpan]] = defaultdict(list)
    for span in spans:
        grouped[span.leaf_id].append(span)
    for leaf_id, leaf_spans in grouped.items():
        leaf_spans.sort(key=lambda s: (s.local_start, s.local_end))
        for prev, cur in zip(leaf_spans, leaf_spans[1:]):
            if cur.local_start < prev.local_end:
                raise ValueError(
                    f"overlapping spans in leaf {leaf_id!r}: "
                    f"[{prev.local_start}, {prev.local_end}) and "
                    f"[{cur.local_start}, {cur.local_end})",
                )
    return dict(grouped)


def split_leaf(leaf: LeafSegment, spans: list[HighlightSpan]) -> list[Fragment]:
    """Split one leaf around its sorted, non-overlapping spans.

    Spans are applied from the last to the first, so the text still to be
    split is always a prefix of the original and earlier offsets hold.
    """
    if not spans:
        return [Fragment(leaf.leaf_id, leaf.text, 0, len(leaf.text))]

    current = leaf.text
    tail: list[Fragment] = []
    for span in reversed(spans):
        if span.local_end > len(current):
            raise ValueError(
                f"span end {span.local_end} exceeds leaf {leaf.leaf_id!r} "
                f"length {len(leaf.text)}",
            )
        after = current[span.local_end:]
        if after:
            tail.append(Fragment(
                leaf.leaf_id, after, span.local_end, span.local_end + len(after),
            ))
        tail.append(Fragment(
            leaf_id=leaf.leaf_id,
            text=current[span.local_start:span.local_end],
            local_start=span.local_start,
            local_end=span.local_end,
            marked=True,
            category=span.category,
            explanation=span.explanation,
            kind=span.kind,
            quotation_index=span.quotation_index,
        ))
        current = current[:span.local_start]
    if current:
        tail.append(Fragment(leaf.leaf_id, current, 0, len(current)))
    tail.reverse()
    return tail


def apply_highlights(
    document: DocumentText,
    spans: Iterable[HighlightSpan],
    *,
    max_workers: int | None = None,
) -> list[Fragment]:
    """Return the document's fragment list with *spans* marked.

    Leaves without spans come through as a single plain fragment. With
    ``max_workers > 1`` each leaf is one pool task; output stays in
    document order either way.
    """
    grouped = group_spans_by_leaf(spans)
    known = {leaf.leaf_id for leaf in document.leaves}
    unknown = sorted(set(grouped) - known)
    if unknown:
        raise ValueError(f"spans reference unknown leaves: {unknown}")

    def _split(leaf: LeafSegment) -> list[Fragment]:
        return split_leaf(leaf, grouped.get(leaf.leaf_id, []))

    if max_workers is not None and max_workers > 1 and len(grouped) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            per_leaf = list(pool.map(_split, document.leaves))
    else:
        per_leaf = [_split(leaf) for leaf in document.leaves]

    return [fragment for fragments in per_leaf for fragment in fragments]


def fragments_for_leaf(fragments: Iterable[Fragment], leaf_id: str) -> list[Fragment]:
    return [f for f in fragments if f.leaf_id == leaf_id]
