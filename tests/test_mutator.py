"""Tests for quoteanchor.engine.mutator module."""
from __future__ import annotations

import random

import pytest

from quoteanchor.engine.mutator import (
    apply_highlights,
    fragments_for_leaf,
    group_spans_by_leaf,
    split_leaf,
)
from quoteanchor.engine.normalization import build_document_text, leaves_from_pairs
from quoteanchor.engine.types import HighlightSpan, LeafSegment

_ALPHABET = "abcXYZ  \n\t.,é"


def _span(leaf: LeafSegment, start: int, end: int, tag: str = "high") -> HighlightSpan:
    return HighlightSpan(leaf.leaf_id, start, end, len(leaf.text), tag, f"why-{tag}")


def _random_case(seed: int) -> tuple[list[LeafSegment], list[HighlightSpan]]:
    rng = random.Random(seed)
    pairs = [
        (f"t{i}", "".join(rng.choice(_ALPHABET) for _ in range(rng.randint(0, 30))))
        for i in range(rng.randint(1, 8))
    ]
    leaves = leaves_from_pairs(pairs)
    spans: list[HighlightSpan] = []
    for leaf in leaves:
        if not leaf.text:
            continue
        k = min(len(leaf.text) + 1, rng.randint(0, 6))
        cuts = sorted(rng.sample(range(len(leaf.text) + 1), k=k))
        for start, end in zip(cuts[::2], cuts[1::2]):
            if start < end:
                spans.append(_span(leaf, start, end, tag=f"c{start}"))
    rng.shuffle(spans)
    return leaves, spans


class TestSplitLeaf:
    def test_no_spans_passes_through(self) -> None:
        leaf = LeafSegment("t0", "unchanged text", 0)
        fragments = split_leaf(leaf, [])
        assert len(fragments) == 1
        assert fragments[0].text == "unchanged text"
        assert not fragments[0].marked

    def test_middle_span(self) -> None:
        leaf = LeafSegment("t0", "The Publisher shall", 0)
        fragments = split_leaf(leaf, [_span(leaf, 4, 13)])
        assert [f.text for f in fragments] == ["The ", "Publisher", " shall"]
        assert [f.marked for f in fragments] == [False, True, False]
        assert fragments[1].category == "high"
        assert fragments[1].explanation == "why-high"
        assert (fragments[1].local_start, fragments[1].local_end) == (4, 13)

    def test_span_at_edges(self) -> None:
        leaf = LeafSegment("t0", "abcdef", 0)
        fragments = split_leaf(leaf, [_span(leaf, 0, 2), _span(leaf, 4, 6)])
        assert [(f.text, f.marked) for f in fragments] == [
            ("ab", True), ("cd", False), ("ef", True),
        ]

    def test_whole_leaf(self) -> None:
        leaf = LeafSegment("t0", "abc", 0)
        fragments = split_leaf(leaf, [_span(leaf, 0, 3)])
        assert [(f.text, f.marked) for f in fragments] == [("abc", True)]

    def test_adjacent_spans(self) -> None:
        leaf = LeafSegment("t0", "abcdef", 0)
        fragments = split_leaf(leaf, [_span(leaf, 0, 3, "x"), _span(leaf, 3, 6, "y")])
        assert [(f.text, f.category) for f in fragments] == [("abc", "x"), ("def", "y")]

    def test_fragment_offsets_follow_text(self) -> None:
        leaf = LeafSegment("t0", "0123456789", 0)
        fragments = split_leaf(leaf, [_span(leaf, 2, 4), _span(leaf, 6, 7)])
        for f in fragments:
            assert leaf.text[f.local_start:f.local_end] == f.text


class TestGroupSpans:
    def test_sorted_per_leaf(self) -> None:
        leaf = LeafSegment("t0", "abcdefgh", 0)
        grouped = group_spans_by_leaf([_span(leaf, 5, 6), _span(leaf, 0, 2)])
        assert [s.local_start for s in grouped["t0"]] == [0, 5]

    def test_overlap_rejected(self) -> None:
        leaf = LeafSegment("t0", "abcdefgh", 0)
        with pytest.raises(ValueError):
            group_spans_by_leaf([_span(leaf, 0, 4), _span(leaf, 3, 6)])


class TestApplyHighlights:
    def test_unknown_leaf_rejected(self) -> None:
        doc = build_document_text(leaves_from_pairs([("t0", "abc")]))
        stray = HighlightSpan("zz", 0, 1, 3, "high", "why")
        with pytest.raises(ValueError):
            apply_highlights(doc, [stray])

    def test_document_order_and_passthrough(self) -> None:
        leaves = leaves_from_pairs([("t0", "The "), ("t1", ""), ("t2", "Publisher shall")])
        doc = build_document_text(leaves)
        fragments = apply_highlights(doc, [_span(leaves[2], 0, 9)])
        assert [(f.leaf_id, f.text, f.marked) for f in fragments] == [
            ("t0", "The ", False),
            ("t1", "", False),
            ("t2", "Publisher", True),
            ("t2", " shall", False),
        ]

    @pytest.mark.parametrize("seed", range(40))
    def test_round_trip_property(self, seed: int) -> None:
        leaves, spans = _random_case(seed)
        doc = build_document_text(leaves)
        fragments = apply_highlights(doc, spans)
        for leaf in leaves:
            pieces = fragments_for_leaf(fragments, leaf.leaf_id)
            assert "".join(f.text for f in pieces) == leaf.text
        assert "".join(f.text for f in fragments) == doc.raw_text
        assert sum(1 for f in fragments if f.marked) == len(spans)
        for f in fragments:
            if f.marked:
                assert f.category == f"c{f.local_start}"

    @pytest.mark.parametrize("seed", range(5))
    def test_thread_pool_matches_serial(self, seed: int) -> None:
        leaves, spans = _random_case(seed)
        doc = build_document_text(leaves)
        assert apply_highlights(doc, spans, max_workers=4) == apply_highlights(doc, spans)
