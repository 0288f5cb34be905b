"""Overlap resolution between quotations claiming the same raw text.

Quotations are resolved in caller priority order. An earlier quotation keeps
everything it claimed. Under ``clip`` a later one keeps the unclaimed
remainder of its range, possibly in several pieces, and is dropped when
nothing remains. Under ``first-wins`` any overlap drops it.
"""
from __future__ import annotations

from bisect import bisect_left
from typing import Literal, TypeAlias

OverlapPolicy: TypeAlias = Literal["clip", "first-wins"]

OVERLAP_POLICIES: tuple[str, ...] = ("clip", "first-wins")


class ClaimLedger:
    """Disjoint raw ranges already claimed during one pass."""

    def __init__(self) -> None:
        self._starts: list[int] = []
        self._ranges: list[tuple[int, int]] = []

    def __len__(self) -> int:
        return len(self._ranges)

    @property
    def ranges(self) -> tuple[tuple[int, int], ...]:
        return tuple(self._ranges)

    def _overlapping(self, start: int, end: int) -> list[tuple[int, int]]:
        # Claimed ranges are disjoint and sorted, so at most one range that
        # starts before *start* can reach into it.
        i = max(0, bisect_left(self._starts, start) - 1)
        hits: list[tuple[int, int]] = []
        while i < len(self._ranges):
            c_start, c_end = self._ranges[i]
            if c_start >= end:
                break
            if c_end > start:
                hits.append((c_start, c_end))
            i += 1
        return hits

    def unclaimed(self, start: int, end: int) -> list[tuple[int, int]]:
        """Pieces of ``[start, end)`` no earlier claim covers."""
        if start >= end:
            return []
        pieces: list[tuple[int, int]] = []
        cursor = start
        for c_start, c_end in self._overlapping(start, end):
            if c_start > cursor:
                pieces.append((cursor, c_start))
            cursor = max(cursor, c_end)
        if cursor < end:
            pieces.append((cursor, end))
        return pieces

    def claim(self, start: int, end: int) -> None:
        if start >= end:
            return
        if self._overlapping(start, end):
            raise ValueError(f"range [{start}, {end}) is already partly claimed")
        pos = bisect_left(self._starts, start)
        self._starts.insert(pos, start)
        self._ranges.insert(pos, (start, end))

    def resolve(
        self,
        start: int,
        end: int,
        policy: OverlapPolicy = "clip",
    ) -> list[tuple[int, int]]:
        """Claim what *policy* allows of ``[start, end)`` and return it.

        An empty list means the quotation lost the whole range.
        """
        pieces = self.unclaimed(start, end)
        if policy == "first-wins" and pieces != [(start, end)]:
            return []
        for piece_start, piece_end in pieces:
            self.claim(piece_start, piece_end)
        return pieces

