"""HTML adapters around the anchoring engine.

Two sides of the same boundary:
- ``extract_leaves`` walks a parsed document and snapshots its visible text
  nodes as ordered leaves.
- ``apply_fragments`` writes the engine's fragment list back, replacing
  each marked text node with plain strings and marker ``<span>`` elements.

``highlight_html`` runs both around one anchoring pass.
"""
from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Sequence

from bs4 import BeautifulSoup
from bs4.element import (
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    ProcessingInstruction,
    Tag,
)

from quoteanchor.engine import (
    AnchorConfig,
    AnchorResult,
    Fragment,
    LeafSegment,
    Quotation,
    anchor_quotations,
)

MARKER_CLASS = "quoteanchor-highlight"
PANEL_CLASS = "quoteanchor-panel"
EXPLANATION_ATTR = "data-quoteanchor-explanation"
MATCH_ATTR = "data-quoteanchor-match"
OFFSETS_ATTR = "data-quoteanchor-offsets"

# ---------------------------------------------------------------------------
# Text-node selection
# ---------------------------------------------------------------------------

_SKIP_TAGS: frozenset[str] = frozenset(
    {"head", "title", "script", "style", "noscript", "template"}
)
_SKIP_CLASSES: frozenset[str] = frozenset({MARKER_CLASS, PANEL_CLASS})
_NON_CONTENT_STRINGS = (Comment, Declaration, Doctype, CData, ProcessingInstruction)


def _is_content_node(node: NavigableString) -> bool:
    if isinstance(node, _NON_CONTENT_STRINGS):
        return False
    for parent in node.parents:
        if parent.name in _SKIP_TAGS:
            return False
        classes = parent.get("class") or []
        if _SKIP_CLASSES.intersection(classes):
            return False
    return True


def extract_leaves(
    soup: BeautifulSoup,
) -> tuple[list[LeafSegment], dict[str, NavigableString]]:
    """Snapshot visible text nodes of *soup* in document order.

    Only the body is walked when the document has one. Head content,
    script/style-like containers, comments and anything already inside a
    marker or panel element are left out, so re-running on a marked page
    only sees the unmarked text.

    Returns:
        ``(leaves, nodes)`` where *nodes* maps each leaf id to its node.
    """
    leaves: list[LeafSegment] = []
    nodes: dict[str, NavigableString] = {}
    root = soup.body or soup
    for node in root.find_all(string=True):
        if not _is_content_node(node):
            continue
        leaf_id = f"t{len(leaves)}"
        leaves.append(LeafSegment(leaf_id=leaf_id, text=str(node), position=len(leaves)))
        nodes[leaf_id] = node
    return leaves, nodes


# ---------------------------------------------------------------------------
# Writing fragments back
# ---------------------------------------------------------------------------


def _class_slug(value: str) -> str:
    """``"Very High"`` -> ``"very-high"``; one token safe for a class list."""
    return re.sub(r"[^a-z0-9_-]+", "-", value.strip().lower()).strip("-")


def _marker_tag(soup: BeautifulSoup, fragment: Fragment) -> Tag:
    category = _class_slug(fragment.category or "") or "medium"
    tag = soup.new_tag("span")
    tag["class"] = [MARKER_CLASS, f"quoteanchor-{category}"]
    tag[EXPLANATION_ATTR] = fragment.explanation or ""
    tag[MATCH_ATTR] = fragment.kind or "exact"
    tag[OFFSETS_ATTR] = f"{fragment.local_start}:{fragment.local_end}"
    tag.string = fragment.text
    return tag


def apply_fragments(
    soup: BeautifulSoup,
    nodes: dict[str, NavigableString],
    fragments: Sequence[Fragment],
) -> int:
    """Replace every leaf node that received marks with its fragments.

    Leaves with no marked fragment are left as they are.

    Returns:
        Number of marker elements inserted.
    """
    by_leaf: dict[str, list[Fragment]] = defaultdict(list)
    for fragment in fragments:
        by_leaf[fragment.leaf_id].append(fragment)

    inserted = 0
    for leaf_id, leaf_fragments in by_leaf.items():
        if not any(f.marked for f in leaf_fragments):
            continue
        node = nodes.get(leaf_id)
        if node is None:
            raise KeyError(f"no text node for leaf {leaf_id!r}")
        replacements: list[NavigableString | Tag] = []
        for fragment in leaf_fragments:
            if fragment.marked:
                replacements.append(_marker_tag(soup, fragment))
                inserted += 1
            elif fragment.text:
                replacements.append(NavigableString(fragment.text))
        node.replace_with(*replacements)
    return inserted


def highlight_html(
    raw_html: str,
    quotations: Sequence[Quotation],
    *,
    config: AnchorConfig | None = None,
) -> tuple[str, AnchorResult]:
    """Anchor *quotations* onto an HTML document and return the marked HTML.

    Args:
        raw_html: Raw HTML string.
        quotations: Quotations in priority order.
        config: Anchoring configuration; defaults apply when omitted.

    Returns:
        Tuple of (marked_html, anchor_result).
    """
    soup = BeautifulSoup(raw_html or "", "html.parser")
    leaves, nodes = extract_leaves(soup)
    result = anchor_quotations(leaves, quotations, config=config)
    apply_fragments(soup, nodes, result.fragments)
    return str(soup), result
