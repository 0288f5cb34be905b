"""Turn a contract-analysis payload into prioritized quotations.

The payload is the JSON object the analysis step returns. Two lists carry
quotable text:

- ``concernSnippets``: original snippets for each flagged concern, paired by
  index with ``concernExplanations`` (or ``potentialConcerns``).
- ``keyTerms``: clauses with an ``originalText`` and a ``riskLevel``.

Concerns come first, so they win overlaps against key terms.
"""
from __future__ import annotations

from typing import Any

from quoteanchor.engine import Quotation

CONCERN_CATEGORY = "concern"
DEFAULT_RISK = "medium"


def _list(payload: dict[str, Any], key: str) -> list[Any]:
    value = payload.get(key)
    return value if isinstance(value, list) else []


def _at(items: list[Any], i: int) -> str:
    if i < len(items) and isinstance(items[i], str) and items[i]:
        return items[i]
    return ""


def quotations_from_analysis(payload: dict[str, Any]) -> list[Quotation]:
    """Collect quotations from *payload* in priority order.

    Short snippets are kept; the anchoring pass rejects them itself so they
    still show up in its report.
    """
    quotations: list[Quotation] = []

    explanations = _list(payload, "concernExplanations")
    concerns = _list(payload, "potentialConcerns")
    for i, snippet in enumerate(_list(payload, "concernSnippets")):
        if not isinstance(snippet, str) or not snippet:
            continue
        explanation = (
            _at(explanations, i) or _at(concerns, i) or "Potential concern identified"
        )
        quotations.append(Quotation(snippet, CONCERN_CATEGORY, explanation))

    for term in _list(payload, "keyTerms"):
        if not isinstance(term, dict):
            continue
        original = term.get("originalText")
        if not isinstance(original, str) or not original:
            continue
        quotations.append(Quotation(
            text=original,
            category=str(term.get("riskLevel") or DEFAULT_RISK),
            explanation=str(term.get("explanation") or term.get("title") or "Key term"),
        ))
    return quotations


def summarize_analysis(payload: dict[str, Any], *, top_concerns: int = 3) -> dict[str, Any]:
    """Headline numbers shown next to a highlighted document."""
    terms = [t for t in _list(payload, "keyTerms") if isinstance(t, dict)]
    concerns = [c for c in _list(payload, "potentialConcerns") if isinstance(c, str)]
    return {
        "overall_risk": str(
            payload.get("overallRiskAssessment") or payload.get("overallRisk") or DEFAULT_RISK
        ),
        "high_risk_terms": sum(1 for t in terms if t.get("riskLevel") == "high"),
        "medium_risk_terms": sum(1 for t in terms if t.get("riskLevel") == "medium"),
        "concern_count": len(concerns),
        "top_concerns": concerns[:top_concerns],
        "more_concerns": max(0, len(concerns) - top_concerns),
    }


def category_label(category: str) -> str:
    """Display label for a marker category, e.g. ``HIGH RISK``."""
    if category == CONCERN_CATEGORY:
        return "CONCERN"
    return f"{category.upper()} RISK"
