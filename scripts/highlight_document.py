#!/usr/bin/env python3
"""Highlight analysis quotations inside an HTML document.

Reads an HTML page and the analysis payload produced for it, anchors every
concern snippet and key-term quotation onto the page text, and writes the
marked-up HTML. An optional JSON report lists what was anchored, clipped,
dropped, unmatched or rejected.

Usage:
    python3 scripts/highlight_document.py \
        --html contract.html --analysis analysis.json \
        --output contract.marked.html --report anchor_report.json -v
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from quoteanchor.analysis import quotations_from_analysis, summarize_analysis
from quoteanchor.engine import AnchorConfig, LeafOrderError, load_config
from quoteanchor.html_utils import highlight_html
from quoteanchor.io_utils import load_json, read_text, save_json

log = logging.getLogger("highlight_document")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Anchor analysis quotations onto an HTML document."
    )
    parser.add_argument("--html", required=True, type=Path, help="Input HTML file")
    parser.add_argument(
        "--analysis", required=True, type=Path, help="Analysis payload JSON"
    )
    parser.add_argument(
        "--output", required=True, type=Path, help="Where to write marked HTML"
    )
    parser.add_argument(
        "--report", type=Path, default=None, help="Optional JSON report path"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional JSON anchoring config (min_length, prefix_chars, overlap_policy)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    return parser


def _unwrap_payload(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError("analysis payload must be a JSON object")
    inner = data.get("analysis")
    return inner if isinstance(inner, dict) else data


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    for label, path in (("HTML", args.html), ("analysis", args.analysis)):
        if not path.exists():
            print(f"Error: {label} file not found: {path}", file=sys.stderr)
            return 1

    try:
        payload = _unwrap_payload(load_json(args.analysis))
        config = load_config(args.config) if args.config else AnchorConfig()
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    quotations = quotations_from_analysis(payload)
    log.debug("loaded %d quotations from %s", len(quotations), args.analysis)

    try:
        marked_html, result = highlight_html(
            read_text(args.html), quotations, config=config,
        )
    except (OSError, LeafOrderError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(marked_html, encoding="utf-8")

    if args.report is not None:
        report = result.as_dict()
        report["summary"] = summarize_analysis(payload)
        report["config"] = config.as_dict()
        report["unanchored"] = [
            {"text": q.text, "category": q.category, "explanation": q.explanation}
            for q in result.unanchored()
        ]
        save_json(report, args.report)

    print(
        f"Anchored {result.anchored}/{result.total} quotations "
        f"({result.skipped} skipped) -> {args.output}",
        file=sys.stderr,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
