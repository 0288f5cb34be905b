"""File helpers: orjson-backed JSON and tolerant text decoding."""
from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson

# Exported pages are mostly UTF-8; Word/Windows exports are often CP1252.
_TEXT_ENCODINGS: tuple[str, ...] = ("utf-8", "cp1252")


def load_json(path: Path) -> Any:
    """Load JSON from a file."""
    return orjson.loads(path.read_bytes())


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON with sorted keys, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    opts = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else orjson.OPT_SORT_KEYS
    path.write_bytes(orjson.dumps(obj, option=opts))


def read_text(path: Path) -> str:
    """Decode a saved page, trying each of ``_TEXT_ENCODINGS`` in turn.

    Bytes no encoding accepts come back as U+FFFD under UTF-8, so a page
    with a few stray bytes still yields its text. ``OSError`` propagates.
    """
    data = path.read_bytes()
    for encoding in _TEXT_ENCODINGS:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("utf-8", errors="replace")
