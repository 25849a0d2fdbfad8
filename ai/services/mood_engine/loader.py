"""Load mood entries from JSON / JSONL files.

Supported layouts:
- JSON array:   [ {entry}, {entry}, ... ]
- JSON object:  {"entries": [ ... ]}
- JSON Lines:   one entry object per line

A file with two or more non-blank lines whose first line is a complete JSON
object is read as JSON Lines, so one broken line only costs that line.
Invalid records are skipped with a warning; an unreadable file raises.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Union

from .models import MoodEntry
from .observability import log_event
from .schemas import parse_entries

logger = logging.getLogger("mood_engine.loader")


def _read_rows(text: str, path: Path) -> List[Any]:
    stripped = text.strip()
    if not stripped:
        return []
    if stripped[0] not in "[{" or _looks_like_jsonl(stripped):
        return _read_lines(text)

    try:
        data = json.loads(stripped)
    except json.JSONDecodeError as e:
        if e.msg == "Extra data":
            # several top-level values: JSON Lines
            return _read_lines(text)
        raise ValueError(f"Invalid JSON in entry file {path}: {e}")
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        entries = data.get("entries")
        if isinstance(entries, list):
            return entries
        # single-record JSONL file
        return [data]
    raise ValueError(f"Entry file {path} must contain a list or an 'entries' list")


def _read_lines(text: str) -> List[Any]:
    rows: List[Any] = []
    for i, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            rows.append(json.loads(line))
        except json.JSONDecodeError:
            logger.warning("[skip] line %d: not valid JSON", i)
    return rows


def _looks_like_jsonl(text: str) -> bool:
    lines = [ln.strip() for ln in text.splitlines() if ln.strip()]
    if len(lines) < 2:
        return False
    try:
        return isinstance(json.loads(lines[0]), dict)
    except json.JSONDecodeError:
        return False


def load_entries(path: Union[str, Path]) -> List[MoodEntry]:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise FileNotFoundError(f"Entry file not found: {p}")

    rows = _read_rows(text, p)
    entries, errors = parse_entries(rows)
    for idx, err in errors:
        logger.warning("[skip] record %d: %s", idx, err)
    log_event(logger, "entries_loaded", path=str(p), loaded=len(entries), skipped=len(errors))
    return entries
