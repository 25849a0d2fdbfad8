# -*- coding: utf-8 -*-
"""observability.py

Structured event logging for the mood engine.

- Each event is one log record whose message is compact JSON:
  {"ts", "component", "event", ...fields}. ``component`` is the logger name
  without the ``mood_engine.`` prefix (trends, loader, cache...).
- MOOD_ENGINE_LOG_JSON=false switches to a plain ``event key=value`` line.
- Free-text entry fields (notes) are dropped from every event.
- ``timed`` wraps an operation and logs it once with its elapsed_ms.
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator

from . import config

_PREFIX = "mood_engine."
_DROPPED_FIELDS = frozenset({"notes"})


def _component(logger: logging.Logger) -> str:
    name = logger.name
    return name[len(_PREFIX):] if name.startswith(_PREFIX) else name


def _format(payload: Dict[str, Any]) -> str:
    if config.LOG_JSON:
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=str)
    head = payload.pop("event")
    return head + " " + " ".join(f"{k}={v}" for k, v in payload.items())


def log_event(logger: logging.Logger, event: str, *, level: str = "info", **fields: Any) -> None:
    """Log ``event`` with ``fields`` at ``level`` (debug|info|warning|error).

    Nothing is formatted when the level is disabled.
    """
    levelno = logging.getLevelName(level.upper())
    if not isinstance(levelno, int):
        levelno = logging.INFO
    if not logger.isEnabledFor(levelno):
        return

    payload: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "component": _component(logger),
        "event": event,
    }
    payload.update((k, v) for k, v in fields.items() if k not in _DROPPED_FIELDS)
    logger.log(levelno, _format(payload))


@contextmanager
def timed(logger: logging.Logger, event: str, *, level: str = "debug", **fields: Any) -> Iterator[Dict[str, Any]]:
    """Log ``event`` when the block exits, with ``elapsed_ms`` added.

    The yielded dict is merged into the event, so the block can report
    counts it only knows at the end. Nothing is logged if the block raises.
    """
    started = time.perf_counter()
    extra: Dict[str, Any] = dict(fields)
    yield extra
    extra["elapsed_ms"] = int((time.perf_counter() - started) * 1000)
    log_event(logger, event, level=level, **extra)
