# -*- coding: utf-8 -*-
"""cache.py

Explicit cache for AggregateResult.

- key: sha256 over the entry set (id, timestamp, dominant emotion, derived values)
  plus window_days, now_ms and the timezone name. Any change to the history,
  the window or "now" produces a new key; there is no implicit invalidation.
- LRU: beyond max_size the least recently used result is dropped.
- In-process only; guarded by a lock so request handlers can share one instance.
- Every call returns its own deep copy, so a caller mutating a result never
  changes what later hits see.
"""

from __future__ import annotations

import copy
import hashlib
import json
import logging
import threading
from collections import OrderedDict
from datetime import tzinfo
from typing import List, Optional

from . import config
from .models import AggregateResult, MoodEntry
from .observability import log_event
from .trends import aggregate

logger = logging.getLogger("mood_engine.cache")


def _tz_name(tz: Optional[tzinfo]) -> str:
    if tz is None:
        return config.TZ_NAME
    return str(getattr(tz, "key", None) or tz)


def cache_key(entries: List[MoodEntry], window_days: int, now_ms: int, tz: Optional[tzinfo] = None) -> str:
    rows = sorted(
        (e.id, e.timestamp, e.dominant_emotion, e.derived.energy, e.derived.calmness, e.derived.tension)
        for e in entries
    )
    payload = json.dumps(
        {"entries": rows, "window_days": int(window_days), "now_ms": int(now_ms), "tz": _tz_name(tz)},
        separators=(",", ":"),
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class AggregateCache:
    def __init__(self, max_size: Optional[int] = None) -> None:
        self.max_size = max(1, int(max_size if max_size is not None else config.CACHE_MAX_SIZE))
        self._lock = threading.Lock()
        self._items: "OrderedDict[str, AggregateResult]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def get_or_compute(
        self,
        entries: List[MoodEntry],
        window_days: int,
        now_ms: int,
        tz: Optional[tzinfo] = None,
    ) -> AggregateResult:
        key = cache_key(entries, window_days, now_ms, tz)
        with self._lock:
            cached = self._items.get(key)
            if cached is not None:
                self._items.move_to_end(key)
                self.hits += 1
                log_event(logger, "aggregate_cache_hit", level="debug", key=key[:16])
                return copy.deepcopy(cached)
            self.misses += 1

        result = aggregate(entries, window_days, now_ms=now_ms, tz=tz)

        with self._lock:
            self._items[key] = result
            self._items.move_to_end(key)
            # Evict LRU
            while len(self._items) > self.max_size:
                self._items.popitem(last=False)
        log_event(logger, "aggregate_cache_miss", level="debug", key=key[:16], size=len(self._items))
        return copy.deepcopy(result)

    def invalidate(self) -> None:
        with self._lock:
            self._items.clear()
