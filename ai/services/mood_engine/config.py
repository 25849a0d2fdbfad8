# -*- coding: utf-8 -*-
"""config.py

Environment settings for the mood engine.

ENV
- MOOD_ENGINE_TZ (default: UTC)  IANA timezone used for date / hour / weekday buckets
- MOOD_ENGINE_DEFAULT_WINDOW_DAYS (default: 7)
- MOOD_ENGINE_CACHE_MAX_SIZE (default: 128)
- MOOD_ENGINE_LOG_JSON=true/false (default: true)
"""

from __future__ import annotations

import logging
import os
from datetime import timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger("mood_engine.config")


def _env_truthy(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return str(raw).strip().lower() in ("1", "true", "yes", "y", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(str(raw).strip())
    except Exception:
        return default


TZ_NAME = (os.getenv("MOOD_ENGINE_TZ") or "UTC").strip() or "UTC"
DEFAULT_WINDOW_DAYS = max(0, _env_int("MOOD_ENGINE_DEFAULT_WINDOW_DAYS", 7))
CACHE_MAX_SIZE = max(1, _env_int("MOOD_ENGINE_CACHE_MAX_SIZE", 128))
LOG_JSON = _env_truthy("MOOD_ENGINE_LOG_JSON", True)


def resolve_tz(name: Optional[str] = None) -> tzinfo:
    """Return the tzinfo for ``name`` (or MOOD_ENGINE_TZ).

    Unknown names fall back to UTC with a warning rather than failing the
    aggregation.
    """
    key = (name or TZ_NAME).strip()
    if key.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(key)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        logger.warning("Unknown timezone %r; falling back to UTC", key)
        return timezone.utc
