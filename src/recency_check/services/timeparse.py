"""Convert relative-time labels ("5 minutes ago") into absolute instants."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta
from typing import Dict, Optional

from recency_check.models import ParsedTime

log = logging.getLogger(__name__)

# Fixed-length approximations: a month is 30 days and a year is 365 days.
UNIT_MILLISECONDS: Dict[str, int] = {
    "minute": 60 * 1000,
    "hour": 60 * 60 * 1000,
    "day": 24 * 60 * 60 * 1000,
    "month": 30 * 24 * 60 * 60 * 1000,
    "year": 365 * 24 * 60 * 60 * 1000,
}

_LABEL_RE = re.compile(r"\s*(\d+)\s+([A-Za-z]+)")


def normalize_unit(word: str) -> str:
    """Lower-case ``word`` and drop a single trailing plural ``s``."""
    unit = word.lower()
    if unit.endswith("s"):
        unit = unit[:-1]
    return unit


def parse_time_label(label: Optional[str], now: datetime) -> ParsedTime:
    """Parse ``label`` relative to ``now``.

    Never raises. Labels without a leading ``<digits> <word>`` (for example
    "a day ago" or "just now") and labels with an unrecognised unit resolve to
    ``now`` and carry an anomaly reason.
    """
    text = label or ""
    m = _LABEL_RE.match(text)
    if not m:
        log.warning("Unparseable time label %r; using reference time", text)
        return ParsedTime(label=text, instant=now, anomaly="unmatched")

    unit = normalize_unit(m.group(2))
    millis = UNIT_MILLISECONDS.get(unit)
    if millis is None:
        log.warning("Unknown time unit %r in label %r; using reference time", unit, text)
        return ParsedTime(label=text, instant=now, anomaly=f"unknown unit {unit!r}")

    try:
        # int() refuses digit strings past the interpreter limit
        instant = now - timedelta(milliseconds=int(m.group(1)) * millis)
    except (ValueError, OverflowError):
        log.warning("Time label %r is out of range; using reference time", text)
        return ParsedTime(label=text, instant=now, anomaly="out of range")
    return ParsedTime(label=text, instant=instant)


def parse_time_ago(label: Optional[str], now: datetime) -> datetime:
    return parse_time_label(label, now).instant
