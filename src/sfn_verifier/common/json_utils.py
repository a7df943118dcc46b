"""
JSON and timestamp helpers for execution history payloads.

History payloads arrive as JSON strings that may be empty, truncated or not
objects at all. Everything here degrades to an empty/zero value instead of
raising.
"""

import json
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_json_object(raw: Any) -> Dict[str, Any]:
    """
    Best-effort parse of a state payload.

    Returns the decoded dict, or {} when raw is None, blank, invalid JSON,
    or decodes to something other than an object.
    """
    if isinstance(raw, dict):
        return dict(raw)
    if not isinstance(raw, (str, bytes)):
        return {}
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    if not raw.strip():
        return {}
    try:
        value = json.loads(raw)
    except (ValueError, TypeError):
        return {}
    return value if isinstance(value, dict) else {}


def get_ms_timestamp(value: Any) -> int:
    """
    Convert a timestamp of any supported shape to epoch milliseconds.

    Supported:
    - datetime (naive values are taken as UTC)
    - int/float: seconds or milliseconds (values below 10^10 are seconds)
    - ISO 8601 strings: "2026-01-26T08:12:53.732Z"
    - numeric strings: "1769415175"
    - anything else: 0
    """
    if value is None:
        return 0

    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        try:
            return int(round(value.timestamp() * 1000))
        except (OverflowError, OSError, ValueError):
            return 0

    if isinstance(value, bool):
        return 0

    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return 0
        ts = int(value)
        if ts < 10_000_000_000:
            ts *= 1000
        return ts

    if isinstance(value, str):
        if not value or value in ('N/A', 'null', 'None'):
            return 0

        try:
            if 'T' in value or (len(value) > 10 and '-' in value[:10]):
                normalized = value.replace('Z', '+00:00')
                dt = datetime.fromisoformat(normalized)
                return get_ms_timestamp(dt)

            ts = int(float(value))
            if ts < 10_000_000_000:
                ts *= 1000
            return ts
        except (ValueError, TypeError, OSError, OverflowError):
            return 0

    return 0


def to_utc_datetime(value: Any) -> datetime:
    """Coerce a timestamp to an aware UTC datetime (epoch when unusable)."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        try:
            return value.astimezone(timezone.utc)
        except (OverflowError, ValueError):
            return EPOCH
    try:
        return EPOCH + timedelta(milliseconds=get_ms_timestamp(value))
    except OverflowError:
        return EPOCH


def elapsed_ms(start: datetime, end: datetime) -> int:
    """Whole milliseconds from start to end."""
    return int(round((end - start) / timedelta(milliseconds=1)))
