from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "Not available"
INVALID_TIMESTAMP = "Invalid timestamp"

# Epoch values above this are milliseconds (seconds would be past year 2286).
_MILLISECONDS_CUTOFF = 1e10


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Normalize an epoch number, numeric string, ISO-8601 string or datetime
    into an aware UTC datetime. Returns None for missing values and raises
    ValueError when the value cannot be interpreted.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if isinstance(value, bool):
        raise ValueError(f"Unsupported timestamp type: {type(value).__name__}")

    if isinstance(value, (int, float)):
        return _from_epoch(float(value))

    if isinstance(value, str):
        raw = value.strip()
        if raw == "":
            return None
        try:
            return _from_epoch(float(raw))
        except ValueError:
            pass
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)

    raise ValueError(f"Unsupported timestamp type: {type(value).__name__}")


def _from_epoch(seconds_or_ms: float) -> datetime:
    if seconds_or_ms != seconds_or_ms:
        raise ValueError("NaN timestamp")
    seconds = seconds_or_ms / 1000.0 if abs(seconds_or_ms) > _MILLISECONDS_CUTOFF else seconds_or_ms
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError) as exc:
        raise ValueError(f"Epoch value out of range: {seconds_or_ms}") from exc


def format_timestamp(value: Any) -> str:
    """Render as 'January 8, 2025 at 3:04 PM UTC' or a fallback string."""
    dt = _safe_parse(value)
    if isinstance(dt, str):
        return dt
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{dt.strftime('%B')} {dt.day}, {dt.year} at {hour}:{dt.minute:02d} {suffix} UTC"


def format_date(value: Any) -> str:
    dt = _safe_parse(value)
    if isinstance(dt, str):
        return dt
    return f"{dt.month}/{dt.day}/{dt.year}"


def _safe_parse(value: Any):
    try:
        dt = parse_timestamp(value)
    except (ValueError, TypeError) as exc:
        logger.warning("Unparseable timestamp %r: %s", value, exc)
        return INVALID_TIMESTAMP
    if dt is None:
        return NOT_AVAILABLE
    return dt
