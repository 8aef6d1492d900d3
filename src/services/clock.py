"""
Clock helpers. Timestamps are stored as ISO-8601 UTC text with a 'Z' suffix, second precision,
so stored values compare consistently whether read back as strings or datetimes.
"""
from datetime import datetime, timezone

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_now():
    return datetime.now(timezone.utc)


def _ensure_utc(dt):
    """Assume naive datetimes are UTC for comparison."""
    if getattr(dt, "tzinfo", None) is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_timestamp(dt):
    return _ensure_utc(dt).strftime(TIMESTAMP_FORMAT)


def parse_timestamp(value):
    """Parse a stored timestamp (str or datetime). Returns an aware UTC datetime, or None if unparsable."""
    if value is None:
        return None
    try:
        if isinstance(value, datetime):
            return _ensure_utc(value)
        text = str(value).strip()
        if not text:
            return None
        return _ensure_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except (ValueError, OverflowError):
        # offsets that push the instant past datetime.min/max cannot be normalised
        return None
