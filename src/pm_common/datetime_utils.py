"""UTC time utilities. Orders and bets carry epoch-millisecond timestamps."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def utc_now_ms() -> int:
    """Milliseconds since the Unix epoch, used for created_time ordering."""
    return int(utc_now().timestamp() * 1000)
