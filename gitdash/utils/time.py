from datetime import datetime, timedelta, timezone
from typing import Optional

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def days_from(start: datetime, days: int) -> datetime:
    return start + timedelta(days=days)

def parse_iso_dt(s: str) -> datetime:
    return datetime.fromisoformat(s.replace("Z", "+00:00"))

def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt

def activity_timestamp(iso_str: str) -> float:
    """Timestamp for sorting activity; unparseable dates sink to the bottom."""
    try:
        return parse_iso_dt(iso_str).timestamp()
    except (ValueError, AttributeError, TypeError):
        return float("-inf")
