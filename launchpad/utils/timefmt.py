from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """Naive UTC timestamp; every stored datetime uses this convention."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def local_midnight_utc(offset_hours: int, now: Optional[datetime] = None) -> datetime:
    """Start of the current local day (UTC + offset_hours), as naive UTC."""
    now = now or utcnow()
    local = now + timedelta(hours=offset_hours)
    local_midnight = local.replace(hour=0, minute=0, second=0, microsecond=0)
    return local_midnight - timedelta(hours=offset_hours)


def time_ago(when: datetime, now: Optional[datetime] = None, offset_hours: int = 0) -> str:
    now = now or utcnow()
    seconds = (now - when).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"
    local = when + timedelta(hours=offset_hours)
    return f"{local.month}/{local.day}/{local.year}"


def isoformat(value: Optional[datetime]) -> Optional[str]:
    """ISO 8601 with an explicit UTC offset; stored values are naive UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()
