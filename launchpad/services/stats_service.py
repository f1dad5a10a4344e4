"""Public stats and the admin dashboard aggregation."""

from __future__ import annotations

import logging
import math
from collections import Counter
from datetime import datetime, timedelta
from typing import Callable, Optional, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from launchpad.errors import InternalError
from launchpad.models import WaitlistEntry
from launchpad.services.waitlist_service import count_feature_requests, count_signups
from launchpad.utils.timefmt import isoformat, local_midnight_utc, time_ago, utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T")

FALLBACK_TOTAL_SIGNUPS = 10247
FALLBACK_GROWTH_RATE = 12.5
RECENT_ACTIVITY_LIMIT = 10


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def growth_rate(total: int, weekly: int) -> float:
    """Weekly signups as a percentage of all signups, one decimal place."""
    if total <= 0:
        return 0
    return round_half_up(weekly / total * 100, 1)


def sync_rate(total: int, synced: int) -> int:
    if total <= 0:
        return 0
    return int(round_half_up(synced / total * 100))


def count_since(db: Session, since: datetime) -> int:
    stmt = select(func.count()).select_from(WaitlistEntry).where(WaitlistEntry.subscribed_at >= since)
    return int(db.execute(stmt).scalar_one())


def count_synced(db: Session) -> int:
    stmt = (
        select(func.count())
        .select_from(WaitlistEntry)
        .where(WaitlistEntry.convertkit_subscriber_id.is_not(None))
    )
    return int(db.execute(stmt).scalar_one())


def fallback_stats() -> dict:
    return {
        "totalSignups": FALLBACK_TOTAL_SIGNUPS,
        "growthRate": FALLBACK_GROWTH_RATE,
        "lastUpdated": isoformat(utcnow()),
        "source": "fallback",
    }


def public_stats(db: Session, now: Optional[datetime] = None) -> dict:
    now = now or utcnow()
    total = count_signups(db)
    weekly = count_since(db, now - timedelta(days=7))
    return {
        "totalSignups": total,
        "growthRate": growth_rate(total, weekly),
        "weeklySignups": weekly,
        "lastUpdated": isoformat(now),
        "source": "supabase",
    }


def recent_activity(db: Session, now: datetime, offset_hours: int = 0) -> list[dict]:
    rows = db.execute(
        select(WaitlistEntry)
        .order_by(WaitlistEntry.subscribed_at.desc())
        .limit(RECENT_ACTIVITY_LIMIT)
    ).scalars().all()
    return [
        {
            "email": r.email,
            "firstName": r.first_name,
            "subscribedAt": isoformat(r.subscribed_at),
            "source": r.source,
            "timeAgo": time_ago(r.subscribed_at, now=now, offset_hours=offset_hours),
        }
        for r in rows
    ]


def source_distribution(db: Session) -> dict[str, int]:
    rows = db.execute(
        select(WaitlistEntry.source, func.count()).group_by(WaitlistEntry.source)
    ).all()
    dist: Counter[str] = Counter()
    for source, cnt in rows:
        dist[source or "unknown"] += int(cnt)
    return dict(dist)


def daily_signups(db: Session, since: datetime) -> dict[str, int]:
    stamps = db.execute(
        select(WaitlistEntry.subscribed_at)
        .where(WaitlistEntry.subscribed_at >= since)
        .order_by(WaitlistEntry.subscribed_at.asc())
    ).scalars().all()
    days: dict[str, int] = {}
    for ts in stamps:
        key = ts.date().isoformat()
        days[key] = days.get(key, 0) + 1
    return days


def _optional(db: Session, label: str, fn: Callable[[], T], default: T) -> T:
    # secondary dashboard reads degrade to an empty value instead of a 500
    try:
        return fn()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Dashboard query '{label}' failed: {e}")
        return default


def dashboard(db: Session, offset_hours: int = 0, now: Optional[datetime] = None) -> dict:
    now = now or utcnow()
    today_start = local_midnight_utc(offset_hours, now=now)
    week_ago = now - timedelta(days=7)
    month_ago = now - timedelta(days=30)

    try:
        total = count_signups(db)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching total subscribers: {e}")
        raise InternalError("Database error")

    today = _optional(db, "today", lambda: count_since(db, today_start), 0)
    weekly = _optional(db, "weekly", lambda: count_since(db, week_ago), 0)
    monthly = _optional(db, "monthly", lambda: count_since(db, month_ago), 0)
    synced = _optional(db, "synced", lambda: count_synced(db), 0)
    feature_requests = _optional(db, "feature_requests", lambda: count_feature_requests(db), 0)
    recent = _optional(db, "recent", lambda: recent_activity(db, now, offset_hours), [])
    sources = _optional(db, "sources", lambda: source_distribution(db), {})
    daily = _optional(db, "daily", lambda: daily_signups(db, month_ago), {})

    return {
        "stats": {
            "totalSubscribers": total,
            "todaySignups": today,
            "weeklySignups": weekly,
            "monthlySignups": monthly,
            "convertKitSynced": synced,
            "totalFeatureRequests": feature_requests,
            "growthRate": growth_rate(total, weekly),
            "syncRate": sync_rate(total, synced),
        },
        "recentActivity": recent,
        "sourceDistribution": sources,
        "dailySignups": daily,
        "lastUpdated": isoformat(now),
    }
