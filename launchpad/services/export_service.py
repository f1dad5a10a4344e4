from __future__ import annotations

import csv
import math
from dataclasses import dataclass
from io import StringIO
from typing import Iterable, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from launchpad.errors import ValidationError
from launchpad.models import WaitlistEntry
from launchpad.utils.timefmt import isoformat

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 50

CSV_HEADERS = [
    "Email",
    "First Name",
    "Subscribed At",
    "Source",
    "ConvertKit ID",
    "Synced",
    "Created At",
]

SORTABLE_COLUMNS = {
    "subscribed_at": WaitlistEntry.subscribed_at,
    "created_at": WaitlistEntry.created_at,
    "email": WaitlistEntry.email,
    "first_name": WaitlistEntry.first_name,
    "source": WaitlistEntry.source,
}


@dataclass(frozen=True)
class SubscriberQuery:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    search: str = ""
    source: str = ""
    sort_by: str = "subscribed_at"
    sort_order: str = "desc"

    @classmethod
    def build(
        cls,
        page: Optional[int] = None,
        limit: Optional[int] = None,
        search: Optional[str] = None,
        source: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> "SubscriberQuery":
        sort_by = sort_by or "subscribed_at"
        if sort_by not in SORTABLE_COLUMNS:
            raise ValidationError(f"Invalid sortBy: {sort_by}")
        return cls(
            page=max(1, page if page is not None else 1),
            limit=min(max(1, limit if limit is not None else DEFAULT_PAGE_SIZE), MAX_PAGE_SIZE),
            search=(search or "").strip(),
            source=(source or "").strip(),
            sort_by=sort_by,
            sort_order="asc" if sort_order == "asc" else "desc",
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _filtered(q: SubscriberQuery):
    stmt = select(WaitlistEntry)
    if q.search:
        stmt = stmt.where(
            or_(
                WaitlistEntry.email.icontains(q.search, autoescape=True),
                WaitlistEntry.first_name.icontains(q.search, autoescape=True),
            )
        )
    if q.source:
        stmt = stmt.where(WaitlistEntry.source == q.source)
    return stmt


def _ordered(stmt, q: SubscriberQuery):
    column = SORTABLE_COLUMNS[q.sort_by]
    order = column.asc() if q.sort_order == "asc" else column.desc()
    # id as tiebreaker keeps pages stable when timestamps collide
    return stmt.order_by(order, WaitlistEntry.id.asc())


def pagination(page: int, limit: int, total: int) -> dict:
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalCount": total,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
        "limit": limit,
    }


def serialize_subscriber(r: WaitlistEntry) -> dict:
    return {
        "id": r.id,
        "email": r.email,
        "firstName": r.first_name,
        "subscribedAt": isoformat(r.subscribed_at),
        "convertKitId": r.convertkit_subscriber_id,
        "source": r.source,
        "createdAt": isoformat(r.created_at),
        "isSynced": bool(r.convertkit_subscriber_id),
    }


def list_subscribers(db: Session, q: SubscriberQuery) -> dict:
    stmt = _filtered(q)
    total = int(db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one())
    rows = db.execute(_ordered(stmt, q).offset(q.offset).limit(q.limit)).scalars().all()

    return {
        "subscribers": [serialize_subscriber(r) for r in rows],
        "pagination": pagination(q.page, q.limit, total),
        "filters": {
            "search": q.search,
            "source": q.source,
            "sortBy": q.sort_by,
            "sortOrder": q.sort_order,
        },
    }


def all_subscribers(db: Session, q: SubscriberQuery) -> list[WaitlistEntry]:
    return list(db.execute(_ordered(_filtered(q), q)).scalars().all())


def subscribers_by_ids(db: Session, ids: Iterable[str]) -> list[WaitlistEntry]:
    ids = [str(i) for i in ids]
    if not ids:
        return []
    stmt = (
        select(WaitlistEntry)
        .where(WaitlistEntry.id.in_(ids))
        .order_by(WaitlistEntry.subscribed_at.desc(), WaitlistEntry.id.asc())
    )
    return list(db.execute(stmt).scalars().all())


def generate_csv(rows: Iterable[WaitlistEntry]) -> str:
    output = StringIO()
    csv.writer(output, lineterminator="\n").writerow(CSV_HEADERS)

    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for r in rows:
        writer.writerow([
            r.email,
            r.first_name or "",
            isoformat(r.subscribed_at) or "",
            r.source or "",
            r.convertkit_subscriber_id or "",
            "Yes" if r.convertkit_subscriber_id else "No",
            isoformat(r.created_at) or "",
        ])

    return output.getvalue().rstrip("\n")
