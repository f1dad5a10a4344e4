from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as SchemaError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from launchpad.core.database import get_db
from launchpad.errors import InternalError, ValidationError
from launchpad.middleware.admin_auth import admin_auth
from launchpad.services import export_service, stats_service
from launchpad.utils.timefmt import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"], dependencies=[Depends(admin_auth)])


class BulkAction(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    action: Any = None
    subscriber_ids: list[str] = Field(default_factory=list, alias="subscriberIds")


async def read_bulk_action(request: Request) -> BulkAction:
    # resolved after the router-level admin check
    try:
        payload = await request.json()
    except ValueError:
        raise ValidationError("Invalid JSON body")
    try:
        return BulkAction.model_validate(payload)
    except SchemaError as e:
        raise RequestValidationError(e.errors())


def _csv_response(body: str, filename: str) -> Response:
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("")
def dashboard(request: Request, db: Session = Depends(get_db)):
    offset = request.app.state.settings.report_tz_offset_hours
    return stats_service.dashboard(db, offset_hours=offset)


@router.get("/subscribers")
def list_subscribers(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    source: Optional[str] = Query(None),
    output_format: str = Query("json", alias="format"),
    sort_by: Optional[str] = Query(None, alias="sortBy"),
    sort_order: Optional[str] = Query(None, alias="sortOrder"),
    db: Session = Depends(get_db),
):
    q = export_service.SubscriberQuery.build(
        page=page,
        limit=limit,
        search=search,
        source=source,
        sort_by=sort_by,
        sort_order=sort_order,
    )

    try:
        if output_format == "csv":
            rows = export_service.all_subscribers(db, q)
            filename = f"subscribers_{utcnow().date().isoformat()}.csv"
            return _csv_response(export_service.generate_csv(rows), filename)
        return export_service.list_subscribers(db, q)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching subscribers: {e}")
        raise InternalError("Database error")


@router.post("/subscribers")
def bulk_subscribers(
    data: BulkAction = Depends(read_bulk_action),
    db: Session = Depends(get_db),
):
    if data.action != "export_selected":
        raise ValidationError("Invalid action")

    try:
        rows = export_service.subscribers_by_ids(db, data.subscriber_ids)
    except SQLAlchemyError as e:
        logger.error(f"Error exporting selected subscribers: {e}")
        raise InternalError("Export failed")

    logger.info(f"Exported {len(rows)} selected subscribers")
    return _csv_response(export_service.generate_csv(rows), "selected_subscribers.csv")
