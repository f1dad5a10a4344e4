from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import SQLAlchemyError

from launchpad.core.database import DatabaseClient, get_database
from launchpad.errors import InternalError, ServiceUnavailable
from launchpad.services.convertkit import ConvertKitClient, get_mailer
from launchpad.services.waitlist_service import count_signups, join_waitlist
from launchpad.utils.validation import require_email

logger = logging.getLogger(__name__)

router = APIRouter(tags=["waitlist"])


class WaitlistRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Any = None
    first_name: Optional[str] = Field(None, alias="firstName", max_length=100)


@router.post("/waitlist")
def signup(
    data: WaitlistRequest,
    database: DatabaseClient = Depends(get_database),
    mailer: ConvertKitClient = Depends(get_mailer),
):
    """Join the waitlist.

    The ConvertKit sync is best-effort; its failure never fails the signup.
    """
    email = require_email(data.email)

    if not database.available:
        logger.warning("Database not configured - email collection disabled")
        raise ServiceUnavailable("Email collection not available")

    first_name = (data.first_name or "").strip() or None
    with database.session() as db:
        return join_waitlist(db, email, first_name, mailer)


@router.get("/waitlist")
def waitlist_summary(database: DatabaseClient = Depends(get_database)):
    if not database.available:
        return {
            "totalSignups": 0,
            "message": "Waitlist API is running (database not configured)",
        }

    with database.session() as db:
        try:
            total = count_signups(db)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching waitlist stats: {e}")
            raise InternalError("Database error")

    return {"totalSignups": total, "message": "Waitlist API is running"}
