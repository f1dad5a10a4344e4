from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import SQLAlchemyError

from launchpad.core.database import DatabaseClient, get_database
from launchpad.errors import InternalError, ServiceUnavailable
from launchpad.services.waitlist_service import count_feature_requests, submit_feature_request
from launchpad.utils.validation import clean_feature_request, require_email

logger = logging.getLogger(__name__)

router = APIRouter(tags=["feature-requests"])


class FeatureRequestCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: Any = None
    feature_request: Any = Field(None, alias="featureRequest")


@router.post("/feature-requests")
def create_feature_request(
    data: FeatureRequestCreate,
    database: DatabaseClient = Depends(get_database),
):
    email = require_email(data.email)
    text = clean_feature_request(data.feature_request)

    if not database.available:
        logger.warning("Database not configured - feature request collection disabled")
        raise ServiceUnavailable("Feature request collection not available")

    with database.session() as db:
        request_id = submit_feature_request(db, email, text)

    return {"message": "Feature request submitted successfully", "id": request_id}


@router.get("/feature-requests")
def feature_requests_summary(database: DatabaseClient = Depends(get_database)):
    if not database.available:
        return {
            "totalRequests": 0,
            "message": "Feature requests API is running (database not configured)",
        }

    with database.session() as db:
        try:
            total = count_feature_requests(db)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching feature request stats: {e}")
            raise InternalError("Database error")

    return {"totalRequests": total, "message": "Feature requests API is running"}
