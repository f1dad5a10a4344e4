import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from launchpad.core.database import DatabaseClient, get_database
from launchpad.services.stats_service import fallback_stats, public_stats

logger = logging.getLogger(__name__)

router = APIRouter(tags=["stats"])


@router.get("/stats")
def stats(database: DatabaseClient = Depends(get_database)):
    """Landing page counter. Never errors: falls back to demo numbers."""
    if not database.available:
        return fallback_stats()

    with database.session() as db:
        try:
            return public_stats(db)
        except SQLAlchemyError as e:
            logger.error(f"Error fetching stats, serving fallback: {e}")
            return fallback_stats()
