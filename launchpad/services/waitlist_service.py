from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from launchpad.errors import Conflict, InternalError
from launchpad.models import FeatureRequest, WaitlistEntry
from launchpad.services.convertkit import ConvertKitClient

logger = logging.getLogger(__name__)


def count_signups(db: Session) -> int:
    return int(db.execute(select(func.count()).select_from(WaitlistEntry)).scalar_one())


def count_feature_requests(db: Session) -> int:
    return int(db.execute(select(func.count()).select_from(FeatureRequest)).scalar_one())


def create_entry(db: Session, email: str, first_name: Optional[str]) -> WaitlistEntry:
    entry = WaitlistEntry(email=email, first_name=first_name or None, source="waitlist")
    db.add(entry)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Email already registered")
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error saving waitlist entry for {email}: {e}")
        raise InternalError("Failed to save to database")
    db.refresh(entry)
    return entry


def sync_to_mailer(db: Session, entry: WaitlistEntry, mailer: ConvertKitClient) -> bool:
    """Push a fresh signup to ConvertKit and remember the subscriber id.

    The welcome sequence follows any accepted form subscribe, id or not.
    Returns True when ConvertKit handed back a subscriber id.
    """
    if not mailer.enabled:
        return False

    email, first_name = entry.email, entry.first_name
    result = mailer.subscribe(email, first_name)
    if not result.ok:
        return False

    if result.subscriber_id:
        entry.convertkit_subscriber_id = result.subscriber_id
        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to store ConvertKit id for {email}: {e}")

    mailer.enroll_in_sequence(email, first_name)
    return result.subscriber_id is not None


def join_waitlist(
    db: Session,
    email: str,
    first_name: Optional[str],
    mailer: ConvertKitClient,
) -> dict:
    entry = create_entry(db, email, first_name)
    synced = sync_to_mailer(db, entry, mailer)

    try:
        total = count_signups(db)
    except SQLAlchemyError as e:
        logger.error(f"Error counting signups: {e}")
        raise InternalError("Database error")

    logger.info(f"New waitlist signup: {email} (total signups: {total})")
    return {
        "message": "Successfully added to waitlist",
        "totalSignups": total,
        "convertKitSynced": synced,
    }


def submit_feature_request(db: Session, email: str, text: str) -> str:
    row = FeatureRequest(email=email, feature_request=text)
    db.add(row)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error saving feature request from {email}: {e}")
        raise InternalError("Failed to save feature request")
    db.refresh(row)

    logger.info(f"New feature request from {email}: {text[:100]}")
    return row.id
