import uuid

from sqlalchemy import Column, DateTime, String

from launchpad.core.database import Base
from launchpad.utils.timefmt import utcnow


def _new_id() -> str:
    return str(uuid.uuid4())


class WaitlistEntry(Base):
    __tablename__ = "waitlist"

    id = Column(String(36), primary_key=True, default=_new_id)
    # unique constraint is what turns a duplicate signup into a 409
    email = Column(String(255), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=True)
    subscribed_at = Column(DateTime, default=utcnow, index=True, nullable=False)
    convertkit_subscriber_id = Column(String(64), nullable=True)
    source = Column(String(64), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
