from sqlalchemy import Column, DateTime, String, Text

from launchpad.core.database import Base
from launchpad.models.waitlist import _new_id
from launchpad.utils.timefmt import utcnow


class FeatureRequest(Base):
    __tablename__ = "feature_requests"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String(255), index=True, nullable=False)
    feature_request = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
