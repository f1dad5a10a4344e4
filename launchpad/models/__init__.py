from launchpad.core.database import Base

from .feature_request import FeatureRequest
from .waitlist import WaitlistEntry
