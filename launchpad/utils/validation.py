import re
from typing import Any

from launchpad.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

FEATURE_REQUEST_MIN_LENGTH = 10
FEATURE_REQUEST_MAX_LENGTH = 1000


def is_valid_email(email: Any) -> bool:
    if not email or not isinstance(email, str):
        return False
    return EMAIL_PATTERN.match(email) is not None


def normalize_email(email: str) -> str:
    return email.lower()


def require_email(email: Any) -> str:
    """Validate a submitted email and return it lowercased."""
    if not email or not isinstance(email, str):
        raise ValidationError("Email is required")
    if not is_valid_email(email):
        raise ValidationError("Invalid email format")
    return normalize_email(email)


def clean_feature_request(text: Any) -> str:
    if not text or not isinstance(text, str):
        raise ValidationError("Feature request is required")

    trimmed = text.strip()
    if len(trimmed) < FEATURE_REQUEST_MIN_LENGTH:
        raise ValidationError(
            f"Feature request must be at least {FEATURE_REQUEST_MIN_LENGTH} characters long"
        )
    if len(trimmed) > FEATURE_REQUEST_MAX_LENGTH:
        raise ValidationError(
            f"Feature request must be at most {FEATURE_REQUEST_MAX_LENGTH} characters long"
        )
    return trimmed
