import hmac
from typing import Optional

from fastapi import Header, Query, Request

from launchpad.config import Settings
from launchpad.errors import Unauthorized


def is_authorized(settings: Settings, secret: Optional[str], authorization: Optional[str]) -> bool:
    # fails closed when the secret is missing or still the placeholder
    if not settings.admin_configured:
        return False

    expected = settings.admin_secret_key.encode()
    if secret and hmac.compare_digest(secret.encode(), expected):
        return True
    if authorization and hmac.compare_digest(authorization.encode(), b"Bearer " + expected):
        return True
    return False


def admin_auth(
    request: Request,
    secret: Optional[str] = Query(None),
    authorization: Optional[str] = Header(None),
):
    if not is_authorized(request.app.state.settings, secret, authorization):
        raise Unauthorized()
