"""ConvertKit mailing-list sync.

Every call here is a best-effort notification: it is attempted at most once,
never retried, and a failure is logged and reported through the return value
rather than raised. The signup response never depends on it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests
from fastapi import Request

from launchpad.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubscribeResult:
    ok: bool
    subscriber_id: Optional[str] = None


class ConvertKitClient:
    def __init__(
        self,
        api_secret: Optional[str],
        form_id: Optional[str],
        sequence_id: Optional[str] = None,
        api_base: str = "https://api.convertkit.com/v3",
        timeout: int = 5,
    ):
        self.api_secret = api_secret
        self.form_id = form_id
        self.sequence_id = sequence_id
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConvertKitClient":
        return cls(
            api_secret=settings.convertkit_api_secret,
            form_id=settings.convertkit_form_id,
            sequence_id=settings.convertkit_sequence_id,
            api_base=settings.convertkit_api_base,
            timeout=settings.convertkit_timeout_seconds,
        )

    @property
    def enabled(self) -> bool:
        return bool(self.api_secret and self.form_id)

    def _post(self, path: str, email: str, first_name: Optional[str]) -> requests.Response:
        payload = {
            "api_secret": self.api_secret,
            "email": email,
            "first_name": first_name or "",
        }
        return requests.post(f"{self.api_base}{path}", json=payload, timeout=self.timeout)

    def subscribe(self, email: str, first_name: Optional[str] = None) -> SubscribeResult:
        """Add ``email`` to the configured form.

        ``ok`` reports whether ConvertKit accepted the request; the subscriber
        id is only set when the reply actually carried one.
        """
        if not self.enabled:
            return SubscribeResult(ok=False)

        try:
            r = self._post(f"/forms/{self.form_id}/subscribe", email, first_name)
        except requests.RequestException as e:
            logger.error(f"ConvertKit subscription error for {email}: {e}")
            return SubscribeResult(ok=False)

        if not r.ok:
            logger.error(f"ConvertKit API error for {email}: {r.status_code} {r.text[:200]}")
            return SubscribeResult(ok=False)

        try:
            data = r.json()
        except ValueError:
            logger.error(f"ConvertKit returned a non-JSON body for {email}")
            return SubscribeResult(ok=False)

        subscription = data.get("subscription") if isinstance(data, dict) else None
        subscriber = subscription.get("subscriber") if isinstance(subscription, dict) else None
        subscriber_id = subscriber.get("id") if isinstance(subscriber, dict) else None
        if subscriber_id is None:
            logger.warning(f"ConvertKit reply for {email} carried no subscriber id")
            return SubscribeResult(ok=True)
        return SubscribeResult(ok=True, subscriber_id=str(subscriber_id))

    def enroll_in_sequence(self, email: str, first_name: Optional[str] = None) -> bool:
        """Subscribe ``email`` to the welcome sequence, if one is configured."""
        if not (self.enabled and self.sequence_id):
            return False

        try:
            r = self._post(f"/sequences/{self.sequence_id}/subscribe", email, first_name)
        except requests.RequestException as e:
            logger.error(f"ConvertKit sequence subscription error for {email}: {e}")
            return False

        if not r.ok:
            logger.error(f"ConvertKit sequence error for {email}: {r.status_code} {r.text[:200]}")
            return False

        logger.info(f"Subscribed {email} to welcome sequence")
        return True


def get_mailer(request: Request) -> ConvertKitClient:
    return request.app.state.mailer
