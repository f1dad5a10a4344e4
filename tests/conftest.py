from __future__ import annotations

from datetime import datetime
from typing import Iterator, Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from launchpad.config import Settings
from launchpad.main import create_app
from launchpad.models import FeatureRequest, WaitlistEntry
from launchpad.utils.timefmt import utcnow

ADMIN_SECRET = "s3cret-admin-key"


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="sqlite://", admin_secret_key=ADMIN_SECRET)


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    return create_app(settings)


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    """Test client with the lifespan run, so tables exist."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_headers() -> dict:
    return {"Authorization": f"Bearer {ADMIN_SECRET}"}


@pytest.fixture
def seed(app: FastAPI, client: TestClient):
    """Insert waitlist rows directly: seed(email, subscribed_at=..., ...)."""

    def _seed(
        email: str,
        first_name: Optional[str] = None,
        subscribed_at: Optional[datetime] = None,
        source: Optional[str] = "waitlist",
        convertkit_subscriber_id: Optional[str] = None,
    ) -> str:
        stamp = subscribed_at or utcnow()
        entry = WaitlistEntry(
            email=email,
            first_name=first_name,
            subscribed_at=stamp,
            source=source,
            convertkit_subscriber_id=convertkit_subscriber_id,
            created_at=stamp,
            updated_at=stamp,
        )
        with app.state.database.session() as db:
            db.add(entry)
            db.commit()
            return entry.id

    return _seed


@pytest.fixture
def fetch_entries(app: FastAPI):
    def _fetch() -> list[WaitlistEntry]:
        with app.state.database.session() as db:
            rows = db.query(WaitlistEntry).order_by(WaitlistEntry.email).all()
            db.expunge_all()
            return rows

    return _fetch


@pytest.fixture
def fetch_feature_requests(app: FastAPI):
    def _fetch() -> list[FeatureRequest]:
        with app.state.database.session() as db:
            rows = db.query(FeatureRequest).all()
            db.expunge_all()
            return rows

    return _fetch
