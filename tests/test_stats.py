"""Tests for the public stats endpoint and growth math."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from launchpad.config import Settings
from launchpad.services.stats_service import growth_rate, round_half_up, sync_rate
from launchpad.utils.timefmt import utcnow


class TestGrowthMath:
    def test_growth_rate(self):
        assert growth_rate(100, 12) == 12.0

    def test_growth_rate_rounds_to_one_decimal(self):
        assert growth_rate(3, 1) == 33.3
        assert growth_rate(8, 1) == 12.5

    def test_growth_rate_empty(self):
        assert growth_rate(0, 0) == 0

    def test_round_half_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(1.25, 1) == 1.3

    def test_sync_rate(self):
        assert sync_rate(4, 1) == 25
        assert sync_rate(3, 2) == 67
        assert sync_rate(0, 0) == 0


def test_stats_from_database(client, seed):
    now = utcnow()
    for i in range(12):
        seed(f"recent{i}@example.com", subscribed_at=now - timedelta(days=1))
    for i in range(88):
        seed(f"old{i}@example.com", subscribed_at=now - timedelta(days=20))

    r = client.get("/api/stats")
    assert r.status_code == 200
    body = r.json()
    assert body["totalSignups"] == 100
    assert body["weeklySignups"] == 12
    assert body["growthRate"] == 12.0
    assert body["source"] == "supabase"
    assert body["lastUpdated"].endswith("+00:00")


def test_stats_empty_database(client):
    body = client.get("/api/stats").json()
    assert body["totalSignups"] == 0
    assert body["growthRate"] == 0
    assert body["source"] == "supabase"


def test_stats_query_failure_serves_fallback(client):
    with patch(
        "launchpad.api.stats.public_stats",
        side_effect=OperationalError("SELECT", {}, Exception("db down")),
    ):
        r = client.get("/api/stats")
    assert r.status_code == 200
    body = r.json()
    assert body["source"] == "fallback"
    assert body["totalSignups"] == 10247
    assert body["growthRate"] == 12.5
    assert body["lastUpdated"].endswith("+00:00")


class TestWithoutDatabase:
    @pytest.fixture
    def settings(self):
        return Settings(database_url=None)

    def test_fallback(self, client):
        r = client.get("/api/stats")
        assert r.status_code == 200
        assert r.json()["source"] == "fallback"
