import pytest

from launchpad.config import Settings


def test_healthy(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json() == {
        "status": "healthy",
        "databaseConfigured": True,
        "databaseHealthy": True,
        "convertKitConfigured": False,
    }


class TestWithoutDatabase:
    @pytest.fixture
    def settings(self):
        return Settings(database_url=None, convertkit_api_secret="s", convertkit_form_id="1")

    def test_degraded(self, client):
        body = client.get("/api/health").json()
        assert body["status"] == "degraded"
        assert body["databaseConfigured"] is False
        assert body["databaseHealthy"] is False
        assert body["convertKitConfigured"] is True
