"""
Rate limits on a non-testing app.

The session app runs with TESTING=True, which skips the limits entirely, so
these tests build a second app whose config keeps them on.
"""

import pytest

from app import create_app
from app.config import TestingConfig, config as config_map
from app.middleware.rate_limiter import WRITE_LIMIT


class RateLimitedConfig(TestingConfig):
    TESTING = False
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    RATELIMIT_ENABLED = True
    REDIS_URL = "memory://"


@pytest.fixture()
def limited_client(monkeypatch):
    monkeypatch.setitem(config_map, "ratelimited", RateLimitedConfig)
    return create_app("ratelimited").test_client()


def test_limit_is_per_user(limited_client):
    allowed = int(WRITE_LIMIT.split("/")[0])

    for _ in range(allowed):
        res = limited_client.get("/api/v1/items", headers={"X-User-Id": "user-a"})
        assert res.status_code == 200

    res = limited_client.get("/api/v1/items", headers={"X-User-Id": "user-a"})
    assert res.status_code == 429

    res = limited_client.get("/api/v1/items", headers={"X-User-Id": "user-b"})
    assert res.status_code == 200


def test_health_exempt(limited_client):
    allowed = int(WRITE_LIMIT.split("/")[0])
    for _ in range(allowed + 5):
        res = limited_client.get("/api/v1/health/ready", headers={"X-User-Id": "user-a"})
        assert res.status_code == 200
