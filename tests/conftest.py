"""
Shared pytest fixtures for the Parts Request Tracker test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - roles: staff-1 / staff-2 / boss-1 / admin-1 role records
    - make_item: factory for request items created through the intake service
    - as_user: X-User-Id header factory for API tests
"""

import pytest

from app import create_app
from app.models import db as _db
from app.models.parts import UserRoleRecord
from app.services.request_service import create_request

STAFF = "staff-1"
STAFF_2 = "staff-2"
BOSS = "boss-1"
ADMIN = "admin-1"


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    return application


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db, monkeypatch):
    """Per-test: open app context, rollback after test, recreate tables."""
    # The admin override is read from the environment per request
    monkeypatch.delenv("ADMIN_CAN_MODIFY_STAFF_STATUS", raising=False)
    monkeypatch.delenv("API_AUTH_ENABLED", raising=False)
    monkeypatch.delenv("API_KEYS", raising=False)
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Convenience fixtures ─────────────────────────────────────────────────


@pytest.fixture()
def roles():
    """Seed one user per role (plus a second staff user)."""
    for user_id, role in (
        (STAFF, "staff"),
        (STAFF_2, "staff"),
        (BOSS, "boss"),
        (ADMIN, "system_admin"),
    ):
        _db.session.add(UserRoleRecord(user_id=user_id, role=role))
    _db.session.commit()
    return {"staff": STAFF, "staff_2": STAFF_2, "boss": BOSS, "admin": ADMIN}


@pytest.fixture()
def make_item():
    """Factory: create a one-item request and return the item dict."""

    def _make(job_bag_number="JB-1", manufacturer="Bosch", part_name="Pads",
              quantity=1, description=None, created_by=STAFF):
        created = create_request(
            [{
                "job_bag_number": job_bag_number,
                "manufacturer": manufacturer,
                "part_name": part_name,
                "description": description,
                "quantity": quantity,
            }],
            created_by,
        )
        return created["items"][0]

    return _make


@pytest.fixture()
def as_user():
    """Header factory: identify the caller by X-User-Id (auth disabled in testing)."""

    def _headers(user_id):
        return {"X-User-Id": user_id}

    return _headers
