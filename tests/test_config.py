"""Per-request status configuration (admin override flag)."""

import pytest

from app.config import StatusConfig, load_status_config


def test_default_is_disabled():
    assert load_status_config() == StatusConfig(admin_override_enabled=False)


@pytest.mark.parametrize("raw", ["true", "1", "YES", " on "])
def test_env_truthy_values(monkeypatch, raw):
    monkeypatch.setenv("ADMIN_CAN_MODIFY_STAFF_STATUS", raw)
    assert load_status_config().admin_override_enabled is True


def test_env_wins_over_app_config(monkeypatch):
    monkeypatch.setenv("ADMIN_CAN_MODIFY_STAFF_STATUS", "false")
    cfg = load_status_config({"ADMIN_CAN_MODIFY_STAFF_STATUS": "true"})
    assert cfg.admin_override_enabled is False


def test_falls_back_to_app_config(app):
    app.config["ADMIN_CAN_MODIFY_STAFF_STATUS"] = "true"
    try:
        assert load_status_config().admin_override_enabled is True
    finally:
        app.config["ADMIN_CAN_MODIFY_STAFF_STATUS"] = "false"


def test_read_on_every_call(monkeypatch):
    assert load_status_config().admin_override_enabled is False
    monkeypatch.setenv("ADMIN_CAN_MODIFY_STAFF_STATUS", "true")
    assert load_status_config().admin_override_enabled is True
