"""Status model — legal values, pending alias and display labels."""

import pytest

from app.core.exceptions import ValidationError
from app.services.status_model import (
    display_status,
    is_valid_boss_status,
    is_valid_staff_status,
    normalize_status,
    status_options,
    validate_axis,
    validate_status,
)


def test_boss_values():
    for value in (None, "ordered", "backorder", "discontinued"):
        assert is_valid_boss_status(value)
    assert not is_valid_boss_status("received")
    assert not is_valid_boss_status("shipped")


def test_staff_values():
    for value in (None, "received", "part_defective", "installed"):
        assert is_valid_staff_status(value)
    assert not is_valid_staff_status("ordered")


def test_pending_alias_normalized():
    assert normalize_status("pending") is None
    assert normalize_status("") is None
    assert normalize_status("ordered") == "ordered"


def test_validate_status_returns_stored_form():
    assert validate_status("boss_status", "ordered") == "ordered"
    assert validate_status("staff_status", "pending") is None
    assert validate_status("staff_status", None) is None


def test_validate_status_rejects_cross_axis_value():
    with pytest.raises(ValidationError) as exc:
        validate_status("boss_status", "installed")
    assert "boss_status" in exc.value.details


def test_validate_axis_rejects_unknown():
    with pytest.raises(ValidationError):
        validate_axis("priority")
    with pytest.raises(ValidationError):
        validate_status("priority", "ordered")


def test_status_options_pending_first():
    options = status_options()
    assert [o["value"] for o in options["boss_status"]] == [None, "ordered", "backorder", "discontinued"]
    assert options["staff_status"][0] == {"value": None, "label": "Pending"}


def test_display_status():
    assert display_status("part_defective") == "Part Defective"
    assert display_status(None) == "Pending"
    assert display_status("pending") == "Pending"
