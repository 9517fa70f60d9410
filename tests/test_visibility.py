"""Receiving queue visibility — three-day window after installation."""

from datetime import datetime, timedelta, timezone

from app.services.visibility import filter_receiving_queue, is_visible_in_receiving_queue

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def _item(staff_status, installed_at=None):
    return {"id": "x", "staff_status": staff_status, "installed_at": installed_at}


def test_installed_two_days_ago_visible():
    assert is_visible_in_receiving_queue(_item("installed", NOW - timedelta(days=2)), NOW)


def test_installed_four_days_ago_hidden():
    assert not is_visible_in_receiving_queue(_item("installed", NOW - timedelta(days=4)), NOW)


def test_exactly_three_days_still_visible():
    assert is_visible_in_receiving_queue(_item("installed", NOW - timedelta(days=3)), NOW)


def test_received_always_visible():
    assert is_visible_in_receiving_queue(_item("received"), NOW)
    assert is_visible_in_receiving_queue(_item(None), NOW)


def test_installed_without_timestamp_visible():
    assert is_visible_in_receiving_queue(_item("installed", None), NOW)


def test_naive_and_iso_timestamps_treated_as_utc():
    naive = (NOW - timedelta(days=5)).replace(tzinfo=None)
    assert not is_visible_in_receiving_queue(_item("installed", naive), NOW)
    iso = (NOW - timedelta(hours=1)).isoformat()
    assert is_visible_in_receiving_queue(_item("installed", iso), NOW)


def test_filter_keeps_order():
    items = [
        _item("received"),
        _item("installed", NOW - timedelta(days=10)),
        _item("installed", NOW - timedelta(days=1)),
    ]
    items[0]["id"], items[1]["id"], items[2]["id"] = "a", "b", "c"
    assert [i["id"] for i in filter_receiving_queue(items, NOW)] == ["a", "c"]


def test_zulu_suffix_accepted():
    assert is_visible_in_receiving_queue(_item("installed", "2026-03-09T12:00:00Z"), NOW)
    assert not is_visible_in_receiving_queue(_item("installed", "2026-03-05T12:00:00Z"), NOW)
