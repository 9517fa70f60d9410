"""
Receiving queue visibility.

An installed item drops out of the receiving queue once its installation
is more than three days old. Nothing is persisted: the rule is evaluated
on every read.
"""

from datetime import datetime, timedelta, timezone

from app.models.parts import STAFF_INSTALLED

RECEIVING_WINDOW = timedelta(days=3)


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; stored values are UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _field(item, name):
    if isinstance(item, dict):
        return item.get(name)
    return getattr(item, name, None)


def is_visible_in_receiving_queue(item, now: datetime | None = None) -> bool:
    """
    False only for an item with ``staff_status == "installed"`` whose
    ``installed_at`` is more than three days before *now*.

    *item* may be a RequestItem or a dict with the same keys; an ISO
    string ``installed_at`` is accepted.
    """
    if _field(item, "staff_status") != STAFF_INSTALLED:
        return True
    installed_at = _field(item, "installed_at")
    if installed_at is None:
        return True
    if isinstance(installed_at, str):
        # fromisoformat only accepts a "Z" suffix from Python 3.11
        if installed_at.endswith("Z"):
            installed_at = installed_at[:-1] + "+00:00"
        installed_at = datetime.fromisoformat(installed_at)
    now = _aware(now or datetime.now(timezone.utc))
    return now - _aware(installed_at) <= RECEIVING_WINDOW


def filter_receiving_queue(items, now: datetime | None = None) -> list:
    now = now or datetime.now(timezone.utc)
    return [item for item in items if is_visible_in_receiving_queue(item, now)]
