"""
Parts request intake and work-queue reads.

Rules:
  - db.session.commit() for request creation happens only in this file.
  - Reads never cache; the receiving queue recomputes visibility on every call.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import NotFoundError, PersistenceError, ValidationError
from app.models import db
from app.models.parts import (
    AXIS_BOSS,
    AXIS_STAFF,
    BOSS_BACKORDER,
    BOSS_DISCONTINUED,
    BOSS_ORDERED,
    PENDING,
    STAFF_INSTALLED,
    STAFF_PART_DEFECTIVE,
    STAFF_RECEIVED,
    PartsRequest,
    RequestItem,
)
from app.services.audit_trail import list_audit_log
from app.services.status_model import validate_status
from app.services.visibility import filter_receiving_queue

logger = logging.getLogger(__name__)

_REQUIRED_TEXT = (
    ("job_bag_number", "Job bag number is required"),
    ("manufacturer", "Manufacturer is required"),
    ("part_name", "Part name is required"),
)
QUANTITY_MESSAGE = "Quantity must be at least 1"


# ── Intake ────────────────────────────────────────────────────────────────────


def _clean(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def _valid_quantity(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


def validate_request_item(data: dict) -> list[str]:
    """Return one message per violated field; empty list when valid."""
    data = data or {}
    errors = [msg for field, msg in _REQUIRED_TEXT if not _clean(data.get(field))]
    if not _valid_quantity(data.get("quantity")):
        errors.append(QUANTITY_MESSAGE)
    return errors


def create_request(items: list[dict], created_by: str, notes: str | None = None) -> dict:
    """Create a request and its items in one transaction.

    Args:
        items:      Item payloads (job_bag_number, manufacturer, part_name,
                    description?, quantity).
        created_by: Submitting user id.
        notes:      Optional free text for the whole request.

    Returns:
        Serialized PartsRequest with its items.

    Raises:
        ValidationError: No items, or any item invalid. ``details`` maps the
            item index to its messages. Nothing is written.
        PersistenceError: Storage failure; nothing is written.
    """
    if not items:
        raise ValidationError("At least one item is required", details={"items": "required"})

    problems = {}
    for index, item in enumerate(items):
        errors = validate_request_item(item if isinstance(item, dict) else {})
        if errors:
            problems[str(index)] = errors
    if problems:
        raise ValidationError("One or more items are invalid", details=problems)

    try:
        request = PartsRequest(created_by=str(created_by), notes=_clean(notes) or None)
        db.session.add(request)
        for item in items:
            request.items.append(RequestItem(
                job_bag_number=_clean(item["job_bag_number"]),
                manufacturer=_clean(item["manufacturer"]),
                part_name=_clean(item["part_name"]),
                description=_clean(item.get("description")) or None,
                quantity=item["quantity"],
                created_by=str(created_by),
            ))
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Request creation failed, rolled back (created_by=%s)", created_by)
        raise PersistenceError("create_request")

    logger.info(
        "Request created id=%s items=%d created_by=%s",
        request.id, len(items), created_by,
    )
    return request.to_dict(include_items=True)


# ── Filtering ─────────────────────────────────────────────────────────────────


def _status_filter(axis: str, value):
    """None → no filter; otherwise the SQL condition for *value* on *axis*."""
    if value in (None, "", "all"):
        return None
    stored = validate_status(axis, value)
    column = getattr(RequestItem, axis)
    return column.is_(None) if stored is None else column == stored


def _items_query(filters: dict | None):
    filters = filters or {}
    stmt = select(RequestItem)

    search = _clean(filters.get("search"))
    if search:
        pattern = f"%{search.lower()}%"
        stmt = stmt.where(or_(
            func.lower(RequestItem.job_bag_number).like(pattern),
            func.lower(RequestItem.manufacturer).like(pattern),
            func.lower(RequestItem.part_name).like(pattern),
            func.lower(func.coalesce(RequestItem.description, "")).like(pattern),
        ))

    job_bag = _clean(filters.get("job_bag_number"))
    if job_bag:
        stmt = stmt.where(RequestItem.job_bag_number == job_bag)

    manufacturer = _clean(filters.get("manufacturer"))
    if manufacturer:
        stmt = stmt.where(RequestItem.manufacturer == manufacturer)

    for axis in (AXIS_BOSS, AXIS_STAFF):
        condition = _status_filter(axis, filters.get(axis))
        if condition is not None:
            stmt = stmt.where(condition)

    return stmt.order_by(RequestItem.created_at.desc(), RequestItem.id)


def list_items(filters: dict | None = None) -> list[RequestItem]:
    """Items matching *filters*, newest first."""
    return list(db.session.execute(_items_query(filters)).scalars())


def get_filter_options() -> dict:
    """Distinct manufacturers and job bag numbers, sorted."""
    manufacturers = db.session.execute(
        select(RequestItem.manufacturer).distinct().order_by(RequestItem.manufacturer)
    ).scalars()
    job_bags = db.session.execute(
        select(RequestItem.job_bag_number).distinct().order_by(RequestItem.job_bag_number)
    ).scalars()
    return {"manufacturers": list(manufacturers), "job_bag_numbers": list(job_bags)}


# ── Work queues ───────────────────────────────────────────────────────────────


def get_pick_list(filters: dict | None = None) -> dict:
    """Boss work queue: every matching item plus ordering counters."""
    items = list_items(filters)
    stats = {
        PENDING: sum(1 for i in items if i.boss_status is None),
        BOSS_ORDERED: sum(1 for i in items if i.boss_status == BOSS_ORDERED),
        BOSS_BACKORDER: sum(1 for i in items if i.boss_status == BOSS_BACKORDER),
        BOSS_DISCONTINUED: sum(1 for i in items if i.boss_status == BOSS_DISCONTINUED),
    }
    return {"items": [i.to_dict() for i in items], "stats": stats}


def get_receiving_queue(filters: dict | None = None, now: datetime | None = None) -> dict:
    """Staff work queue: matching items still inside the receiving window."""
    now = now or datetime.now(timezone.utc)
    items = filter_receiving_queue(list_items(filters), now)
    stats = {
        "awaiting": sum(
            1 for i in items if i.staff_status is None and i.boss_status == BOSS_ORDERED
        ),
        STAFF_RECEIVED: sum(1 for i in items if i.staff_status == STAFF_RECEIVED),
        STAFF_PART_DEFECTIVE: sum(1 for i in items if i.staff_status == STAFF_PART_DEFECTIVE),
        STAFF_INSTALLED: sum(1 for i in items if i.staff_status == STAFF_INSTALLED),
    }
    return {"items": [i.to_dict() for i in items], "stats": stats}


def get_job_bag(job_bag_number: str) -> dict:
    """All items of a job bag and their audit history, newest first."""
    job_bag_number = _clean(job_bag_number)
    items = list_items({"job_bag_number": job_bag_number}) if job_bag_number else []
    if not items:
        raise NotFoundError(resource="JobBag", resource_id=job_bag_number or None)
    history = list_audit_log([i.id for i in items])
    return {
        "job_bag_number": job_bag_number,
        "items": [i.to_dict() for i in items],
        "audit_logs": [log.to_dict() for log in history],
    }
