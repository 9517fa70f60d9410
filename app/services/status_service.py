"""
Request Item Status Service — transition executor.

Applies status changes to request items with:
  - Value validation against the status model
  - Role-based permission check (system_admin bypasses explicitly)
  - Derived installed_at side effect for staff_status
  - Audit entry written in the same transaction as the status change

Each status update is one unit of work: the status write and the audit
insert commit together or roll back together. Bulk operations are a
sequence of such units, best-effort, with every failure reported.

There is no version column or row lock. Two concurrent writers to the
same field both succeed (last commit wins) and each audit entry carries
whatever old value its writer read.

Usage:
    from app.services.status_service import update_status

    result = update_status(
        item_id="abc",
        axis="boss_status",
        new_value="ordered",
        actor_id="user-1",
        actor_role="boss",
        config=load_status_config(),
    )
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from app.config import StatusConfig
from app.core.exceptions import NotFoundError, PermissionDenied, PersistenceError, ValidationError
from app.models import db
from app.models.parts import AXIS_STAFF, ROLE_SYSTEM_ADMIN, STAFF_INSTALLED, RequestItem
from app.services import audit_trail
from app.services.permission import can_delete, check_status_write, role_may_write_axis
from app.services.status_model import validate_status
from app.utils.errors import E

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _get_item(item_id: str) -> RequestItem:
    item = db.session.get(RequestItem, str(item_id)) if item_id else None
    if item is None:
        raise NotFoundError(resource="RequestItem", resource_id=item_id)
    return item


def _error_code(exc: Exception) -> str:
    if isinstance(exc, NotFoundError):
        return E.NOT_FOUND
    if isinstance(exc, PermissionDenied):
        return E.FORBIDDEN
    if isinstance(exc, ValidationError):
        return E.VALIDATION_INVALID
    return E.DATABASE


def _unique_ids(item_ids) -> list[str]:
    bad = [
        i for i in (item_ids or [])
        if isinstance(i, bool) or not isinstance(i, (str, int))
    ]
    if bad:
        raise ValidationError(
            "item_ids must contain only string or integer ids",
            details={"item_ids": f"{len(bad)} malformed id(s)"},
        )
    ids = [str(i) for i in dict.fromkeys(item_ids or []) if i]
    if not ids:
        raise ValidationError("item_ids is required", details={"item_ids": "must be a non-empty list"})
    return ids


def _authorize(item: RequestItem, axis: str, actor_id: str, actor_role: str | None, config: StatusConfig):
    if actor_role == ROLE_SYSTEM_ADMIN:
        logger.info(
            "system_admin bypass: user=%s writes %s on item=%s",
            actor_id, axis, item.id,
        )
        return
    try:
        check_status_write(
            axis,
            role=actor_role,
            user_id=actor_id,
            current_boss_status=item.boss_status,
            admin_override_enabled=config.admin_override_enabled,
        )
    except PermissionDenied:
        logger.warning(
            "Status write denied: user=%s role=%s axis=%s item=%s boss_status=%s",
            actor_id, actor_role, axis, item.id, item.boss_status,
        )
        raise


def update_status(
    item_id: str,
    axis: str,
    new_value,
    actor_id: str,
    actor_role: str | None,
    config: StatusConfig | None = None,
) -> dict:
    """
    Execute a single status transition.

    Args:
        item_id: RequestItem id
        axis: boss_status | staff_status
        new_value: target status; None or "pending" resets to pending
        actor_id: who is performing the write (recorded in the audit entry)
        actor_role: staff | boss | system_admin
        config: per-request StatusConfig (admin override flag)

    Returns:
        {"item": {...}, "field", "old_value", "new_value", "audit_id"}

    Raises:
        NotFoundError, ValidationError, PermissionDenied, PersistenceError
    """
    config = config or StatusConfig()

    # 1. Load
    item = _get_item(item_id)

    # 2. Validate (axis, then value)
    stored = validate_status(axis, new_value)

    # 3. Authorize
    _authorize(item, axis, actor_id, actor_role, config)

    # 4-5. Apply + audit, one transaction
    old_value = getattr(item, axis)
    try:
        setattr(item, axis, stored)
        if axis == AXIS_STAFF:
            # Unconditional: any non-installed write clears installed_at.
            item.installed_at = _utcnow() if stored == STAFF_INSTALLED else None
        item.updated_at = _utcnow()
        entry = audit_trail.record(item.id, axis, old_value, stored, actor_id)
        audit_id = entry.id
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Status update failed, rolled back: item=%s axis=%s", item_id, axis)
        raise PersistenceError("update_status", str(item_id))

    logger.info(
        "Status updated: item=%s %s %s -> %s by %s",
        item.id, axis, old_value, stored, actor_id,
    )
    return {
        "item": item.to_dict(),
        "field": axis,
        "old_value": old_value,
        "new_value": stored,
        "audit_id": audit_id,
    }


def bulk_update_status(
    item_ids,
    axis: str,
    new_value,
    actor_id: str,
    actor_role: str | None,
    config: StatusConfig | None = None,
) -> dict:
    """
    Apply one status value to many items, each as its own unit of work.

    The value and the role's ability to write the axis at all are checked
    up front; per-item failures (missing, discontinued, storage) are
    collected and the remaining items are still attempted.

    Returns:
        {"succeeded": [id, ...], "failed": [{"id", "error", "code"}, ...]}
    """
    config = config or StatusConfig()
    validate_status(axis, new_value)
    ids = _unique_ids(item_ids)

    if actor_role != ROLE_SYSTEM_ADMIN and not role_may_write_axis(
        actor_role, axis, config.admin_override_enabled
    ):
        logger.warning("Bulk %s denied for user=%s role=%s", axis, actor_id, actor_role)
        raise PermissionDenied(actor_id, actor_role, axis)

    succeeded, failed = [], []
    for item_id in ids:
        try:
            update_status(item_id, axis, new_value, actor_id, actor_role, config)
        except (NotFoundError, PermissionDenied, ValidationError, PersistenceError) as exc:
            logger.warning("Bulk %s failed for item=%s: %s", axis, item_id, exc)
            failed.append({"id": item_id, "error": str(exc), "code": _error_code(exc)})
        else:
            succeeded.append(item_id)

    logger.info(
        "Bulk %s -> %s by %s: %d succeeded, %d failed",
        axis, new_value, actor_id, len(succeeded), len(failed),
    )
    return {"succeeded": succeeded, "failed": failed}


# ── Deletion (system_admin only, not audited) ────────────────────────────────


def _check_delete(actor_id: str, actor_role: str | None) -> None:
    if not can_delete(actor_role):
        logger.warning("Delete denied: user=%s role=%s", actor_id, actor_role)
        raise PermissionDenied(actor_id, actor_role, "delete", "only system_admin may delete items")


def delete_item(item_id: str, actor_id: str, actor_role: str | None) -> None:
    """
    Hard-delete a request item.

    Raises:
        PermissionDenied, NotFoundError, PersistenceError
    """
    _check_delete(actor_id, actor_role)
    item = _get_item(item_id)
    try:
        db.session.delete(item)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Delete failed, rolled back: item=%s", item_id)
        raise PersistenceError("delete_item", str(item_id))
    logger.info("Request item deleted: item=%s by %s", item_id, actor_id)


def bulk_delete_items(item_ids, actor_id: str, actor_role: str | None) -> dict:
    """Delete many items, best-effort. Same result shape as bulk_update_status."""
    _check_delete(actor_id, actor_role)
    ids = _unique_ids(item_ids)

    succeeded, failed = [], []
    for item_id in ids:
        try:
            delete_item(item_id, actor_id, actor_role)
        except (NotFoundError, PersistenceError) as exc:
            logger.warning("Bulk delete failed for item=%s: %s", item_id, exc)
            failed.append({"id": item_id, "error": str(exc), "code": _error_code(exc)})
        else:
            succeeded.append(item_id)
    return {"succeeded": succeeded, "failed": failed}
