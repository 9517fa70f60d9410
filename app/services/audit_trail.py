"""
Audit Trail — append-only record of status changes.

Write side is ``record`` (flush only; the caller owns the transaction).
Read side is ``list_audit_log``, newest first: activity feeds rely on
that order.
"""

from sqlalchemy import select

from app.models import db
from app.models.audit import AuditLog, write_audit


def record(item_id: str, field: str, old_value, new_value, actor_id: str) -> AuditLog:
    """Append one entry; ``None`` as *new_value* is stored as ``"pending"``."""
    return write_audit(
        item_id=item_id,
        field=field,
        old_value=old_value,
        new_value=new_value,
        actor_id=actor_id,
    )


def list_audit_log(item_ids) -> list[AuditLog]:
    """All entries for *item_ids*, ordered by ``changed_at`` descending."""
    ids = [str(i) for i in dict.fromkeys(item_ids or [])]
    if not ids:
        return []
    stmt = (
        select(AuditLog)
        .where(AuditLog.request_item_id.in_(ids))
        .order_by(AuditLog.changed_at.desc(), AuditLog.id.desc())
    )
    return list(db.session.execute(stmt).scalars())
