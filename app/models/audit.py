"""
Parts Request Tracker
Audit domain model.

Models:
    - AuditLog: immutable, append-only trail of status field changes.
"""

from datetime import datetime, timezone

from sqlalchemy import event

from app.core.exceptions import ValidationError
from app.models import db
from app.models.parts import PENDING, STATUS_AXES


class AuditLog(db.Model):
    """
    Immutable audit trail for every status transition.

    One row per successful write.  ``new_value`` is never NULL: a write
    of pending (NULL) is recorded as the literal ``"pending"``.
    ``request_item_id`` carries no FK so history outlives a deleted item.
    """

    __tablename__ = "audit_logs"
    __table_args__ = (
        db.Index("idx_audit_item", "request_item_id"),
        db.Index("idx_audit_changed_by", "changed_by"),
        db.Index("idx_audit_changed_at", "changed_at"),
    )

    id = db.Column(db.Integer, primary_key=True)
    request_item_id = db.Column(db.String(36), nullable=False)
    field_changed = db.Column(
        db.String(20), nullable=False,
        comment="boss_status | staff_status",
    )
    old_value = db.Column(db.String(20), nullable=True)
    new_value = db.Column(db.String(20), nullable=False)
    changed_by = db.Column(db.String(64), nullable=False)
    changed_at = db.Column(
        db.DateTime(timezone=True), nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "request_item_id": self.request_item_id,
            "field_changed": self.field_changed,
            "old_value": self.old_value,
            "new_value": self.new_value,
            "changed_by": self.changed_by,
            "changed_at": self.changed_at.isoformat() if self.changed_at else None,
        }

    def __repr__(self):
        return (
            f"<AuditLog {self.id}: {self.field_changed} "
            f"{self.old_value}->{self.new_value} on {self.request_item_id}>"
        )


@event.listens_for(AuditLog, "before_update")
def _refuse_update(mapper, connection, target):
    raise ValidationError(f"Audit entry {target.id} is immutable")


@event.listens_for(AuditLog, "before_delete")
def _refuse_delete(mapper, connection, target):
    raise ValidationError(f"Audit entry {target.id} cannot be deleted")


# ── Convenience writer ───────────────────────────────────────────────────────

def write_audit(
    *,
    item_id: str,
    field: str,
    old_value: str | None,
    new_value: str | None,
    actor_id: str,
) -> AuditLog:
    """
    Append a single audit row.  Uses ``flush`` so callers keep
    transaction control.

    Returns the (flushed) AuditLog instance.
    """
    if field not in STATUS_AXES:
        raise ValidationError(
            f"field must be one of: {', '.join(STATUS_AXES)}",
            details={"field": field},
        )

    log = AuditLog(
        request_item_id=str(item_id),
        field_changed=field,
        old_value=old_value,
        new_value=new_value if new_value is not None else PENDING,
        changed_by=str(actor_id),
    )
    db.session.add(log)
    db.session.flush()
    return log
