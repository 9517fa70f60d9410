"""
Parts Request Tracker
Parts domain models.

Models:
    - PartsRequest: one staff submission, groups request items.
    - RequestItem: one requested part line with its two status axes.
    - UserRoleRecord: role assignment looked up at authorization time.

Status axes:
    boss_status   None (pending) → ordered | backorder | discontinued
    staff_status  None (pending) → received | part_defective | installed

``None`` is the stored form of "pending" on both axes.
"""

import uuid
from datetime import datetime, timezone

from app.models import db


# ── Helpers ──────────────────────────────────────────────────────────────────

def _uuid():
    return str(uuid.uuid4())


def _utcnow():
    return datetime.now(timezone.utc)


def _iso(value):
    return value.isoformat() if value else None


# ── Constants ────────────────────────────────────────────────────────────────

ROLE_STAFF = "staff"
ROLE_BOSS = "boss"
ROLE_SYSTEM_ADMIN = "system_admin"
ROLES = (ROLE_STAFF, ROLE_BOSS, ROLE_SYSTEM_ADMIN)

AXIS_BOSS = "boss_status"
AXIS_STAFF = "staff_status"
STATUS_AXES = (AXIS_BOSS, AXIS_STAFF)

PENDING = "pending"

BOSS_ORDERED = "ordered"
BOSS_BACKORDER = "backorder"
BOSS_DISCONTINUED = "discontinued"
BOSS_STATUSES = (None, BOSS_ORDERED, BOSS_BACKORDER, BOSS_DISCONTINUED)

STAFF_RECEIVED = "received"
STAFF_PART_DEFECTIVE = "part_defective"
STAFF_INSTALLED = "installed"
STAFF_STATUSES = (None, STAFF_RECEIVED, STAFF_PART_DEFECTIVE, STAFF_INSTALLED)

STATUS_VALUES = {
    AXIS_BOSS: BOSS_STATUSES,
    AXIS_STAFF: STAFF_STATUSES,
}


class PartsRequest(db.Model):
    """A single submission from staff; owns one or more request items."""

    __tablename__ = "requests"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    created_by = db.Column(db.String(64), nullable=False)
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)

    items = db.relationship(
        "RequestItem",
        back_populates="request",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="RequestItem.created_at",
    )

    def to_dict(self, include_items=False):
        d = {
            "id": self.id,
            "created_by": self.created_by,
            "notes": self.notes,
            "created_at": _iso(self.created_at),
        }
        if include_items:
            d["items"] = [i.to_dict() for i in self.items]
        return d

    def __repr__(self):
        return f"<PartsRequest {self.id}>"


class RequestItem(db.Model):
    """
    One requested part line.

    ``boss_status`` is written only through boss authority and
    ``staff_status`` only through staff authority (see
    app.services.status_service). ``installed_at`` is derived from
    ``staff_status`` and is never set directly by callers.
    """

    __tablename__ = "request_items"
    __table_args__ = (
        db.CheckConstraint("quantity >= 1", name="ck_request_items_quantity"),
        db.Index("idx_ri_job_bag", "job_bag_number"),
        db.Index("idx_ri_created_at", "created_at"),
    )

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    request_id = db.Column(
        db.String(36),
        db.ForeignKey("requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    job_bag_number = db.Column(db.String(64), nullable=False)
    manufacturer = db.Column(db.String(120), nullable=False)
    part_name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    quantity = db.Column(db.Integer, nullable=False, default=1)

    boss_status = db.Column(
        db.String(20), nullable=True,
        comment="NULL (pending) | ordered | backorder | discontinued",
    )
    staff_status = db.Column(
        db.String(20), nullable=True,
        comment="NULL (pending) | received | part_defective | installed",
    )
    installed_at = db.Column(db.DateTime(timezone=True), nullable=True)

    created_by = db.Column(db.String(64), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = db.Column(
        db.DateTime(timezone=True), nullable=False,
        default=_utcnow, onupdate=_utcnow,
    )

    request = db.relationship("PartsRequest", back_populates="items")

    @property
    def is_discontinued(self) -> bool:
        return self.boss_status == BOSS_DISCONTINUED

    def to_dict(self):
        return {
            "id": self.id,
            "request_id": self.request_id,
            "job_bag_number": self.job_bag_number,
            "manufacturer": self.manufacturer,
            "part_name": self.part_name,
            "description": self.description,
            "quantity": self.quantity,
            "boss_status": self.boss_status,
            "staff_status": self.staff_status,
            "installed_at": _iso(self.installed_at),
            "created_by": self.created_by,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }

    def __repr__(self):
        return f"<RequestItem {self.id} {self.job_bag_number}/{self.part_name}>"


class UserRoleRecord(db.Model):
    """Role assigned to a user. One role per user."""

    __tablename__ = "user_roles"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, unique=True, index=True)
    role = db.Column(db.String(20), nullable=False, comment="staff | boss | system_admin")
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "role": self.role,
            "created_at": _iso(self.created_at),
        }

    def __repr__(self):
        return f"<UserRoleRecord {self.user_id}={self.role}>"
