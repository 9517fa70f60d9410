"""
Role registry — per-user role lookup and operator assignment.

Roles are looked up at authorization time on every write; nothing here
caches. The status core never mutates roles; only the operator CLI
(``flask assign-role``) and the seed script call ``assign_role``.
"""

import logging

from sqlalchemy import select

from app.core.exceptions import ValidationError
from app.models import db
from app.models.parts import ROLES, UserRoleRecord

logger = logging.getLogger(__name__)


def get_user_role(user_id: str | None) -> str | None:
    """Return the user's role, or None if the user has no role record."""
    if not user_id:
        return None
    return db.session.execute(
        select(UserRoleRecord.role).where(UserRoleRecord.user_id == str(user_id))
    ).scalar_one_or_none()


def assign_role(user_id: str, role: str) -> dict:
    """Create or replace the role record for *user_id*. Commits."""
    user_id = (user_id or "").strip()
    if not user_id:
        raise ValidationError("user_id is required", details={"user_id": "required"})
    if role not in ROLES:
        raise ValidationError(
            f"role must be one of: {', '.join(ROLES)}",
            details={"role": role},
        )

    record = db.session.execute(
        select(UserRoleRecord).where(UserRoleRecord.user_id == user_id)
    ).scalar_one_or_none()
    previous = record.role if record else None
    if record is None:
        record = UserRoleRecord(user_id=user_id, role=role)
        db.session.add(record)
    else:
        record.role = role

    db.session.commit()
    logger.info("Role assigned user_id=%s role=%s previous=%s", user_id, role, previous)
    return record.to_dict()
