"""
Status write permissions — role-based predicate table.

Decides whether a role may write a status axis. Everything here is pure:
no DB access, no caching, no ambient config. Callers pass the item's
current boss status and the admin-override flag explicitly and the
decision is re-evaluated on every write attempt.

Rules (keyed by (role, axis)):
    (boss,  boss_status)   always
    (staff, staff_status)  unless the item is discontinued
    (boss,  staff_status)  only with admin override enabled
    anything else          denied

system_admin is NOT in the table. Its universal grant is applied at the
call site (app.services.status_service) so the bypass stays explicit
and shows up in the logs.

Usage:
    from app.services.permission import can_write_staff_status, check_status_write

    if can_write_staff_status("staff", item.boss_status, config.admin_override_enabled):
        ...

    # Raises PermissionDenied if not allowed
    check_status_write("staff_status", role="boss", user_id="u-1",
                       current_boss_status=None, admin_override_enabled=False)
"""

from app.core.exceptions import PermissionDenied
from app.models.parts import (
    AXIS_BOSS,
    AXIS_STAFF,
    BOSS_DISCONTINUED,
    BOSS_STATUSES,
    ROLE_BOSS,
    ROLE_STAFF,
    ROLE_SYSTEM_ADMIN,
)

AXIS_DELETE = "delete"


def _always(current_boss_status, admin_override_enabled):
    return True


def _unless_discontinued(current_boss_status, admin_override_enabled):
    return current_boss_status != BOSS_DISCONTINUED


def _with_admin_override(current_boss_status, admin_override_enabled):
    return bool(admin_override_enabled)


STATUS_WRITE_RULES = {
    (ROLE_BOSS, AXIS_BOSS): _always,
    (ROLE_STAFF, AXIS_STAFF): _unless_discontinued,
    (ROLE_BOSS, AXIS_STAFF): _with_admin_override,
}


def _evaluate(role, axis, current_boss_status=None, admin_override_enabled=False) -> bool:
    rule = STATUS_WRITE_RULES.get((role, axis))
    if rule is None:
        return False
    return rule(current_boss_status, admin_override_enabled)


def can_write_boss_status(role: str | None) -> bool:
    """True iff *role* is boss."""
    return _evaluate(role, AXIS_BOSS)


def can_write_staff_status(
    role: str | None,
    current_boss_status: str | None,
    admin_override_enabled: bool = False,
) -> bool:
    """
    Staff may write unless the item is discontinued; boss only with the
    deployment-wide admin override; everyone else is denied.
    """
    return _evaluate(role, AXIS_STAFF, current_boss_status, admin_override_enabled)


def role_may_write_axis(role: str | None, axis: str, admin_override_enabled: bool = False) -> bool:
    """True if *role* can write *axis* for at least one boss status."""
    return any(
        _evaluate(role, axis, boss_status, admin_override_enabled)
        for boss_status in BOSS_STATUSES
    )


def can_delete(role: str | None) -> bool:
    return role == ROLE_SYSTEM_ADMIN


def get_permission(role: str | None, axis: str, context: dict | None = None) -> bool:
    """
    Presentation-facing permission check (decides whether controls render
    as interactive).

    Args:
        role: staff | boss | system_admin (None for users without a role).
        axis: boss_status | staff_status | delete
        context: optional {"boss_status": ..., "admin_override_enabled": bool}

    Returns:
        True if the role may perform the write. Mirrors the system_admin
        call-site bypass so the UI matches what the server will accept.
    """
    context = context or {}
    if axis == AXIS_DELETE:
        return can_delete(role)
    if role == ROLE_SYSTEM_ADMIN:
        return True
    return _evaluate(
        role,
        axis,
        context.get("boss_status"),
        context.get("admin_override_enabled", False),
    )


def check_status_write(
    axis: str,
    *,
    role: str | None,
    user_id: str | None,
    current_boss_status: str | None,
    admin_override_enabled: bool,
) -> None:
    """
    Assert *role* may write *axis*; raise PermissionDenied if not.

    Does not know about the system_admin bypass; callers skip this check
    for admins explicitly.
    """
    if _evaluate(role, axis, current_boss_status, admin_override_enabled):
        return

    reason = None
    if axis == AXIS_STAFF and role == ROLE_STAFF and current_boss_status == BOSS_DISCONTINUED:
        reason = "item is discontinued"
    elif axis == AXIS_STAFF and role == ROLE_BOSS:
        reason = "admin override is disabled"
    elif role is None:
        reason = "user has no role"
    raise PermissionDenied(user_id, role, axis, reason)
