"""
Status write permissions — predicate table tests.

Covers:
  - boss_status: boss only
  - staff_status: staff unless discontinued, boss only with admin override
  - unknown / missing roles denied everywhere
  - get_permission mirrors the system_admin bypass; delete is admin-only
  - check_status_write raises PermissionDenied with a reason
"""

import pytest

from app.core.exceptions import PermissionDenied
from app.services.permission import (
    AXIS_DELETE,
    can_delete,
    can_write_boss_status,
    can_write_staff_status,
    check_status_write,
    get_permission,
    role_may_write_axis,
)


class TestBossStatus:
    def test_boss_may_write(self):
        assert can_write_boss_status("boss") is True

    @pytest.mark.parametrize("role", ["staff", "system_admin", None, "mechanic"])
    def test_other_roles_may_not(self, role):
        # system_admin is granted at the call site, not by the table
        assert can_write_boss_status(role) is False


class TestStaffStatus:
    @pytest.mark.parametrize("boss_status", [None, "ordered", "backorder"])
    def test_staff_may_write_unless_discontinued(self, boss_status):
        assert can_write_staff_status("staff", boss_status) is True

    def test_staff_blocked_on_discontinued(self):
        assert can_write_staff_status("staff", "discontinued") is False

    def test_discontinued_lock_ignores_override(self):
        assert can_write_staff_status("staff", "discontinued", admin_override_enabled=True) is False

    def test_boss_needs_override(self):
        assert can_write_staff_status("boss", None) is False
        assert can_write_staff_status("boss", None, admin_override_enabled=True) is True

    def test_boss_with_override_may_write_discontinued_item(self):
        assert can_write_staff_status("boss", "discontinued", admin_override_enabled=True) is True

    def test_no_role_denied(self):
        assert can_write_staff_status(None, None, admin_override_enabled=True) is False


class TestRoleMayWriteAxis:
    def test_staff_cannot_ever_write_boss_status(self):
        assert role_may_write_axis("staff", "boss_status") is False

    def test_staff_can_write_staff_status_somewhere(self):
        assert role_may_write_axis("staff", "staff_status") is True

    def test_boss_staff_axis_follows_override(self):
        assert role_may_write_axis("boss", "staff_status") is False
        assert role_may_write_axis("boss", "staff_status", admin_override_enabled=True) is True


class TestGetPermission:
    def test_admin_allowed_on_both_axes(self):
        assert get_permission("system_admin", "boss_status") is True
        assert get_permission("system_admin", "staff_status", {"boss_status": "discontinued"}) is True

    def test_context_boss_status_respected(self):
        assert get_permission("staff", "staff_status", {"boss_status": "discontinued"}) is False
        assert get_permission("staff", "staff_status", {"boss_status": "ordered"}) is True

    def test_context_override_respected(self):
        assert get_permission("boss", "staff_status", {"admin_override_enabled": True}) is True
        assert get_permission("boss", "staff_status") is False

    def test_delete_admin_only(self):
        assert get_permission("system_admin", AXIS_DELETE) is True
        assert get_permission("boss", AXIS_DELETE) is False
        assert can_delete("staff") is False


class TestCheckStatusWrite:
    def test_allowed_returns_none(self):
        assert check_status_write(
            "boss_status", role="boss", user_id="b", current_boss_status=None,
            admin_override_enabled=False,
        ) is None

    def test_discontinued_reason(self):
        with pytest.raises(PermissionDenied) as exc:
            check_status_write(
                "staff_status", role="staff", user_id="s", current_boss_status="discontinued",
                admin_override_enabled=False,
            )
        assert exc.value.reason == "item is discontinued"
        assert exc.value.action == "staff_status"

    def test_override_disabled_reason(self):
        with pytest.raises(PermissionDenied) as exc:
            check_status_write(
                "staff_status", role="boss", user_id="b", current_boss_status=None,
                admin_override_enabled=False,
            )
        assert exc.value.reason == "admin override is disabled"

    def test_no_role_reason(self):
        with pytest.raises(PermissionDenied) as exc:
            check_status_write(
                "boss_status", role=None, user_id="ghost", current_boss_status=None,
                admin_override_enabled=False,
            )
        assert exc.value.reason == "user has no role"
        assert "ghost" in str(exc.value)
