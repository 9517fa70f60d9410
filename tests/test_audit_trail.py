"""
Audit trail tests.

Covers:
  - write_audit / record basics and the "pending" literal
  - list_audit_log ordering (newest first) and multi-item reads
  - Immutability: flushed rows refuse update and delete
  - Audit API (list, single, 404, missing item_id)
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import ValidationError
from app.models import db
from app.models.audit import AuditLog, write_audit
from app.services.audit_trail import list_audit_log, record
from app.services.status_service import update_status


class TestWrite:
    def test_record_flushes_with_id(self):
        log = record("item-1", "boss_status", None, "ordered", "boss-1")
        assert log.id is not None
        assert log.to_dict()["new_value"] == "ordered"

    def test_none_new_value_stored_as_pending(self):
        log = write_audit(
            item_id="item-1", field="staff_status", old_value="received",
            new_value=None, actor_id="staff-1",
        )
        assert log.new_value == "pending"
        assert log.old_value == "received"

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            record("item-1", "quantity", "1", "2", "staff-1")


class TestRead:
    def test_newest_first(self):
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        for offset, value in ((0, "ordered"), (2, "discontinued"), (1, "backorder")):
            db.session.add(AuditLog(
                request_item_id="item-1", field_changed="boss_status",
                new_value=value, changed_by="boss-1",
                changed_at=base + timedelta(hours=offset),
            ))
        db.session.commit()

        logs = list_audit_log(["item-1"])
        assert [log.new_value for log in logs] == ["discontinued", "backorder", "ordered"]

    def test_ties_broken_by_id(self):
        same = datetime(2026, 1, 1, tzinfo=timezone.utc)
        for value in ("ordered", "backorder"):
            db.session.add(AuditLog(
                request_item_id="item-1", field_changed="boss_status",
                new_value=value, changed_by="boss-1", changed_at=same,
            ))
        db.session.commit()

        assert [log.new_value for log in list_audit_log(["item-1"])] == ["backorder", "ordered"]

    def test_multiple_items_and_empty_list(self):
        record("a", "boss_status", None, "ordered", "boss-1")
        record("b", "boss_status", None, "backorder", "boss-1")
        record("c", "boss_status", None, "ordered", "boss-1")
        db.session.commit()

        assert {log.request_item_id for log in list_audit_log(["a", "b", "a"])} == {"a", "b"}
        assert list_audit_log([]) == []


class TestImmutability:
    def test_update_refused(self):
        log = record("item-1", "boss_status", None, "ordered", "boss-1")
        db.session.commit()

        log.new_value = "discontinued"
        with pytest.raises(ValidationError):
            db.session.commit()
        db.session.rollback()

        assert db.session.get(AuditLog, log.id).new_value == "ordered"

    def test_delete_refused(self):
        log = record("item-1", "boss_status", None, "ordered", "boss-1")
        db.session.commit()

        db.session.delete(log)
        with pytest.raises(ValidationError):
            db.session.flush()
        db.session.rollback()

        assert AuditLog.query.count() == 1


class TestAuditAPI:
    def test_list_for_item(self, client, roles, make_item, as_user):
        item = make_item()
        update_status(item["id"], "boss_status", "ordered", "boss-1", "boss")
        update_status(item["id"], "staff_status", "received", "staff-1", "staff")

        res = client.get(f"/api/v1/audit?item_id={item['id']}", headers=as_user("staff-1"))
        assert res.status_code == 200
        data = res.get_json()
        assert data["total"] == 2
        assert data["audit_logs"][0]["field_changed"] == "staff_status"

    def test_comma_separated_ids(self, client, roles, make_item, as_user):
        a = make_item(part_name="A")
        b = make_item(part_name="B")
        update_status(a["id"], "boss_status", "ordered", "boss-1", "boss")
        update_status(b["id"], "boss_status", "ordered", "boss-1", "boss")

        res = client.get(f"/api/v1/audit?item_id={a['id']},{b['id']}", headers=as_user("boss-1"))
        assert res.get_json()["total"] == 2

    def test_item_id_required(self, client, as_user):
        res = client.get("/api/v1/audit", headers=as_user("staff-1"))
        assert res.status_code == 400
        assert res.get_json()["code"] == "ERR_VALIDATION_REQUIRED"

    def test_single_and_404(self, client, as_user):
        log = record("item-1", "boss_status", None, "ordered", "boss-1")
        db.session.commit()

        res = client.get(f"/api/v1/audit/{log.id}", headers=as_user("staff-1"))
        assert res.status_code == 200
        assert res.get_json()["new_value"] == "ordered"

        res = client.get("/api/v1/audit/99999", headers=as_user("staff-1"))
        assert res.status_code == 404
