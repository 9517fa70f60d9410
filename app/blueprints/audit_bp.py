"""
Parts Request Tracker
Audit blueprint — read-only status history.

Endpoints:
    GET  /api/v1/audit?item_id=<id>[&item_id=<id>...]  — entries, newest first
    GET  /api/v1/audit/<int:log_id>                    — single audit entry
"""

from flask import Blueprint, jsonify, request

from app.models import db
from app.models.audit import AuditLog
from app.services.audit_trail import list_audit_log
from app.utils.errors import E, api_error

audit_bp = Blueprint("audit", __name__, url_prefix="/api/v1")


@audit_bp.route("/audit", methods=["GET"])
def list_audit_logs():
    """
    Return audit entries for the requested items.

    Query params:
        item_id  — repeatable; comma-separated values are also accepted
    """
    item_ids = []
    for raw in request.args.getlist("item_id"):
        item_ids.extend(part.strip() for part in raw.split(",") if part.strip())
    if not item_ids:
        return api_error(E.VALIDATION_REQUIRED, "item_id is required")

    logs = list_audit_log(item_ids)
    return jsonify({
        "audit_logs": [log.to_dict() for log in logs],
        "total": len(logs),
    })


@audit_bp.route("/audit/<int:log_id>", methods=["GET"])
def get_audit_log(log_id):
    log = db.session.get(AuditLog, log_id)
    if not log:
        return api_error(E.NOT_FOUND, "Audit log not found")
    return jsonify(log.to_dict())
