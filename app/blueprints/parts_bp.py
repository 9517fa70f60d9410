"""
Parts Request Tracker
Parts blueprint — request intake, work queues and status transitions.

Endpoints:
    GET    /api/v1/statuses                     — option lists for both axes
    GET    /api/v1/me                           — current user id + role
    GET    /api/v1/permissions                  — can the current user write ?axis=
    POST   /api/v1/requests                     — create request with items
    GET    /api/v1/items                        — filtered item list
    GET    /api/v1/items/filter-options         — distinct manufacturers / job bags
    GET    /api/v1/items/pick-list              — boss queue + counters
    GET    /api/v1/items/receiving              — staff queue (3-day window)
    GET    /api/v1/items/<id>                   — single item
    PATCH  /api/v1/items/<id>/boss-status       — {status}
    PATCH  /api/v1/items/<id>/staff-status      — {status}
    POST   /api/v1/items/bulk/boss-status       — {item_ids, status}
    POST   /api/v1/items/bulk/staff-status      — {item_ids, status}
    DELETE /api/v1/items/<id>                   — system_admin only
    POST   /api/v1/items/bulk-delete            — {item_ids}, system_admin only
    GET    /api/v1/job-bags/<job_bag_number>    — items + audit history

The actor comes from app.auth (g.current_user_id); the role is looked up
per request and the admin-override flag is loaded per request.
Service layer owns all business logic and commits.
"""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify, request
from werkzeug.exceptions import HTTPException

from app.auth import current_actor
from app.blueprints import item_filters, json_body
from app.config import load_status_config
from app.core.exceptions import NotFoundError, PermissionDenied, PersistenceError, ValidationError
from app.models import db
from app.models.parts import AXIS_BOSS, AXIS_STAFF, RequestItem
from app.services import request_service, status_service
from app.services.permission import AXIS_DELETE, get_permission
from app.services.status_model import status_options
from app.utils.errors import E, api_error

logger = logging.getLogger(__name__)

parts_bp = Blueprint("parts", __name__, url_prefix="/api/v1")


# ── Error handlers ────────────────────────────────────────────────────────────


@parts_bp.errorhandler(NotFoundError)
def _handle_not_found(error: NotFoundError):
    return api_error(E.NOT_FOUND, str(error))


@parts_bp.errorhandler(ValidationError)
def _handle_validation(error: ValidationError):
    return api_error(E.VALIDATION_INVALID, str(error), details=error.details)


@parts_bp.errorhandler(PermissionDenied)
def _handle_denied(error: PermissionDenied):
    return api_error(E.FORBIDDEN, str(error))


@parts_bp.errorhandler(PersistenceError)
def _handle_persistence(error: PersistenceError):
    return api_error(E.DATABASE, str(error))


@parts_bp.errorhandler(Exception)
def _handle_unexpected(error: Exception):
    if isinstance(error, HTTPException):
        return error
    logger.exception("Unexpected error in parts_bp endpoint=%s", request.endpoint)
    return api_error(E.INTERNAL, "Internal server error")


# ── Helpers ───────────────────────────────────────────────────────────────────


def _status_payload():
    """Return (status, None) or (None, error_response)."""
    data = json_body()
    if "status" not in data:
        return None, api_error(E.VALIDATION_REQUIRED, "status is required (null resets to pending)")
    return data["status"], None


def _item_ids_payload():
    data = json_body()
    ids = data.get("item_ids")
    if not isinstance(ids, list) or not ids:
        return None, api_error(E.VALIDATION_REQUIRED, "item_ids must be a non-empty list")
    return ids, None


def _update(item_id: str, axis: str):
    status, err = _status_payload()
    if err:
        return err
    user_id, role = current_actor()
    result = status_service.update_status(
        item_id, axis, status, user_id, role, load_status_config(),
    )
    return jsonify(result), 200


def _bulk_update(axis: str):
    ids, err = _item_ids_payload()
    if err:
        return err
    status, err = _status_payload()
    if err:
        return err
    user_id, role = current_actor()
    result = status_service.bulk_update_status(
        ids, axis, status, user_id, role, load_status_config(),
    )
    return jsonify(result), 200


# ═════════════════════════════════════════════════════════════════════════
# Reference data & permissions
# ═════════════════════════════════════════════════════════════════════════


@parts_bp.route("/statuses", methods=["GET"])
def list_statuses():
    return jsonify(status_options()), 200


@parts_bp.route("/me", methods=["GET"])
def whoami():
    user_id, role = current_actor()
    return jsonify({"user_id": user_id, "role": role}), 200


@parts_bp.route("/permissions", methods=["GET"])
def check_permission():
    """Whether the current user may write ?axis= (boss_status|staff_status|delete).

    Optional ?item_id= supplies the item's boss_status as context.
    """
    axis = request.args.get("axis", "")
    if axis not in (AXIS_BOSS, AXIS_STAFF, AXIS_DELETE):
        return api_error(E.VALIDATION_REQUIRED, "axis must be boss_status, staff_status or delete")

    context = {"admin_override_enabled": load_status_config().admin_override_enabled}
    item_id = request.args.get("item_id")
    if item_id:
        item = db.session.get(RequestItem, item_id)
        if item is None:
            raise NotFoundError(resource="RequestItem", resource_id=item_id)
        context["boss_status"] = item.boss_status

    user_id, role = current_actor()
    return jsonify({
        "user_id": user_id,
        "role": role,
        "axis": axis,
        "allowed": get_permission(role, axis, context),
    }), 200


# ═════════════════════════════════════════════════════════════════════════
# Intake & reads
# ═════════════════════════════════════════════════════════════════════════


@parts_bp.route("/requests", methods=["POST"])
def create_request():
    """Create a request.

    Body: { items: [{job_bag_number, manufacturer, part_name, description?, quantity}], notes? }
    Returns: created request with items (201).
    """
    data = json_body()
    items = data.get("items")
    if items is not None and not isinstance(items, list):
        return api_error(E.VALIDATION_REQUIRED, "items must be a list")
    user_id, _role = current_actor()
    created = request_service.create_request(items or [], user_id, data.get("notes"))
    return jsonify(created), 201


@parts_bp.route("/items", methods=["GET"])
def list_items():
    items = request_service.list_items(item_filters())
    return jsonify({"items": [i.to_dict() for i in items], "total": len(items)}), 200


@parts_bp.route("/items/filter-options", methods=["GET"])
def filter_options():
    return jsonify(request_service.get_filter_options()), 200


@parts_bp.route("/items/pick-list", methods=["GET"])
def pick_list():
    return jsonify(request_service.get_pick_list(item_filters())), 200


@parts_bp.route("/items/receiving", methods=["GET"])
def receiving_queue():
    return jsonify(request_service.get_receiving_queue(item_filters())), 200


@parts_bp.route("/items/<item_id>", methods=["GET"])
def get_item(item_id):
    item = db.session.get(RequestItem, item_id)
    if item is None:
        raise NotFoundError(resource="RequestItem", resource_id=item_id)
    return jsonify(item.to_dict()), 200


@parts_bp.route("/job-bags/<path:job_bag_number>", methods=["GET"])
def job_bag(job_bag_number):
    return jsonify(request_service.get_job_bag(job_bag_number)), 200


# ═════════════════════════════════════════════════════════════════════════
# Status transitions
# ═════════════════════════════════════════════════════════════════════════


@parts_bp.route("/items/<item_id>/boss-status", methods=["PATCH"])
def update_boss_status(item_id):
    return _update(item_id, AXIS_BOSS)


@parts_bp.route("/items/<item_id>/staff-status", methods=["PATCH"])
def update_staff_status(item_id):
    return _update(item_id, AXIS_STAFF)


@parts_bp.route("/items/bulk/boss-status", methods=["POST"])
def bulk_update_boss_status():
    return _bulk_update(AXIS_BOSS)


@parts_bp.route("/items/bulk/staff-status", methods=["POST"])
def bulk_update_staff_status():
    return _bulk_update(AXIS_STAFF)


# ═════════════════════════════════════════════════════════════════════════
# Deletion
# ═════════════════════════════════════════════════════════════════════════


@parts_bp.route("/items/<item_id>", methods=["DELETE"])
def delete_item(item_id):
    user_id, role = current_actor()
    status_service.delete_item(item_id, user_id, role)
    return "", 204


@parts_bp.route("/items/bulk-delete", methods=["POST"])
def bulk_delete_items():
    ids, err = _item_ids_payload()
    if err:
        return err
    user_id, role = current_actor()
    return jsonify(status_service.bulk_delete_items(ids, user_id, role)), 200
