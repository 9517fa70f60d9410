"""
Health check blueprint.

Endpoints:
    GET /api/v1/health/ready  — simple 200 for load balancers
    GET /api/v1/health/live   — database round-trip, role registry, status config
"""

import logging
import time

from flask import Blueprint, current_app, jsonify
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from app.config import load_status_config
from app.models import db
from app.models.parts import ROLE_SYSTEM_ADMIN, ROLES, UserRoleRecord

logger = logging.getLogger(__name__)

health_bp = Blueprint("health", __name__, url_prefix="/api/v1/health")


def _role_counts() -> dict:
    rows = db.session.execute(
        select(UserRoleRecord.role, func.count()).group_by(UserRoleRecord.role)
    ).all()
    counts = dict.fromkeys(ROLES, 0)
    counts.update({role: n for role, n in rows})
    return counts


@health_bp.route("/ready", methods=["GET"])
def ready():
    return jsonify({"status": "ok"}), 200


@health_bp.route("/live", methods=["GET"])
def live():
    """Liveness with dependency status.

    Only a failed database makes the app degraded (503). A registry with no
    system_admin is reported as a warning: nobody could delete items.
    """
    checks = {}
    overall = True

    try:
        t0 = time.perf_counter()
        roles = _role_counts()
        db_ms = (time.perf_counter() - t0) * 1000
        checks["database"] = {"status": "ok", "latency_ms": round(db_ms, 1)}
        checks["roles"] = {
            "status": "ok" if roles[ROLE_SYSTEM_ADMIN] else "warning",
            "counts": roles,
        }
    except SQLAlchemyError as exc:
        db.session.rollback()
        checks["database"] = {"status": "error", "detail": str(exc)}
        overall = False
        logger.error("Health check: database failed: %s", exc)

    checks["status_config"] = {
        "admin_override_enabled": load_status_config().admin_override_enabled,
    }
    checks["app"] = {"name": "Parts Request Tracker", "testing": current_app.testing}

    return jsonify({
        "status": "healthy" if overall else "degraded",
        "checks": checks,
    }), 200 if overall else 503
