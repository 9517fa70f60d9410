"""
Parts Request Tracker
Authentication Middleware.

Provides:
    - Actor identification for every /api/v1/* request (sets g.current_user_id)
    - API key authentication via X-API-Key header
    - CSRF protection for state-changing requests (Content-Type enforcement)
    - current_actor() helper: (user_id, role) with the role looked up fresh

Security model:
    - All /api/v1/* endpoints require an identified user (except health)
    - Roles are NOT carried by the key; they come from the user_roles table
      at authorization time, so a role change applies on the next request

Configuration (env vars):
    API_KEYS          — comma-separated list of "<key>:<user_id>" pairs
                        e.g. "k-3f9a:alice,k-77b2:boss-1"
    API_AUTH_ENABLED  — set to "false" to disable keys (development/tests);
                        the user id is then taken from the X-User-Id header
"""

import logging
import os
from typing import Optional

from flask import current_app, g, request

from app.services.role_service import get_user_role
from app.utils.errors import E, api_error

logger = logging.getLogger(__name__)

_PUBLIC_PREFIXES = ("/api/v1/health",)


def _parse_api_keys() -> dict[str, str]:
    """
    Parse API_KEYS env var into {key: user_id} mapping.

    Format: "key1:alice,key2:bob". Entries without a user id are ignored.
    """
    raw = os.getenv("API_KEYS", "")
    if not raw.strip():
        return {}

    keys = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        if ":" not in entry:
            logger.warning("API key entry without user id ignored")
            continue
        key, user_id = entry.rsplit(":", 1)
        if key.strip() and user_id.strip():
            keys[key.strip()] = user_id.strip()
    return keys


def _is_auth_enabled() -> bool:
    """Check whether API key authentication is enabled (env var or app config)."""
    env_val = os.getenv("API_AUTH_ENABLED", "")
    if env_val:
        return env_val.lower() not in ("false", "0", "no", "off")
    try:
        return str(current_app.config.get("API_AUTH_ENABLED", "true")).lower() not in ("false", "0", "no", "off")
    except RuntimeError:
        # Outside app context
        return True


def _get_api_key_from_request() -> Optional[str]:
    return request.headers.get("X-API-Key", "").strip() or None


def _check_content_type():
    """
    For state-changing requests (POST/PUT/PATCH/DELETE), require
    Content-Type: application/json. This acts as a lightweight CSRF mitigation
    because HTML forms cannot send application/json content type.
    """
    if request.method in ("POST", "PUT", "PATCH", "DELETE"):
        ct = request.content_type or ""
        if "application/json" not in ct and request.content_length and request.content_length > 0:
            return api_error(
                E.VALIDATION_REQUIRED,
                "Content-Type must be application/json for state-changing requests",
                status=415,
            )
    return None


def current_actor() -> tuple[str | None, str | None]:
    """Return (user_id, role) for the current request; role is looked up now."""
    user_id = getattr(g, "current_user_id", None)
    return user_id, get_user_role(user_id)


def init_auth(app):
    """
    Install authentication middleware on the Flask app.

    - Attaches a before_request hook for API routes
    - Skips health check routes and CORS pre-flight
    """
    @app.before_request
    def _before_request_auth():
        if not request.path.startswith("/api/v1/"):
            return None
        if request.path.startswith(_PUBLIC_PREFIXES):
            return None
        if request.method == "OPTIONS":
            return None

        csrf_error = _check_content_type()
        if csrf_error:
            return csrf_error

        if not _is_auth_enabled():
            user_id = request.headers.get("X-User-Id", "").strip()
            if not user_id:
                return api_error(E.UNAUTHORIZED, "Authentication required. Provide X-User-Id header.")
            g.current_user_id = user_id
            return None

        api_key = _get_api_key_from_request()
        if not api_key:
            return api_error(E.UNAUTHORIZED, "Authentication required. Provide X-API-Key header.")

        api_keys = _parse_api_keys()
        if not api_keys:
            logger.error("API_KEYS env var is not configured but API_AUTH_ENABLED=true")
            return api_error(E.INTERNAL, "Server authentication not configured")

        user_id = api_keys.get(api_key)
        if user_id is None:
            logger.warning("Invalid API key attempt: %s...", api_key[:8])
            return api_error(E.UNAUTHORIZED, "Invalid API key")

        g.current_user_id = user_id
        return None

    logger.info("Auth middleware installed (api keys enabled=%s)", _is_auth_enabled())
