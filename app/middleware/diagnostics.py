"""
Startup diagnostics — runs once when the Flask app starts.

Checks critical dependencies and logs a summary banner.
"""

import logging
import sys

from flask import Flask

from app.config import load_status_config
from app.models import db

logger = logging.getLogger(__name__)


def run_startup_diagnostics(app: Flask):
    """Run diagnostic checks during app startup (inside app context)."""
    if app.config.get("TESTING"):
        return  # skip during tests for speed

    issues: list[str] = []

    with app.app_context():
        # ── Python version ───────────────────────────────────────────
        py = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"

        # ── Database connectivity ────────────────────────────────────
        db_status = "ok"
        db_uri = str(app.config.get("SQLALCHEMY_DATABASE_URI", ""))
        db_type = "PostgreSQL" if "postgresql" in db_uri else "SQLite" if "sqlite" in db_uri else "unknown"
        try:
            db.session.execute(db.text("SELECT 1"))
        except Exception as exc:
            db_status = "FAILED"
            issues.append(f"Database unreachable: {exc}")

        # ── Table count ──────────────────────────────────────────────
        try:
            from sqlalchemy import inspect as sa_inspect
            table_count = len(sa_inspect(db.engine).get_table_names())
            if table_count == 0:
                issues.append("No tables found — run 'flask db upgrade'")
        except Exception:
            table_count = "?"

        # ── Auth / status settings ───────────────────────────────────
        auth_enabled = str(app.config.get("API_AUTH_ENABLED", "false")).lower() == "true"
        override = load_status_config(app.config).admin_override_enabled

        banner = f"""
╔══════════════════════════════════════════════════════════════╗
║  Parts Request Tracker — Startup Diagnostics                 ║
╠══════════════════════════════════════════════════════════════╣
║  Python        : {py:<44s}║
║  Debug         : {str(app.debug):<44s}║
║  Database      : {f'{db_type} ({db_status})':<44s}║
║  Tables        : {str(table_count):<44s}║
║  API keys      : {'ENABLED' if auth_enabled else 'DISABLED':<44s}║
║  Admin override: {'ON' if override else 'OFF':<44s}║
╚══════════════════════════════════════════════════════════════╝"""
        logger.info(banner)

        if issues:
            logger.warning("Startup issues detected:")
            for issue in issues:
                logger.warning("  ⚠ %s", issue)
        else:
            logger.info("✅ All startup checks passed")
