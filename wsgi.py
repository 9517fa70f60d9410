"""
WSGI / Flask-Migrate entry point for the Parts Request Tracker.

Usage:
    flask db upgrade
    flask assign-role <user_id> <role>
    gunicorn wsgi:app
"""

from app import create_app

app = create_app()
