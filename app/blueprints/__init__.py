"""
Parts Request Tracker
Blueprint registry and shared request helpers.
"""

from flask import request

ITEM_FILTER_KEYS = ("search", "job_bag_number", "manufacturer", "boss_status", "staff_status")


def json_body() -> dict:
    """Request JSON body, or {} when absent or not an object."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def item_filters() -> dict:
    """Item list filters from the query string (unset keys omitted)."""
    return {
        key: request.args.get(key)
        for key in ITEM_FILTER_KEYS
        if request.args.get(key) is not None
    }
