"""
Status Model — legal values for the two status axes.

Single source of truth for what may be written to ``boss_status`` and
``staff_status``. Both the API (option lists for the UI) and the
transition executor consult it.

Usage:
    from app.services.status_model import validate_status

    value = validate_status("boss_status", "ordered")   # -> "ordered"
    value = validate_status("staff_status", "pending")  # -> None
"""

from app.core.exceptions import ValidationError
from app.models.parts import (
    AXIS_BOSS,
    AXIS_STAFF,
    BOSS_STATUSES,
    PENDING,
    STAFF_STATUSES,
    STATUS_AXES,
    STATUS_VALUES,
)


def is_valid_boss_status(value) -> bool:
    return value in BOSS_STATUSES


def is_valid_staff_status(value) -> bool:
    return value in STAFF_STATUSES


def normalize_status(value):
    """Map the display alias ``"pending"`` (and ``""``) to the stored ``None``."""
    if value in (PENDING, ""):
        return None
    return value


def validate_axis(axis: str) -> str:
    if axis not in STATUS_AXES:
        raise ValidationError(
            f"Unknown status field '{axis}'",
            details={"axis": f"must be one of: {', '.join(STATUS_AXES)}"},
        )
    return axis


def validate_status(axis: str, value):
    """
    Validate *value* for *axis* and return its stored form.

    Raises:
        ValidationError: unknown axis, or value outside the axis enumeration.
    """
    validate_axis(axis)
    stored = normalize_status(value)
    ok = is_valid_boss_status(stored) if axis == AXIS_BOSS else is_valid_staff_status(stored)
    if not ok:
        allowed = [PENDING] + [v for v in STATUS_VALUES[axis] if v is not None]
        raise ValidationError(
            f"Invalid {axis} '{value}'",
            details={axis: f"must be one of: {', '.join(allowed)}"},
        )
    return stored


def status_options() -> dict:
    """Option lists for both axes, pending first."""
    return {
        axis: [{"value": v, "label": display_status(v)} for v in STATUS_VALUES[axis]]
        for axis in (AXIS_BOSS, AXIS_STAFF)
    }


def display_status(value) -> str:
    """``part_defective`` → ``Part Defective``; ``None``/pending → ``Pending``."""
    if not value or value == PENDING:
        return "Pending"
    return " ".join(word.capitalize() for word in value.split("_"))
