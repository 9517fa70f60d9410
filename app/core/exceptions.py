"""
Platform-wide exception hierarchy.

Every service raises one of these types instead of a generic failure.
Blueprints register handlers against them once and get consistent HTTP
status codes everywhere; presentation layers own the user-facing wording
and any optimistic-UI rollback.

Usage:
    from app.core.exceptions import NotFoundError, PermissionDenied, ValidationError

    raise NotFoundError(resource="RequestItem", resource_id=item_id)
    raise ValidationError("Invalid boss_status", details={"status": "shipped"})
    raise PermissionDenied(user_id, role, "staff_status")
"""


class NotFoundError(Exception):
    """Raised when a referenced record does not exist (or was deleted concurrently).

    Maps to HTTP 404.

    Args:
        resource: Human-readable model/entity name (e.g. "RequestItem").
        resource_id: The PK that was looked up.
    """

    def __init__(self, resource: str, resource_id: int | str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        super().__init__(msg)


class ValidationError(Exception):
    """Raised when input is malformed or violates a business rule.

    Always user-correctable. Maps to HTTP 422.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown for structured API responses.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class PermissionDenied(Exception):
    """Raised when the actor's role does not authorize the requested write.

    Never retried automatically. Maps to HTTP 403.
    """

    def __init__(self, user_id: str | None, role: str | None, action: str, reason: str | None = None):
        msg = f"User {user_id} (role={role}) does not have permission for '{action}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
        self.user_id = user_id
        self.role = role
        self.action = action
        self.reason = reason


class PersistenceError(Exception):
    """Raised when a storage write fails and the unit of work was rolled back.

    Transient: the caller may retry the whole operation. Maps to HTTP 503.
    """

    def __init__(self, operation: str, resource_id: str | None = None) -> None:
        self.operation = operation
        self.resource_id = resource_id
        msg = f"Storage failure during {operation}"
        if resource_id is not None:
            msg += f" (id={resource_id})"
        super().__init__(msg)
