"""
BoardCtrl — Unified Custom Exceptions.
Each exception carries: message, error_code, http_status_code, optional detail dict.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

# ─────────────────────────────────────────────────────────────────────────────
# BASE
# ─────────────────────────────────────────────────────────────────────────────

class BoardCtrlError(Exception):
    """Root exception for all BoardCtrl errors."""

    http_status_code: int = 400
    error_code: str = "BOARDCTRL_ERROR"

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.detail = detail or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "detail": self.detail,
        }

# ─────────────────────────────────────────────────────────────────────────────
# INPUT
# ─────────────────────────────────────────────────────────────────────────────

class InvalidInputError(BoardCtrlError):
    http_status_code = 400
    error_code = "INVALID_INPUT"

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message=message, detail={"field": field} if field else {})

class IdMismatchError(InvalidInputError):
    error_code = "ID_MISMATCH"

    def __init__(self, route_id: int, body_id: Optional[int]) -> None:
        self.route_id = route_id
        self.body_id = body_id
        super().__init__(
            message=f"Route id {route_id} does not match body id {body_id}",
            field="id",
        )

# ─────────────────────────────────────────────────────────────────────────────
# AUTH
# ─────────────────────────────────────────────────────────────────────────────

class AuthenticationError(BoardCtrlError):
    http_status_code = 401
    error_code = "AUTHENTICATION_ERROR"

    def __init__(self, reason: str = "Invalid or expired token") -> None:
        super().__init__(message=reason, detail={"reason": reason})

class PermissionDeniedError(BoardCtrlError):
    http_status_code = 403
    error_code = "PERMISSION_DENIED"

    def __init__(self, role: str, operation: str = "") -> None:
        self.role = role
        self.operation = operation
        super().__init__(
            message=f"Role '{role}' is not permitted to perform {operation or 'this operation'}",
            detail={"role": role, "operation": operation},
        )

# ─────────────────────────────────────────────────────────────────────────────
# STORE
# ─────────────────────────────────────────────────────────────────────────────

class ResourceNotFoundError(BoardCtrlError):
    http_status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: Any = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        if resource_id is None:
            message = f"No {resource} records found"
        else:
            message = f"{resource} {resource_id} not found"
        super().__init__(
            message=message,
            detail={"resource": resource, "id": resource_id},
        )

class ConflictError(BoardCtrlError):
    http_status_code = 409
    error_code = "CONFLICT"

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message=message, detail={"field": field} if field else {})

# ─────────────────────────────────────────────────────────────────────────────
# FATAL
# ─────────────────────────────────────────────────────────────────────────────

class ConfigurationError(BoardCtrlError):
    http_status_code = 500
    error_code = "CONFIGURATION_ERROR"

    def __init__(self, setting: str, reason: str = "is not configured") -> None:
        self.setting = setting
        super().__init__(
            message=f"{setting} {reason}",
            detail={"setting": setting},
        )

class ConcurrencyConflictError(BoardCtrlError):
    """
    A concurrent writer changed a record that still exists.
    Unexplained by the existence re-check, so it is fatal; surfaced once, never retried.
    """

    http_status_code = 500
    error_code = "CONCURRENCY_CONFLICT"

    def __init__(self, resource: str, resource_id: Any) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(
            message=f"{resource} {resource_id} was modified by another request",
            detail={"resource": resource, "id": resource_id},
        )
