# app/core/errors.py
"""
Domain errors raised by the service layer.

Each error carries a machine-readable code, a human-readable message and the
HTTP status the API answers with. Handlers in app.main render them as
{"success": False, "error": {"code": ..., "message": ...}}.
"""
from fastapi import status


class AppError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "BAD_REQUEST"

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self) -> dict:
        return {"success": False, "error": {"code": self.code, "message": self.message}}


class ValidationFailed(AppError):
    """Malformed or out-of-range input."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"


class Unauthenticated(AppError):
    """Missing or invalid identity. Messages never reveal which check failed."""
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTH_REQUIRED"


class NotFound(AppError):
    """Missing resource, or a resource owned by someone else."""
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class Conflict(AppError):
    """Duplicate name/follow, or the current period is already checked in."""
    status_code = status.HTTP_400_BAD_REQUEST
    code = "CONFLICT"
