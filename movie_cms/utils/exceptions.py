"""
Application exceptions.

Every error a handler raises is one of these. They subclass FastAPI's
`HTTPException` so the status code travels with the error, and
`exception_handlers` renders them as `{"success": false, "message": ...}`.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application error carrying a client-safe message.

    `extra` holds additional JSON fields merged into the error body
    (e.g. the list of required fields on a failed create).
    """

    status_code_default: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        extra: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        code = status_code or self.status_code_default
        super().__init__(status_code=code, detail=message, headers=headers)
        self.message = message
        self.extra = extra or {}

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": False, "message": self.message}
        body.update(self.extra)
        return body


class ValidationError(AppException):
    status_code_default = status.HTTP_400_BAD_REQUEST


class AuthError(AppException):
    status_code_default = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppException):
    status_code_default = status.HTTP_403_FORBIDDEN


class NotFoundError(AppException):
    status_code_default = status.HTTP_404_NOT_FOUND


class ConflictError(AppException):
    status_code_default = status.HTTP_409_CONFLICT


class InternalError(AppException):
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR


__all__ = [
    "AppException",
    "ValidationError",
    "AuthError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "InternalError",
]
