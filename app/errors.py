"""
API Errors
Structured errors translated to JSON responses by the handlers in app.main
"""

from typing import Any, Optional

from fastapi import status


class ApiError(Exception):
    """Base error carrying an HTTP status and a JSON payload"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error: str = "internal_error"

    def __init__(self, **extra: Any):
        super().__init__(self.error)
        self.payload = {"error": self.error, **extra}


class ValidationFailed(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, error: str, **extra: Any):
        self.error = error
        super().__init__(**extra)


class Unauthorized(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "unauthorized"


class InvalidCode(ApiError):
    """Admin login rejected"""
    status_code = status.HTTP_401_UNAUTHORIZED
    error = "invalid"


class RateLimited(ApiError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    error = "rate_limited"


class Conflict(ApiError):
    status_code = status.HTTP_409_CONFLICT
    error = "duplicate_name"


class NotFound(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"


class DatabaseError(ApiError):
    """Query or connectivity failure, with the engine's diagnostics when known"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error = "db_error"

    def __init__(self, code: Optional[Any] = None, message: Optional[str] = None, diagnostics: bool = True):
        extra = {}
        if diagnostics:
            extra = {"db_code": code, "db_message": message}
        super().__init__(**extra)
        self.code = code
        self.message = message
