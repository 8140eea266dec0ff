"""
API error taxonomy. Services raise these; the handlers registered in
create_app() turn them into JSON bodies of the form {"error": message, ...}.
"""

from __future__ import annotations
from typing import Any, Dict


class APIError(Exception):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None, **extra: Any):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, **self.extra}


class ValidationError(APIError):
    status_code = 400
    default_message = "Invalid request data"


class ConflictError(APIError):
    status_code = 400
    default_message = "Duplicate entry"


class AuthError(APIError):
    status_code = 401
    default_message = "Invalid credentials"


class NotFoundError(APIError):
    status_code = 404
    default_message = "Not found"


class UploadError(APIError):
    status_code = 400
    default_message = "Only JPG/PNG files are allowed"


class DatabaseError(APIError):
    status_code = 500
    default_message = "Database error"


class UnhandledError(APIError):
    status_code = 500
    default_message = "Server error"
