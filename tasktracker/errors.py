"""Error taxonomy shared by the services and the HTTP layer.

Every error is an ``HTTPException`` so FastAPI maps it to the right status
code without extra plumbing; ``main.py`` renders all of them into the
``{success, message}`` envelope.
"""
from typing import Dict, Optional

from fastapi import HTTPException, status


class TrackerError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        super().__init__(
            status_code=type(self).status_code,
            detail=message or self.default_message,
            headers=headers,
        )

    @property
    def message(self) -> str:
        return self.detail


class InvalidInput(TrackerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class Unauthenticated(TrackerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authorized, no valid token"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(TrackerError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized to perform this action"


class NotFound(TrackerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class StoreFailure(TrackerError):
    default_message = "Database operation failed"
