"""
Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; the mapping to a response
happens once, in the exception handler registered by ``carebook.main``.
"""
from fastapi import status
from typing import Optional


class CarebookError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def name(self) -> str:
        return type(self).__name__


class ValidationError(CarebookError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthorized(CarebookError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Unauthorized"


class InvalidCredentials(Unauthorized):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class NotFound(CarebookError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class Conflict(CarebookError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class InvalidStatusTransition(CarebookError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot change appointment status from {current.value} to {target.value}"
        )
