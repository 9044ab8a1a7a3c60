"""
Error taxonomy for the authentication flow.

Every error carries the HTTP status it maps to, the client-facing message and
an optional field -> message map. ``detail`` holds internal information that
is logged but never sent to the client.
"""
from typing import Dict, Optional
from fastapi import status

GENERIC_ERROR_MESSAGE = "Some error occurred."


class AuthError(Exception):
    """Base class for errors raised by the authentication flow"""

    status_code: int = status.HTTP_400_BAD_REQUEST
    message: str = "Bad request"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        errors: Optional[Dict[str, str]] = None,
        detail: Optional[str] = None,
    ):
        self.message = message or self.message
        self.status_code = status_code or self.status_code
        self.errors = errors
        self.detail = detail
        super().__init__(detail or self.message)


class ValidationError(AuthError):
    """Malformed or missing input"""
    status_code = 422
    message = "Invalid data"


class ConflictError(AuthError):
    """Email address already registered"""
    status_code = 422
    message = "Invalid data"


class NotFoundError(AuthError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class InvalidCredentialError(AuthError):
    """Wrong or absent one-time code"""
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid code."


class ExpiredCredentialError(AuthError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Code has expired. Please retry."


class PersistenceError(AuthError):
    """Store unavailable or a store operation failed"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = GENERIC_ERROR_MESSAGE


class DeliveryError(AuthError):
    """Notification channel failed"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = GENERIC_ERROR_MESSAGE
