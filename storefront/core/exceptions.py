"""
Typed service errors for the storefront.

Services raise these; the HTTP layer turns them into JSON responses with the
matching status code (see ``storefront.main``).
"""

from typing import Any, Dict, Optional


class AppException(Exception):
    """Base exception for application errors."""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if status_code:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(AppException):
    """Raised when a required field is missing or malformed."""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class NotFoundError(AppException):
    """Raised when a record does not exist."""

    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource} not found"
        details = {"id": identifier} if identifier is not None else {}
        super().__init__(message, details)


class AuthenticationError(AppException):
    status_code = 401
    error_code = "AUTHENTICATION_ERROR"


class ConfigurationError(AppException):
    """Raised when the pricing configuration is missing."""

    status_code = 500
    error_code = "CONFIGURATION_ERROR"


class EmailDeliveryError(AppException):
    """Raised when an outbound email could not be handed to the transport."""

    status_code = 502
    error_code = "EMAIL_DELIVERY_ERROR"
