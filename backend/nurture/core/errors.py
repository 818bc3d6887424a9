"""
Error taxonomy shared by services and the HTTP layer.

Services raise ``ServiceError`` subclasses; the exception handlers in
``nurture.core.error_handlers`` turn them into ``{"error", "code"}`` bodies.
"""
from enum import Enum
from typing import Optional

from fastapi import status


class ErrorCode(str, Enum):
    """Stable machine-readable error codes."""
    MISSING_FIELDS = "MISSING_FIELDS"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    EMAIL_EXISTS = "EMAIL_EXISTS"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    INVALID_PROFILE_DATA = "INVALID_PROFILE_DATA"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    RATE_LIMITED = "RATE_LIMITED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# Default HTTP status for each code
STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.MISSING_FIELDS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.WEAK_PASSWORD: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EMAIL_EXISTS: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_SIGNATURE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_PROFILE_DATA: status.HTTP_400_BAD_REQUEST,
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ServiceError(Exception):
    """Base error carrying a taxonomy code and a human message."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[ErrorCode] = None,
        status_code: Optional[int] = None,
    ):
        if code is not None:
            self.code = code
        if message is not None:
            self.message = message
        self.status_code = status_code or STATUS_BY_CODE[self.code]
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r}, message={self.message!r})"


class ValidationFailed(ServiceError):
    """Request input rejected at the boundary."""
    code = ErrorCode.VALIDATION_ERROR
    message = "Invalid request data"


class MissingFields(ValidationFailed):
    code = ErrorCode.MISSING_FIELDS
    message = "Required fields are missing"


class WeakPassword(ValidationFailed):
    code = ErrorCode.WEAK_PASSWORD
    message = "Password must be at least 8 characters"


class InvalidProfileData(ValidationFailed):
    code = ErrorCode.INVALID_PROFILE_DATA
    message = "profileData must be a valid object"


class EmailExists(ServiceError):
    code = ErrorCode.EMAIL_EXISTS
    message = "An account with this email already exists"


class InvalidCredentials(ServiceError):
    code = ErrorCode.INVALID_CREDENTIALS
    message = "Invalid email or password"


class InvalidSignature(ServiceError):
    code = ErrorCode.INVALID_SIGNATURE
    message = "Invalid webhook signature"


class UserNotFound(ServiceError):
    code = ErrorCode.USER_NOT_FOUND
    message = "User profile not found"


class Unauthenticated(ServiceError):
    code = ErrorCode.UNAUTHENTICATED
    message = "Authentication required"


class Forbidden(ServiceError):
    code = ErrorCode.FORBIDDEN
    message = "Forbidden - insufficient permissions"


class ResourceNotFound(ServiceError):
    code = ErrorCode.NOT_FOUND
    message = "Resource not found"


class RateLimited(ServiceError):
    code = ErrorCode.RATE_LIMITED
    message = "Too many requests. Please try again later."


class InternalError(ServiceError):
    code = ErrorCode.INTERNAL_ERROR
    message = "Internal server error"
