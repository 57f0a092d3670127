"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    WRONG_TOKEN_USE = "WRONG_TOKEN_USE"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    SELF_DEMOTION = "SELF_DEMOTION"
    ACCOUNT_DISABLED = "ACCOUNT_DISABLED"

    # Not found errors (404)
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    WEAK_PASSWORD = "WEAK_PASSWORD"
    INVALID_FORMAT = "INVALID_FORMAT"

    # Conflict errors (409)
    EMAIL_TAKEN = "EMAIL_TAKEN"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    IDENTITY_PROVIDER_ERROR = "IDENTITY_PROVIDER_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(
        self,
        message: str = "Access denied",
        error_code: ErrorCode = ErrorCode.FORBIDDEN,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=403,
        )


class SelfDemotionError(AuthorizationError):
    """An admin tried to remove their own admin role."""

    def __init__(self) -> None:
        super().__init__(
            message="You cannot demote yourself from admin",
            error_code=ErrorCode.SELF_DEMOTION,
        )


class UserNotFoundError(AppException):
    """User profile not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.USER_NOT_FOUND,
            message="User not found",
            status_code=404,
            details={"user_id": user_id},
        )


class ValidationError(AppException):
    """Input rejected by business validation."""

    def __init__(self, message: str, details: Any | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.VALIDATION_ERROR,
            message=message,
            status_code=400,
            details=details,
        )


# --- Identity provider errors ---


class EmailTakenError(AppException):
    """An identity already exists for this email."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.EMAIL_TAKEN,
            message="Email already registered",
            status_code=409,
        )


class WeakPasswordError(AppException):
    """Password rejected by the identity provider's policy."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.WEAK_PASSWORD,
            message="Password does not meet requirements",
            status_code=400,
        )


class InvalidFormatError(AppException):
    """A value sent to the identity provider was malformed."""

    def __init__(self, message: str = "Invalid email or password format") -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_FORMAT,
            message=message,
            status_code=400,
        )


class InvalidCredentialsError(AppException):
    """Unknown user, wrong password or rejected token."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_CREDENTIALS,
            message=message,
            status_code=401,
        )


class AccountDisabledError(AppException):
    """The identity exists but has been disabled."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.ACCOUNT_DISABLED,
            message="User account is disabled",
            status_code=403,
        )


class RateLimitedError(AppException):
    """The identity provider throttled the request."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.RATE_LIMIT_EXCEEDED,
            message="Too many attempts. Please try again later",
            status_code=429,
        )


class IdentityProviderError(AppException):
    """Unrecognized identity provider failure."""

    def __init__(self, message: str = "Identity provider request failed") -> None:
        super().__init__(
            error_code=ErrorCode.IDENTITY_PROVIDER_ERROR,
            message=message,
            status_code=502,
        )
