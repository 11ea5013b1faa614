"""
Portal Errors

Every failure a request handler can surface is one of the classes below.
Handlers raise them; the exception handlers registered in main.py are the
only place they are turned into HTML.
"""

from dataclasses import dataclass

GENERIC_ERROR_MESSAGE = "An error occurred. Please try again later."


@dataclass(frozen=True)
class ErrorResult:
    """Structured error passed to the outermost rendering layer."""

    kind: str
    message: str
    status_code: int


class PortalError(Exception):
    """Base exception for portal errors."""

    kind = "unexpected"

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)

    def to_result(self, *, hide_internal: bool = False) -> ErrorResult:
        message = self.message
        if hide_internal and self.status_code >= 500:
            message = GENERIC_ERROR_MESSAGE
        return ErrorResult(kind=self.kind, message=message, status_code=self.status_code)


class ValidationError(PortalError):
    """Raised when submitted input is missing or malformed."""

    kind = "validation"

    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR"):
        super().__init__(message=message, error_code=error_code, status_code=400)


class AuthRequiredError(PortalError):
    """Raised on a gated route without a valid session. Rendered as a redirect."""

    kind = "auth"

    def __init__(self, login_url: str = "/login"):
        self.login_url = login_url
        super().__init__(
            message="Please log in to continue.",
            error_code="AUTH_REQUIRED",
            status_code=303,
        )


class CredentialError(PortalError):
    """Raised when login credentials do not match."""

    kind = "credentials"

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message=message, error_code="INVALID_CREDENTIALS", status_code=401)


class NotFoundError(PortalError):
    """Raised when a record does not exist."""

    kind = "not_found"

    def __init__(self, message: str = "Not found", error_code: str = "NOT_FOUND"):
        super().__init__(message=message, error_code=error_code, status_code=404)


class UploadError(PortalError):
    """Raised when an uploaded file cannot be written to storage."""

    kind = "upload"

    def __init__(self, message: str = "Failed to store uploaded file"):
        super().__init__(message=message, error_code="UPLOAD_FAILED", status_code=500)


class StorageError(PortalError):
    """Raised when the database rejects or fails an operation."""

    kind = "storage"

    def __init__(self, message: str = "A storage error occurred"):
        super().__init__(message=message, error_code="STORAGE_ERROR", status_code=500)


class UnexpectedError(PortalError):
    """Raised for any failure not covered above."""

    kind = "unexpected"

    def __init__(self, message: str = "Something went wrong"):
        super().__init__(message=message, error_code="INTERNAL_ERROR", status_code=500)


__all__ = [
    "ErrorResult",
    "GENERIC_ERROR_MESSAGE",
    "PortalError",
    "ValidationError",
    "AuthRequiredError",
    "CredentialError",
    "NotFoundError",
    "UploadError",
    "StorageError",
    "UnexpectedError",
]
