"""
Domain Errors

Exceptions raised by service layers. Each carries a machine-readable
``error_code`` and the HTTP status the presentation layer should map it to.
"""

from uuid import UUID


class ServiceError(Exception):
    """Base exception for service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class ValidationError(ServiceError):
    """Raised when input is malformed or violates an invariant."""

    def __init__(self, message: str, error_code: str = "VALIDATION_ERROR"):
        super().__init__(message=message, error_code=error_code, status_code=400)


class NotFoundError(ServiceError):
    """Raised when a referenced record does not exist."""

    def __init__(self, message: str, error_code: str = "NOT_FOUND", status_code: int = 404):
        super().__init__(message=message, error_code=error_code, status_code=status_code)


class PrincipalNotFoundError(NotFoundError):
    """
    Raised when the acting user does not exist.

    The caller supplied a bad reference, so this maps to 400 rather than 404.
    """

    def __init__(self, principal_id: UUID | None = None):
        message = "User not found"
        if principal_id is not None:
            message = f"User {principal_id} not found"
        super().__init__(message=message, error_code="PRINCIPAL_NOT_FOUND", status_code=400)


class ConflictError(ServiceError):
    """Raised on uniqueness or state conflicts."""

    def __init__(self, message: str, error_code: str = "CONFLICT"):
        super().__init__(message=message, error_code=error_code, status_code=409)


class StoreError(ServiceError):
    """Raised when the database rejects or fails a write."""

    def __init__(self, message: str = "The data store is unavailable. Please try again."):
        super().__init__(message=message, error_code="STORE_ERROR", status_code=503)
