"""
Custom exception hierarchy for the application.
All exceptions inherit from AppException for unified handling.

Four kinds reach the client:
- AuthenticationError -> 401
- ValidationError     -> 400
- NotFoundError       -> 404
- InternalError       -> 500
"""

from typing import Optional, Dict, Any


class AppException(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        status_code: HTTP status code for API responses
        details: Additional error details (logged, never returned)
    """

    def __init__(
        self,
        message: str,
        code: str = "ERROR",
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to the API error body."""
        return {"error": self.message}


# === Authentication Errors ===

class AuthenticationError(AppException):
    """Missing, malformed or unresolvable bearer token."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=401
        )


class InvalidTokenError(AuthenticationError):
    def __init__(self):
        super().__init__(message="Invalid or expired token")


class AdminRequiredError(AuthenticationError):
    def __init__(self):
        super().__init__(message="Admin access required")


# === Validation Errors ===

class ValidationError(AppException):
    """Malformed input or identity provider rejection."""

    def __init__(self, message: str, field: str = None, code: str = "VALIDATION_ERROR"):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            code=code,
            status_code=400,
            details=details
        )


class MissingFileError(ValidationError):
    def __init__(self):
        super().__init__(message="No file provided", field="photo")


# === Not Found Errors ===

class NotFoundError(AppException):
    """Resource not found (or not visible to the caller)."""

    def __init__(self, entity: str, identifier: str = None):
        message = f"{entity} not found"
        if identifier:
            message = f"{entity} '{identifier}' not found"
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=404
        )


class GalleryNotFoundError(NotFoundError):
    def __init__(self, gallery_id: str = None):
        super().__init__("Gallery", gallery_id)


class ClientNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__("Client")


class PhotoNotFoundError(NotFoundError):
    def __init__(self, photo_id: str = None):
        super().__init__("Photo", photo_id)


# === Internal Errors ===

class InternalError(AppException):
    """Unexpected fault talking to an external store."""

    def __init__(self, message: str = "Internal server error", code: str = "INTERNAL_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            code=code,
            status_code=500,
            details=details
        )


class DatabaseError(InternalError):
    """Document store operation failed."""

    def __init__(self, message: str, operation: str = None):
        details = {"operation": operation} if operation else {}
        super().__init__(
            message=f"Database error: {message}",
            code="DATABASE_ERROR",
            details=details
        )


class StorageError(InternalError):
    """Blob store operation failed."""

    def __init__(self, message: str, operation: str = None):
        details = {"operation": operation} if operation else {}
        super().__init__(
            message=message,
            code="STORAGE_ERROR",
            details=details
        )


class IdentityProviderError(InternalError):
    """Identity provider failed for a reason other than rejecting the input."""

    def __init__(self, message: str, operation: str = None):
        details = {"operation": operation} if operation else {}
        super().__init__(
            message=f"Identity provider error: {message}",
            code="IDENTITY_ERROR",
            details=details
        )


class WriteConflictError(InternalError):
    """Optimistic write lost the race too many times."""

    def __init__(self, key: str, attempts: int):
        super().__init__(
            message="Gallery was modified concurrently, please retry",
            code="WRITE_CONFLICT",
            details={"key": key, "attempts": attempts}
        )
