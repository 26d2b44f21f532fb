"""
Response envelopes shared by all endpoints.

Errors are always {"error": "<message>"}.
Mutations answer {"success": true, ...payload}.
"""

from pydantic import BaseModel


class ApiError(BaseModel):
    """Error body returned for every failed request."""

    error: str

    @classmethod
    def fail(cls, message: str) -> "ApiError":
        return cls(error=message)

    @classmethod
    def from_exception(cls, exc: "AppException") -> "ApiError":
        """Create error body from AppException."""
        return cls(**exc.to_dict())


class ApiSuccess(BaseModel):
    """Base for successful mutation bodies; subclasses add the payload field."""

    success: bool = True


class HealthResponse(BaseModel):
    status: str = "ok"


# Imported late for the forward reference above
from core.exceptions import AppException  # noqa: E402
