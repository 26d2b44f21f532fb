"""
Core package - foundation for the application.

Modules:
- config.py - Application settings via Pydantic Settings
- exceptions.py - Custom exception hierarchy
- responses.py - Error and success envelopes
- logging.py - Centralized logging configuration
"""

from core.config import settings
from core.exceptions import (
    AppException,
    AuthenticationError,
    ValidationError,
    NotFoundError,
    InternalError,
    DatabaseError,
    StorageError,
)
from core.responses import ApiError, ApiSuccess

__all__ = [
    'settings',
    'AppException',
    'AuthenticationError',
    'ValidationError',
    'NotFoundError',
    'InternalError',
    'DatabaseError',
    'StorageError',
    'ApiError',
    'ApiSuccess',
]
