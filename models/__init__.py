"""
Models package - data structures for the application.

Subpackages:
- domain/ - Domain models (stored documents, identities)
- requests/ - Request DTOs (API input)
- responses/ - Response DTOs (API output)
"""

from models.domain import (
    AdminProfile,
    ClientProfile,
    Gallery,
    GalleryView,
    Identity,
    Photo,
    PhotoView,
    Role,
)

__all__ = [
    'AdminProfile',
    'ClientProfile',
    'Gallery',
    'GalleryView',
    'Identity',
    'Photo',
    'PhotoView',
    'Role',
]
