"""
Domain models - core business entities.

These are the source of truth for data structures.
All other layers (requests, responses, repositories) derive from these.
"""

from models.domain.base import DocumentModel, utcnow
from models.domain.identity import Identity, ProviderUser, AuthSession, Role
from models.domain.profile import AdminProfile, ClientProfile
from models.domain.gallery import (
    Gallery,
    GalleryPrivacy,
    GalleryStatus,
    GalleryView,
    Photo,
    PhotoView,
)

__all__ = [
    'DocumentModel',
    'utcnow',
    'Identity',
    'ProviderUser',
    'AuthSession',
    'Role',
    'AdminProfile',
    'ClientProfile',
    'Gallery',
    'GalleryPrivacy',
    'GalleryStatus',
    'GalleryView',
    'Photo',
    'PhotoView',
]
