"""
Services package.

Main modules:
- auth.py - Bearer token -> Identity, admin gate
- accounts.py - AccountService (admin sign-up, client creation)
- galleries.py - GalleryService (gallery/photo lifecycle, sharing, favorites)
"""

from services.accounts import AccountService
from services.auth import AuthService
from services.galleries import GalleryService

__all__ = [
    'AccountService',
    'AuthService',
    'GalleryService',
]
