"""
Repositories package - data access layer.

Repositories handle all document store operations.
No business logic - only keys and data transformation.

Usage:
    from repositories import GalleriesRepository

    repo = GalleriesRepository(document_store)
    galleries = await repo.list_for_admin(admin_id)
"""

from repositories.base import BaseRepository
from repositories.galleries_repo import GalleriesRepository
from repositories.profiles_repo import AdminsRepository, ClientsRepository

__all__ = [
    'BaseRepository',
    'GalleriesRepository',
    'AdminsRepository',
    'ClientsRepository',
]
