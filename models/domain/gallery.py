"""
Gallery and Photo domain models.

A gallery document embeds its photos; any change to a photo is a
rewrite of the whole gallery document.
"""

from typing import Any, List, Optional
from datetime import datetime, timedelta, timezone
from enum import Enum
from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from models.domain.base import DocumentModel, utcnow


class GalleryStatus(str, Enum):
    """Advisory lifecycle marker; any transition is allowed."""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class GalleryPrivacy(str, Enum):
    PRIVATE = "private"
    PUBLIC = "public"


class Photo(DocumentModel):
    """Photo inside a gallery."""

    id: str
    file_name: str
    storage_path: str = Field(..., description="Blob store key")
    uploaded_at: datetime = Field(default_factory=utcnow)
    favorites: List[str] = Field(default_factory=list, description="Client ids")
    # Declared for document compatibility, never populated
    comments: List[Any] = Field(default_factory=list)

    def is_favorite_of(self, client_id: str) -> bool:
        return client_id in self.favorites

    def toggle_favorite(self, client_id: str) -> bool:
        """Flip the client's favorite marker; returns the new state."""
        if self.is_favorite_of(client_id):
            self.favorites.remove(client_id)
            return False
        self.favorites.append(client_id)
        return True


class Gallery(DocumentModel):
    """Photo gallery owned by one admin."""

    # Unknown keys from older documents survive a rewrite
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    admin_id: str
    name: str = ""
    description: Optional[str] = None

    status: GalleryStatus = GalleryStatus.DRAFT
    privacy: GalleryPrivacy = GalleryPrivacy.PRIVATE
    download_enabled: bool = True
    favorites_enabled: bool = True
    comments_enabled: bool = True

    clients: List[str] = Field(default_factory=list, description="Client ids with read access")
    photos: List[Photo] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    # Optimistic concurrency counter; legacy documents read as 0
    version: int = 0

    @property
    def storage_paths(self) -> List[str]:
        return [photo.storage_path for photo in self.photos]

    def is_shared_with(self, client_id: str) -> bool:
        return client_id in self.clients

    def find_photo(self, photo_id: str) -> Optional[Photo]:
        for photo in self.photos:
            if photo.id == photo_id:
                return photo
        return None

    def touch(self) -> None:
        """Move updated_at forward, strictly past its previous value."""
        now = utcnow()
        previous = self.updated_at
        if previous.tzinfo is None:
            previous = previous.replace(tzinfo=timezone.utc)
        if now <= previous:
            now = previous + timedelta(microseconds=1)
        self.updated_at = now


class PhotoView(Photo):
    """Photo as returned to clients, with a short-lived signed URL."""

    url: Optional[str] = None


class GalleryView(Gallery):
    photos: List[PhotoView] = Field(default_factory=list)
