"""
GalleryService - access-scoped gallery and photo operations.

Admin side: list/create/update/delete galleries, upload photos.
Client side: list shared galleries (with signed URLs), toggle favorites.

Ownership is enforced by key namespacing: every admin operation loads
gallery:<caller.id>:<galleryId>, so another admin's gallery is simply
not found. Clients reach a gallery through their profile's adminId and
only when listed in gallery.clients.

Gallery documents are rewritten whole. Every read-modify-write goes
through _mutate, a compare-and-set on the document version that
re-reads and re-applies the change on conflict.
"""

from typing import Callable, List, Optional, Tuple, TypeVar

from core.exceptions import (
    AppException,
    ClientNotFoundError,
    GalleryNotFoundError,
    MissingFileError,
    PhotoNotFoundError,
    StorageError,
    WriteConflictError,
)
from core.logging import get_logger
from infrastructure.blob_store import BlobStore
from models.domain import ClientProfile, Gallery, GalleryView, Identity, Photo
from models.requests import GalleryCreate, GalleryUpdate
from repositories import ClientsRepository, GalleriesRepository
from utils.ids import new_gallery_id, new_photo_id, photo_storage_path

logger = get_logger(__name__)

R = TypeVar("R")

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class GalleryService:
    """Gallery lifecycle over the document store and the blob store."""

    def __init__(
        self,
        galleries: GalleriesRepository,
        clients: ClientsRepository,
        blobs: BlobStore,
        signed_url_ttl: int = 3600,
        write_retries: int = 5,
    ):
        self.galleries = galleries
        self.clients = clients
        self.blobs = blobs
        self.signed_url_ttl = signed_url_ttl
        self.write_retries = write_retries

    # ============================================================
    # Admin operations
    # ============================================================

    async def list_galleries(self, caller: Identity) -> List[Gallery]:
        """All galleries owned by the caller, whatever their status or privacy."""
        return await self.galleries.list_for_admin(caller.id)

    async def create_gallery(self, caller: Identity, data: GalleryCreate) -> Gallery:
        gallery = Gallery(
            id=new_gallery_id(),
            admin_id=caller.id,
            photos=[],
            **data.model_dump(),
        )
        gallery.updated_at = gallery.created_at
        await self.galleries.create(gallery)
        logger.info(f"Created gallery {gallery.id} for admin {caller.id}: {gallery.name}")
        return gallery

    async def update_gallery(self, caller: Identity, gallery_id: str, patch: GalleryUpdate) -> Gallery:
        """Shallow-merge the sent fields over the stored gallery."""
        changes = patch.model_dump(exclude_unset=True)

        def apply(gallery: Gallery) -> None:
            for field, value in changes.items():
                setattr(gallery, field, value)
            gallery.touch()

        gallery, _ = await self._mutate(caller.id, gallery_id, apply)
        logger.info(f"Updated gallery {gallery_id}: {', '.join(changes) or 'no fields'}")
        return gallery

    async def delete_gallery(self, caller: Identity, gallery_id: str) -> None:
        """
        Delete a gallery and its blobs.

        Blob removal is best effort: a failure is logged and the document
        is deleted anyway, leaving orphaned blobs rather than a stuck gallery.
        """
        gallery = await self._load_owned(caller.id, gallery_id)

        paths = gallery.storage_paths
        if paths:
            try:
                await self.blobs.remove(paths)
            except StorageError as e:
                logger.warning(
                    f"Gallery {gallery_id}: blob removal failed, up to {len(paths)} blobs orphaned: {e.message}"
                )

        await self.galleries.delete(caller.id, gallery_id)
        logger.info(f"Deleted gallery {gallery_id} ({len(paths)} photos)")

    async def upload_photo(
        self,
        caller: Identity,
        gallery_id: str,
        data: Optional[bytes],
        file_name: str,
        mime_type: Optional[str] = None,
    ) -> Photo:
        """
        Store the file in the blob store and append a Photo to the gallery.

        Size and type limits belong to the blob store.
        """
        await self._load_owned(caller.id, gallery_id)
        if not data:
            raise MissingFileError()

        storage_path = photo_storage_path(caller.id, gallery_id, file_name, mime_type)
        await self.blobs.upload(storage_path, data, mime_type or DEFAULT_CONTENT_TYPE)

        photo = Photo(id=new_photo_id(), file_name=file_name, storage_path=storage_path)

        def append(gallery: Gallery) -> None:
            gallery.photos.append(photo.model_copy(deep=True))
            gallery.touch()

        try:
            await self._mutate(caller.id, gallery_id, append)
        except AppException:
            await self._discard_blob(storage_path)
            raise

        logger.info(f"Uploaded {file_name} to gallery {gallery_id} as {photo.id}")
        return photo

    # ============================================================
    # Client operations
    # ============================================================

    async def list_client_galleries(self, caller: Identity) -> List[GalleryView]:
        """Galleries shared with the caller, each photo carrying a fresh signed URL."""
        client = await self._load_client(caller.id)
        galleries = await self.galleries.list_for_admin(client.admin_id)

        views = []
        for gallery in galleries:
            if not gallery.is_shared_with(caller.id):
                continue

            view = GalleryView.model_validate(gallery.to_document())
            if view.photos:
                urls = await self.blobs.create_signed_urls(gallery.storage_paths, self.signed_url_ttl)
                for photo in view.photos:
                    photo.url = urls[photo.storage_path]
            views.append(view)

        return views

    async def toggle_favorite(self, caller: Identity, gallery_id: str, photo_id: str) -> bool:
        """Flip the caller's favorite on a photo; returns the new state."""
        client = await self._load_client(caller.id)

        def flip(gallery: Gallery) -> bool:
            if not gallery.is_shared_with(caller.id):
                raise GalleryNotFoundError(gallery_id)
            photo = gallery.find_photo(photo_id)
            if photo is None:
                raise PhotoNotFoundError(photo_id)
            return photo.toggle_favorite(caller.id)

        _, is_favorite = await self._mutate(client.admin_id, gallery_id, flip)
        logger.debug(f"Client {caller.id} favorite on {photo_id}: {is_favorite}")
        return is_favorite

    # ============================================================
    # Helpers
    # ============================================================

    async def _load_owned(self, admin_id: str, gallery_id: str) -> Gallery:
        gallery = await self.galleries.get(admin_id, gallery_id)
        if gallery is None:
            raise GalleryNotFoundError(gallery_id)
        return gallery

    async def _load_client(self, client_id: str) -> ClientProfile:
        client = await self.clients.get(client_id)
        if client is None:
            raise ClientNotFoundError()
        return client

    async def _mutate(
        self,
        admin_id: str,
        gallery_id: str,
        change: Callable[[Gallery], R],
    ) -> Tuple[Gallery, R]:
        """
        Read, change in place, write back if the version is unchanged.

        The change is re-applied to a fresh read after every conflict, so it
        must not keep state between calls.
        """
        for attempt in range(1, self.write_retries + 1):
            gallery = await self._load_owned(admin_id, gallery_id)
            expected_version = gallery.version
            result = change(gallery)

            if await self.galleries.replace(gallery, expected_version):
                return gallery, result

            logger.info(f"Gallery {gallery_id} changed during write, retrying ({attempt}/{self.write_retries})")

        raise WriteConflictError(self.galleries.key(admin_id, gallery_id), self.write_retries)

    async def _discard_blob(self, storage_path: str) -> None:
        try:
            await self.blobs.remove([storage_path])
        except StorageError as e:
            logger.warning(f"Could not remove orphaned blob {storage_path}: {e.message}")
