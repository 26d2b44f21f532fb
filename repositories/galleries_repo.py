"""
Galleries repository - gallery documents keyed gallery:<adminId>:<galleryId>.

The key is namespaced by owner, so an admin can only ever address
their own galleries.
"""

from typing import Optional, List

from repositories.base import BaseRepository
from models.domain.gallery import Gallery


class GalleriesRepository(BaseRepository[Gallery]):

    key_prefix = "gallery"
    model_class = Gallery

    def key(self, admin_id: str, gallery_id: str) -> str:
        return self._key(admin_id, gallery_id)

    async def list_for_admin(self, admin_id: str) -> List[Gallery]:
        return await self._scan(self._key(admin_id, ""))

    async def get(self, admin_id: str, gallery_id: str) -> Optional[Gallery]:
        return await self._get(self.key(admin_id, gallery_id))

    async def create(self, gallery: Gallery) -> Gallery:
        gallery.version = 1
        return await self._put(self.key(gallery.admin_id, gallery.id), gallery)

    async def replace(self, gallery: Gallery, expected_version: int) -> bool:
        """
        Write the gallery if nobody else wrote it since expected_version was read.

        Bumps gallery.version on success.
        """
        gallery.version = expected_version + 1
        written = await self.store.compare_and_set(
            self.key(gallery.admin_id, gallery.id),
            gallery.to_document(),
            expected_version,
        )
        if not written:
            gallery.version = expected_version
            self.logger.debug(f"Version conflict on gallery {gallery.id} (expected v{expected_version})")
        return written

    async def delete(self, admin_id: str, gallery_id: str) -> None:
        await self._delete(self.key(admin_id, gallery_id))

    async def list_all(self) -> List[Gallery]:
        """Every gallery of every admin (maintenance scripts only)."""
        return await self._scan(self._key(""))
