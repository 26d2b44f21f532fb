import re
import unittest

from core.exceptions import (
    ClientNotFoundError,
    GalleryNotFoundError,
    MissingFileError,
    PhotoNotFoundError,
    StorageError,
    WriteConflictError,
)
from infrastructure.blob_store import InMemoryBlobStore
from infrastructure.document_store import InMemoryDocumentStore
from models.domain import ClientProfile, GalleryPrivacy, GalleryStatus, Identity, Role
from models.requests import GalleryCreate, GalleryUpdate
from repositories import ClientsRepository, GalleriesRepository
from services import GalleryService

ADMIN = Identity(id="admin-1", email="ann@example.com", role=Role.ADMIN)
OTHER_ADMIN = Identity(id="admin-2", email="zoe@example.com", role=Role.ADMIN)
CLIENT = Identity(id="client-1", email="c1@example.com", role=Role.CLIENT)
STRANGER = Identity(id="client-2", email="c2@example.com", role=Role.CLIENT)

BLOB_KEY = re.compile(r"^admin-1/gallery-\d+-[0-9a-f]{12}/\d+-[0-9a-f]{12}\.jpg$")


class FailingRemoveBlobStore(InMemoryBlobStore):
    async def remove(self, keys):
        raise StorageError("bucket unavailable", operation="remove")


class RejectingBlobStore(InMemoryBlobStore):
    async def upload(self, key, data, content_type):
        raise StorageError("Failed to upload photo: payload too large", operation="upload")


class ConflictingDocumentStore(InMemoryDocumentStore):
    """Loses the first `conflicts` compare-and-set races."""

    def __init__(self, conflicts):
        super().__init__()
        self.conflicts = conflicts
        self.attempts = 0

    async def compare_and_set(self, key, value, expected_version):
        self.attempts += 1
        if self.conflicts > 0:
            self.conflicts -= 1
            current = self.documents[key]
            current["version"] = current.get("version", 0) + 1
            return False
        return await super().compare_and_set(key, value, expected_version)


class GalleryServiceTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.documents = InMemoryDocumentStore()
        self.blobs = InMemoryBlobStore()
        self.build()

    def build(self, documents=None, blobs=None, write_retries=5):
        self.documents = documents or self.documents
        self.blobs = blobs or self.blobs
        self.galleries = GalleriesRepository(self.documents)
        self.clients = ClientsRepository(self.documents)
        self.service = GalleryService(
            self.galleries,
            self.clients,
            self.blobs,
            signed_url_ttl=60,
            write_retries=write_retries,
        )

    async def add_client(self, identity, admin=ADMIN):
        await self.clients.save(ClientProfile(id=identity.id, email=identity.email, admin_id=admin.id))

    async def create(self, name="Wedding", admin=ADMIN, **fields):
        return await self.service.create_gallery(admin, GalleryCreate(name=name, **fields))


class AdminGalleryTests(GalleryServiceTestCase):
    async def test_create_defaults(self):
        gallery = await self.create()

        self.assertTrue(gallery.id.startswith("gallery-"))
        self.assertEqual(gallery.admin_id, ADMIN.id)
        self.assertEqual(gallery.status, GalleryStatus.DRAFT)
        self.assertEqual(gallery.privacy, GalleryPrivacy.PRIVATE)
        self.assertTrue(gallery.download_enabled)
        self.assertEqual(gallery.photos, [])
        self.assertEqual(gallery.clients, [])
        self.assertEqual(gallery.created_at, gallery.updated_at)
        self.assertIsNotNone(self.documents.documents.get(f"gallery:{ADMIN.id}:{gallery.id}"))

    async def test_listing_is_scoped_to_owner(self):
        mine = await self.create("Mine")
        await self.create("Theirs", admin=OTHER_ADMIN)

        listed = await self.service.list_galleries(ADMIN)
        self.assertEqual([g.id for g in listed], [mine.id])

    async def test_other_admins_gallery_is_not_found(self):
        theirs = await self.create(admin=OTHER_ADMIN)

        with self.assertRaises(GalleryNotFoundError):
            await self.service.update_gallery(ADMIN, theirs.id, GalleryUpdate(name="Hijacked"))
        with self.assertRaises(GalleryNotFoundError):
            await self.service.delete_gallery(ADMIN, theirs.id)
        with self.assertRaises(GalleryNotFoundError):
            await self.service.upload_photo(ADMIN, theirs.id, b"jpeg", "a.jpg", "image/jpeg")

        stored = await self.galleries.get(OTHER_ADMIN.id, theirs.id)
        self.assertEqual(stored.name, "Wedding")

    async def test_update_merges_only_sent_fields(self):
        gallery = await self.create(description="Summer", clients=["client-1"])

        updated = await self.service.update_gallery(ADMIN, gallery.id, GalleryUpdate(status="published"))

        self.assertEqual(updated.status, GalleryStatus.PUBLISHED)
        self.assertEqual(updated.name, "Wedding")
        self.assertEqual(updated.description, "Summer")
        self.assertEqual(updated.clients, ["client-1"])
        self.assertEqual(updated.created_at, gallery.created_at)
        self.assertGreater(updated.updated_at, gallery.updated_at)

        stored = await self.galleries.get(ADMIN.id, gallery.id)
        self.assertEqual(stored.status, GalleryStatus.PUBLISHED)
        self.assertEqual(stored.version, gallery.version + 1)

    async def test_update_can_clear_description(self):
        gallery = await self.create(description="Summer")
        updated = await self.service.update_gallery(ADMIN, gallery.id, GalleryUpdate(description=None))
        self.assertIsNone(updated.description)

    async def test_delete_removes_document_and_blobs(self):
        gallery = await self.create()
        first = await self.service.upload_photo(ADMIN, gallery.id, b"one", "a.jpg", "image/jpeg")
        second = await self.service.upload_photo(ADMIN, gallery.id, b"two", "b.jpg", "image/jpeg")

        await self.service.delete_gallery(ADMIN, gallery.id)

        self.assertIsNone(await self.galleries.get(ADMIN.id, gallery.id))
        self.assertIsNone(self.blobs.read(first.storage_path))
        self.assertIsNone(self.blobs.read(second.storage_path))
        with self.assertRaises(GalleryNotFoundError):
            await self.service.delete_gallery(ADMIN, gallery.id)

    async def test_delete_survives_blob_failure(self):
        self.build(blobs=FailingRemoveBlobStore())
        gallery = await self.create()
        await self.service.upload_photo(ADMIN, gallery.id, b"one", "a.jpg", "image/jpeg")

        with self.assertLogs("services.galleries", level="WARNING"):
            await self.service.delete_gallery(ADMIN, gallery.id)

        self.assertIsNone(await self.galleries.get(ADMIN.id, gallery.id))


class UploadTests(GalleryServiceTestCase):
    async def test_upload_appends_photo(self):
        gallery = await self.create()

        photo = await self.service.upload_photo(ADMIN, gallery.id, b"jpeg-bytes", "IMG_001.JPG", "image/jpeg")

        self.assertTrue(photo.id.startswith("photo-"))
        self.assertEqual(photo.file_name, "IMG_001.JPG")
        self.assertRegex(photo.storage_path, BLOB_KEY)
        self.assertEqual(photo.favorites, [])
        self.assertEqual(self.blobs.read(photo.storage_path), b"jpeg-bytes")

        stored = await self.galleries.get(ADMIN.id, gallery.id)
        self.assertEqual([p.id for p in stored.photos], [photo.id])
        self.assertGreater(stored.updated_at, gallery.updated_at)

    async def test_same_name_twice_gets_distinct_keys(self):
        gallery = await self.create()
        first = await self.service.upload_photo(ADMIN, gallery.id, b"1", "a.jpg", "image/jpeg")
        second = await self.service.upload_photo(ADMIN, gallery.id, b"2", "a.jpg", "image/jpeg")

        self.assertNotEqual(first.id, second.id)
        self.assertNotEqual(first.storage_path, second.storage_path)
        self.assertEqual(len(self.blobs.objects), 2)

    async def test_missing_gallery_checked_before_file(self):
        with self.assertRaises(GalleryNotFoundError):
            await self.service.upload_photo(ADMIN, "gallery-missing", None, "upload")

    async def test_empty_file(self):
        gallery = await self.create()
        with self.assertRaises(MissingFileError):
            await self.service.upload_photo(ADMIN, gallery.id, b"", "a.jpg", "image/jpeg")
        self.assertEqual(self.blobs.objects, {})

    async def test_blob_rejection_leaves_gallery_unchanged(self):
        self.build(blobs=RejectingBlobStore())
        gallery = await self.create()

        with self.assertRaises(StorageError) as ctx:
            await self.service.upload_photo(ADMIN, gallery.id, b"huge", "a.jpg", "image/jpeg")

        self.assertEqual(ctx.exception.status_code, 500)
        stored = await self.galleries.get(ADMIN.id, gallery.id)
        self.assertEqual(stored.photos, [])


class ClientGalleryTests(GalleryServiceTestCase):
    async def asyncSetUp(self):
        await self.add_client(CLIENT)
        await self.add_client(STRANGER)
        self.shared = await self.create("Wedding", clients=[CLIENT.id])
        self.private = await self.create("Private")
        self.photo = await self.service.upload_photo(ADMIN, self.shared.id, b"jpeg", "a.jpg", "image/jpeg")

    async def test_lists_only_shared_galleries_with_urls(self):
        views = await self.service.list_client_galleries(CLIENT)

        self.assertEqual([v.id for v in views], [self.shared.id])
        self.assertEqual(len(views[0].photos), 1)
        self.assertIn(self.photo.storage_path, views[0].photos[0].url)
        self.assertEqual(await self.service.list_client_galleries(STRANGER), [])

    async def test_unknown_client(self):
        with self.assertRaises(ClientNotFoundError):
            await self.service.list_client_galleries(Identity(id="ghost"))

    async def test_toggle_pairs_cancel_out(self):
        self.assertTrue(await self.service.toggle_favorite(CLIENT, self.shared.id, self.photo.id))
        stored = await self.galleries.get(ADMIN.id, self.shared.id)
        self.assertEqual(stored.photos[0].favorites, [CLIENT.id])

        self.assertFalse(await self.service.toggle_favorite(CLIENT, self.shared.id, self.photo.id))
        stored = await self.galleries.get(ADMIN.id, self.shared.id)
        self.assertEqual(stored.photos[0].favorites, [])

    async def test_three_toggles_invert(self):
        for _ in range(3):
            state = await self.service.toggle_favorite(CLIENT, self.shared.id, self.photo.id)
        self.assertTrue(state)

    async def test_unshared_client_cannot_favorite(self):
        with self.assertRaises(GalleryNotFoundError):
            await self.service.toggle_favorite(STRANGER, self.shared.id, self.photo.id)
        stored = await self.galleries.get(ADMIN.id, self.shared.id)
        self.assertEqual(stored.photos[0].favorites, [])

    async def test_unknown_photo(self):
        with self.assertRaises(PhotoNotFoundError):
            await self.service.toggle_favorite(CLIENT, self.shared.id, "photo-missing")

    async def test_unsharing_hides_only_that_gallery(self):
        second = await self.create("Engagement", clients=[CLIENT.id])
        second_before = (await self.galleries.get(ADMIN.id, second.id)).to_document()

        await self.service.update_gallery(ADMIN, self.shared.id, GalleryUpdate(clients=[]))

        views = await self.service.list_client_galleries(CLIENT)
        self.assertEqual([v.id for v in views], [second.id])
        self.assertEqual((await self.galleries.get(ADMIN.id, second.id)).to_document(), second_before)

        with self.assertRaises(GalleryNotFoundError):
            await self.service.toggle_favorite(CLIENT, self.shared.id, self.photo.id)


class ConcurrencyTests(GalleryServiceTestCase):
    async def test_conflict_is_retried(self):
        self.build(documents=ConflictingDocumentStore(conflicts=2))
        gallery = await self.create()

        updated = await self.service.update_gallery(ADMIN, gallery.id, GalleryUpdate(name="Renamed"))

        self.assertEqual(self.documents.attempts, 3)
        self.assertEqual(updated.name, "Renamed")
        stored = await self.galleries.get(ADMIN.id, gallery.id)
        self.assertEqual(stored.name, "Renamed")

    async def test_retries_exhausted(self):
        self.build(documents=ConflictingDocumentStore(conflicts=10), write_retries=3)
        gallery = await self.create()

        with self.assertRaises(WriteConflictError):
            await self.service.update_gallery(ADMIN, gallery.id, GalleryUpdate(name="Renamed"))
        self.assertEqual(self.documents.attempts, 3)

    async def test_failed_upload_write_discards_blob(self):
        self.build(documents=ConflictingDocumentStore(conflicts=10), write_retries=2)
        gallery = await self.create()

        with self.assertRaises(WriteConflictError):
            await self.service.upload_photo(ADMIN, gallery.id, b"jpeg", "a.jpg", "image/jpeg")
        self.assertEqual(self.blobs.objects, {})


if __name__ == "__main__":
    unittest.main()
