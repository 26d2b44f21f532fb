"""
Infrastructure package - external dependencies and integrations.

Modules:
- supabase.py - Unified Supabase client
- document_store.py - Key-value document store
- blob_store.py - Photo blob storage (Supabase, in-memory)
- minio_storage.py - MinIO blob storage
- identity.py - Identity provider adapters
"""

from dataclasses import dataclass
from typing import Optional

from core.config import Settings
from core.exceptions import InternalError
from core.logging import get_logger
from infrastructure.blob_store import BlobStore, InMemoryBlobStore, SupabaseBlobStore
from infrastructure.document_store import DocumentStore, InMemoryDocumentStore, SupabaseDocumentStore
from infrastructure.identity import IdentityProvider, InMemoryIdentityProvider, SupabaseIdentityProvider
from infrastructure.supabase import SupabaseClient

logger = get_logger(__name__)

BACKENDS = ("supabase", "memory")
BLOB_BACKENDS = ("supabase", "minio", "memory")


@dataclass
class Backends:
    """External collaborators of the data service."""

    identity: IdentityProvider
    documents: DocumentStore
    blobs: BlobStore


def build_backends(settings: Settings) -> Backends:
    """Create the identity, document and blob backends named in settings."""
    backend = settings.backend.lower()
    blob_backend = settings.effective_blob_backend

    if backend not in BACKENDS:
        raise InternalError(f"Unknown BACKEND '{settings.backend}'", code="CONFIG_ERROR")
    if blob_backend not in BLOB_BACKENDS:
        raise InternalError(f"Unknown BLOB_BACKEND '{blob_backend}'", code="CONFIG_ERROR")

    supabase: Optional[SupabaseClient] = None
    if backend == "supabase" or blob_backend == "supabase":
        supabase = SupabaseClient(settings)

    if backend == "supabase":
        identity = SupabaseIdentityProvider(supabase, jwt_secret=settings.supabase_jwt_secret)
        documents = SupabaseDocumentStore(supabase, table_name=settings.kv_table)
    else:
        identity = InMemoryIdentityProvider()
        documents = InMemoryDocumentStore()

    if blob_backend == "supabase":
        blobs = SupabaseBlobStore(supabase, bucket=settings.photos_bucket)
    elif blob_backend == "minio":
        from infrastructure.minio_storage import MinioBlobStore
        blobs = MinioBlobStore(settings)
    else:
        blobs = InMemoryBlobStore(bucket=settings.photos_bucket)

    logger.info(f"Backends: identity/documents={backend}, blobs={blob_backend}")
    return Backends(identity=identity, documents=documents, blobs=blobs)


__all__ = [
    'Backends',
    'build_backends',
    'BlobStore',
    'DocumentStore',
    'IdentityProvider',
    'InMemoryBlobStore',
    'InMemoryDocumentStore',
    'InMemoryIdentityProvider',
    'SupabaseClient',
]
