"""
Key-value document store.

Documents are JSON objects addressed by string keys:
    admin:<adminId>
    client:<clientId>
    gallery:<adminId>:<galleryId>

Two implementations:
- SupabaseDocumentStore - `key text primary key, value jsonb` table
- InMemoryDocumentStore - process-local dict (local dev and tests)
"""

import asyncio
import copy
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from core.exceptions import DatabaseError
from core.logging import get_logger

logger = get_logger(__name__)

Document = Dict[str, Any]

VERSION_FIELD = "version"


def document_version(value: Optional[Document]) -> int:
    """Version counter of a stored document; documents without one are version 0."""
    if not value:
        return 0
    return int(value.get(VERSION_FIELD) or 0)


class DocumentStore(ABC):
    """Storage contract used by the repositories."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Document]:
        ...

    @abstractmethod
    async def set(self, key: str, value: Document) -> None:
        """Insert or overwrite."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...

    @abstractmethod
    async def scan_prefix(self, prefix: str) -> List[Document]:
        """All values whose key starts with prefix, ordered by key."""

    @abstractmethod
    async def compare_and_set(self, key: str, value: Document, expected_version: int) -> bool:
        """
        Overwrite key only if the stored document's version equals expected_version.

        Returns False when the document changed (or vanished) since it was read.
        """


class SupabaseDocumentStore(DocumentStore):
    """
    Document store over a Supabase table with `key` and `value` columns.

    supabase-py is synchronous; every call runs in a worker thread.
    """

    page_size = 1000

    def __init__(self, supabase_client, table_name: str = "kv_store"):
        self.client = supabase_client
        self.table_name = table_name

    @property
    def table(self):
        return self.client.table(self.table_name)

    async def get(self, key: str) -> Optional[Document]:
        try:
            response = await asyncio.to_thread(
                self.table.select("value").eq("key", key).limit(1).execute
            )
        except Exception as e:
            self._handle_error("get", e)

        if not response.data:
            return None
        return response.data[0]["value"]

    async def set(self, key: str, value: Document) -> None:
        try:
            await asyncio.to_thread(
                self.table.upsert({"key": key, "value": value}).execute
            )
        except Exception as e:
            self._handle_error("set", e)

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self.table.delete().eq("key", key).execute)
        except Exception as e:
            self._handle_error("delete", e)

    async def scan_prefix(self, prefix: str) -> List[Document]:
        """
        Paginated LIKE scan.

        LIKE treats '_' as a wildcard, so keys are re-checked with startswith.
        """
        values = []
        offset = 0

        while True:
            query = (
                self.table
                .select("key, value")
                .like("key", f"{prefix}%")
                .order("key")
                .range(offset, offset + self.page_size - 1)
            )
            try:
                response = await asyncio.to_thread(query.execute)
            except Exception as e:
                self._handle_error("scan_prefix", e)

            rows = response.data or []
            values.extend(row["value"] for row in rows if row["key"].startswith(prefix))

            if len(rows) < self.page_size:
                break
            offset += self.page_size
            logger.debug(f"Loaded {len(values)} documents under {prefix}...")

        return values

    async def compare_and_set(self, key: str, value: Document, expected_version: int) -> bool:
        query = self.table.update({"value": value}).eq("key", key)
        if expected_version:
            query = query.eq(f"value->>{VERSION_FIELD}", str(expected_version))
        else:
            # Same rule as document_version(): missing, null and 0 are all version 0
            query = query.or_(f"value->>{VERSION_FIELD}.is.null,value->>{VERSION_FIELD}.eq.0")

        try:
            response = await asyncio.to_thread(query.execute)
        except Exception as e:
            self._handle_error("compare_and_set", e)

        return bool(response.data)

    def _handle_error(self, operation: str, error: Exception):
        logger.error(f"{self.table_name}.{operation} failed: {error}")
        raise DatabaseError(str(error), operation=f"{self.table_name}.{operation}")


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed store. Values are deep-copied in and out, like a real store."""

    def __init__(self):
        self.documents: Dict[str, Document] = {}

    def reset(self) -> None:
        self.documents.clear()

    async def get(self, key: str) -> Optional[Document]:
        value = self.documents.get(key)
        return copy.deepcopy(value) if value is not None else None

    async def set(self, key: str, value: Document) -> None:
        self.documents[key] = copy.deepcopy(value)

    async def delete(self, key: str) -> None:
        self.documents.pop(key, None)

    async def scan_prefix(self, prefix: str) -> List[Document]:
        return [
            copy.deepcopy(self.documents[key])
            for key in sorted(self.documents)
            if key.startswith(prefix)
        ]

    async def compare_and_set(self, key: str, value: Document, expected_version: int) -> bool:
        current = self.documents.get(key)
        if current is None or document_version(current) != expected_version:
            return False
        self.documents[key] = copy.deepcopy(value)
        return True
