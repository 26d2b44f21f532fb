"""
Base repository with common functionality.
"""

from typing import Optional, List, TypeVar, Generic

from pydantic import ValidationError as PydanticValidationError

from core.exceptions import DatabaseError
from core.logging import get_logger
from infrastructure.document_store import DocumentStore
from models.domain.base import DocumentModel

T = TypeVar('T', bound=DocumentModel)


class BaseRepository(Generic[T]):
    """
    Base repository over the key-value document store.

    Subclasses should:
    - Set `key_prefix` class attribute
    - Set `model_class` class attribute
    - Build keys with `_key(...)`
    """

    key_prefix: str = None
    model_class: type = None

    def __init__(self, store: DocumentStore):
        """
        Initialize repository.

        Args:
            store: DocumentStore instance (from infrastructure/)
        """
        self.store = store
        self.logger = get_logger(f"repo.{self.__class__.__name__}")

    @classmethod
    def _key(cls, *parts: str) -> str:
        return ":".join((cls.key_prefix,) + parts)

    # ============================================================
    # Generic Operations
    # ============================================================

    async def _get(self, key: str) -> Optional[T]:
        data = await self.store.get(key)
        if data is None:
            return None
        return self._to_model(data, key)

    async def _put(self, key: str, model: T) -> T:
        await self.store.set(key, model.to_document())
        return model

    async def _delete(self, key: str) -> None:
        await self.store.delete(key)

    async def _scan(self, prefix: str) -> List[T]:
        return [self._to_model(data, prefix) for data in await self.store.scan_prefix(prefix)]

    # ============================================================
    # Helper Methods
    # ============================================================

    def _to_model(self, data: dict, key: str) -> T:
        """Convert a stored document to a model instance."""
        try:
            return self.model_class.model_validate(data)
        except PydanticValidationError as e:
            self.logger.error(f"Malformed document under {key}: {e}")
            raise DatabaseError(f"Malformed document under {key}", operation="decode")
