"""
Base class for documents kept in the key-value store.

Stored documents use camelCase keys (adminId, createdAt, ...) so the
Python side maps snake_case attributes onto camelCase aliases.
"""

from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentModel(BaseModel):
    """Pydantic model persisted as a JSON document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        """JSON-ready dict with camelCase keys, as stored."""
        return self.model_dump(mode="json", by_alias=True)
