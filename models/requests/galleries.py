"""
Gallery request models.

Only editable fields are accepted; id, adminId, photos and the
timestamps are owned by the service.
"""

from typing import List, Optional
from pydantic import Field, field_validator, model_validator

from models.domain.gallery import GalleryPrivacy, GalleryStatus
from models.requests.common import RequestModel

# Fields of GalleryUpdate that may be sent as an explicit null
NULLABLE_FIELDS = {"description"}


def _dedupe(ids: Optional[List[str]]) -> Optional[List[str]]:
    if ids is None:
        return None
    return list(dict.fromkeys(ids))


class GalleryCreate(RequestModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    status: GalleryStatus = GalleryStatus.DRAFT
    privacy: GalleryPrivacy = GalleryPrivacy.PRIVATE
    download_enabled: bool = True
    favorites_enabled: bool = True
    comments_enabled: bool = True
    clients: List[str] = Field(default_factory=list)

    @field_validator("clients")
    @classmethod
    def unique_clients(cls, v: List[str]) -> List[str]:
        return _dedupe(v)


class GalleryUpdate(RequestModel):
    """Partial update: only the fields present in the body are applied."""

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[GalleryStatus] = None
    privacy: Optional[GalleryPrivacy] = None
    download_enabled: Optional[bool] = None
    favorites_enabled: Optional[bool] = None
    comments_enabled: Optional[bool] = None
    clients: Optional[List[str]] = None

    @field_validator("clients")
    @classmethod
    def unique_clients(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _dedupe(v)

    @model_validator(mode="after")
    def no_null_required_fields(self) -> "GalleryUpdate":
        for field in self.model_fields_set - NULLABLE_FIELDS:
            if getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self
