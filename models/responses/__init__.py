"""
Response DTOs - API output.
"""

from typing import List
from pydantic import BaseModel, ConfigDict, Field

from core.responses import ApiSuccess
from models.domain import ClientProfile, Gallery, GalleryView, Photo, ProviderUser


class SignupResponse(ApiSuccess):
    user: ProviderUser


class ClientCreatedResponse(ApiSuccess):
    client: ClientProfile


class GalleryListResponse(BaseModel):
    galleries: List[Gallery]


class ClientGalleryListResponse(BaseModel):
    galleries: List[GalleryView]


class GalleryResponse(ApiSuccess):
    gallery: Gallery


class PhotoResponse(ApiSuccess):
    photo: Photo


class FavoriteResponse(ApiSuccess):
    model_config = ConfigDict(populate_by_name=True)

    is_favorite: bool = Field(..., alias="isFavorite")


__all__ = [
    'SignupResponse',
    'ClientCreatedResponse',
    'GalleryListResponse',
    'ClientGalleryListResponse',
    'GalleryResponse',
    'PhotoResponse',
    'FavoriteResponse',
]
