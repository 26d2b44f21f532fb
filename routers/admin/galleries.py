"""
Admin Galleries Router

Endpoints:
- GET /galleries                 - List caller's galleries
- POST /galleries                - Create gallery
- PUT /galleries/{id}            - Update gallery (shallow merge)
- DELETE /galleries/{id}         - Delete gallery and its photo blobs
- POST /galleries/{id}/photos    - Upload one photo (multipart field "photo")
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from core.responses import ApiSuccess
from models.domain import Identity
from models.requests import GalleryCreate, GalleryUpdate
from models.responses import GalleryListResponse, GalleryResponse, PhotoResponse
from routers.deps import get_gallery_service, require_admin
from services import GalleryService

router = APIRouter(prefix="/galleries")


@router.get("", response_model=GalleryListResponse)
async def list_galleries(
    admin: Identity = Depends(require_admin),
    service: GalleryService = Depends(get_gallery_service),
):
    """All galleries owned by the caller."""
    return GalleryListResponse(galleries=await service.list_galleries(admin))


@router.post("", response_model=GalleryResponse)
async def create_gallery(
    data: GalleryCreate,
    admin: Identity = Depends(require_admin),
    service: GalleryService = Depends(get_gallery_service),
):
    gallery = await service.create_gallery(admin, data)
    return GalleryResponse(gallery=gallery)


@router.put("/{gallery_id}", response_model=GalleryResponse)
async def update_gallery(
    gallery_id: str,
    data: GalleryUpdate,
    admin: Identity = Depends(require_admin),
    service: GalleryService = Depends(get_gallery_service),
):
    gallery = await service.update_gallery(admin, gallery_id, data)
    return GalleryResponse(gallery=gallery)


@router.delete("/{gallery_id}", response_model=ApiSuccess)
async def delete_gallery(
    gallery_id: str,
    admin: Identity = Depends(require_admin),
    service: GalleryService = Depends(get_gallery_service),
):
    await service.delete_gallery(admin, gallery_id)
    return ApiSuccess()


@router.post("/{gallery_id}/photos", response_model=PhotoResponse)
async def upload_photo(
    gallery_id: str,
    photo: Optional[UploadFile] = File(None),
    admin: Identity = Depends(require_admin),
    service: GalleryService = Depends(get_gallery_service),
):
    """
    Upload a photo or video into the gallery.

    Size and type limits are enforced by the blob store.
    """
    data = await photo.read() if photo is not None else None
    created = await service.upload_photo(
        admin,
        gallery_id,
        data,
        file_name=photo.filename if photo is not None and photo.filename else "upload",
        mime_type=photo.content_type if photo is not None else None,
    )
    return PhotoResponse(photo=created)
