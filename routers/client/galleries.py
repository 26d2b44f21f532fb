"""
Client Galleries Router

Endpoints:
- GET /galleries                                   - Galleries shared with the caller
- POST /galleries/{gid}/photos/{pid}/favorite      - Toggle favorite
"""

from fastapi import APIRouter, Depends

from models.domain import Identity
from models.responses import ClientGalleryListResponse, FavoriteResponse
from routers.deps import get_gallery_service, get_identity
from services import GalleryService

router = APIRouter(prefix="/galleries")


@router.get("", response_model=ClientGalleryListResponse)
async def list_client_galleries(
    client: Identity = Depends(get_identity),
    service: GalleryService = Depends(get_gallery_service),
):
    """Shared galleries; photo URLs are signed per request and expire."""
    return ClientGalleryListResponse(galleries=await service.list_client_galleries(client))


@router.post("/{gallery_id}/photos/{photo_id}/favorite", response_model=FavoriteResponse)
async def toggle_favorite(
    gallery_id: str,
    photo_id: str,
    client: Identity = Depends(get_identity),
    service: GalleryService = Depends(get_gallery_service),
):
    is_favorite = await service.toggle_favorite(client, gallery_id, photo_id)
    return FavoriteResponse(is_favorite=is_favorite)
