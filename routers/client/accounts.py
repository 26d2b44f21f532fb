"""
Client account creation (called by an admin).
"""

from fastapi import APIRouter, Depends

from models.domain import Identity
from models.requests import ClientCreateRequest
from models.responses import ClientCreatedResponse
from routers.deps import get_account_service, require_admin
from services import AccountService

router = APIRouter()


@router.post("/create", response_model=ClientCreatedResponse)
async def create_client(
    data: ClientCreateRequest,
    admin: Identity = Depends(require_admin),
    accounts: AccountService = Depends(get_account_service),
):
    """Create a client owned by the calling admin. The temporary password is not returned."""
    client = await accounts.create_client(admin, data.email, data.name, data.galleries)
    return ClientCreatedResponse(client=client)
