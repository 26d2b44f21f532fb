"""
Admin sign-up.

The only write endpoint that needs no token: it creates the first identity.
"""

from fastapi import APIRouter, Depends

from core.logging import get_logger
from models.requests import AdminSignupRequest
from models.responses import SignupResponse
from routers.deps import get_account_service
from services import AccountService

logger = get_logger(__name__)
router = APIRouter()


@router.post("/signup", response_model=SignupResponse)
async def admin_signup(
    data: AdminSignupRequest,
    accounts: AccountService = Depends(get_account_service),
):
    """Register a photographer account."""
    user = await accounts.sign_up_admin(
        email=data.email,
        password=data.password,
        name=data.name,
        business_name=data.business_name,
    )
    return SignupResponse(user=user)
