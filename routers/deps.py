"""
Router dependencies.

Service instances are created once in main.py and injected here via
set_services(); endpoints receive them through Depends() so tests can
override any of them.
"""

from fastapi import Depends, Request

from core.exceptions import AuthenticationError
from core.logging import get_logger
from models.domain import Identity
from services import AccountService, AuthService, GalleryService

logger = get_logger(__name__)

# Global service instances (set via set_services)
auth_service_instance: AuthService = None
account_service_instance: AccountService = None
gallery_service_instance: GalleryService = None


def set_services(
    auth_service: AuthService,
    account_service: AccountService,
    gallery_service: GalleryService,
):
    """Set service instances for dependency injection."""
    global auth_service_instance, account_service_instance, gallery_service_instance
    auth_service_instance = auth_service
    account_service_instance = account_service
    gallery_service_instance = gallery_service
    logger.info("Router services initialized")


def get_auth_service() -> AuthService:
    return auth_service_instance


def get_account_service() -> AccountService:
    return account_service_instance


def get_gallery_service() -> GalleryService:
    return gallery_service_instance


def get_identity(request: Request) -> Identity:
    """Identity resolved by AuthMiddleware for this request."""
    identity = getattr(request.state, "identity", None)
    if identity is None:
        raise AuthenticationError()
    return identity


def require_admin(
    identity: Identity = Depends(get_identity),
    auth_service: AuthService = Depends(get_auth_service),
) -> Identity:
    return auth_service.require_admin(identity)
