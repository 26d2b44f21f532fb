"""
AccountService - admin sign-up and client creation.

Users live in the identity provider (role kept in user metadata);
the matching profile documents live in the document store.
"""

import secrets
from typing import List, Optional

from core.logging import get_logger
from infrastructure.identity import IdentityProvider
from models.domain import AdminProfile, ClientProfile, Identity, ProviderUser, Role
from repositories import AdminsRepository, ClientsRepository

logger = get_logger(__name__)


def generate_temporary_password() -> str:
    return secrets.token_urlsafe(12)


class AccountService:

    def __init__(
        self,
        identity: IdentityProvider,
        admins: AdminsRepository,
        clients: ClientsRepository,
    ):
        self.identity = identity
        self.admins = admins
        self.clients = clients

    async def sign_up_admin(
        self,
        email: str,
        password: str,
        name: Optional[str] = None,
        business_name: Optional[str] = None,
    ) -> ProviderUser:
        """Create an admin identity and its AdminProfile."""
        user = await self.identity.create_user(
            email,
            password,
            {"name": name, "businessName": business_name, "role": Role.ADMIN.value},
        )

        await self.admins.save(AdminProfile(
            id=user.id,
            email=email,
            name=name,
            business_name=business_name,
        ))
        logger.info(f"Admin signed up: {user.id}")
        return user

    async def create_client(
        self,
        caller: Identity,
        email: str,
        name: Optional[str] = None,
        galleries: Optional[List[str]] = None,
    ) -> ClientProfile:
        """
        Create a client identity owned by the caller.

        The client gets a random temporary password; it is never returned.
        """
        user = await self.identity.create_user(
            email,
            generate_temporary_password(),
            {"name": name, "role": Role.CLIENT.value, "adminId": caller.id},
        )

        profile = ClientProfile(
            id=user.id,
            email=email,
            name=name,
            admin_id=caller.id,
            galleries=list(galleries or []),
        )
        await self.clients.save(profile)
        logger.info(f"Admin {caller.id} created client {user.id}")
        return profile
