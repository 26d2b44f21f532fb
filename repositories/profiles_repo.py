"""
Profile repositories - admin:<id> and client:<id> documents.
"""

from typing import Optional

from repositories.base import BaseRepository
from models.domain.profile import AdminProfile, ClientProfile


class AdminsRepository(BaseRepository[AdminProfile]):

    key_prefix = "admin"
    model_class = AdminProfile

    async def save(self, profile: AdminProfile) -> AdminProfile:
        return await self._put(self._key(profile.id), profile)


class ClientsRepository(BaseRepository[ClientProfile]):

    key_prefix = "client"
    model_class = ClientProfile

    async def get(self, client_id: str) -> Optional[ClientProfile]:
        return await self._get(self._key(client_id))

    async def save(self, profile: ClientProfile) -> ClientProfile:
        return await self._put(self._key(profile.id), profile)
