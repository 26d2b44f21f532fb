"""
Identity models - who is calling.

ProviderUser mirrors the identity provider's user record;
Identity is the resolved caller handed to every operation.
"""

from typing import Optional, Dict, Any
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field


class Role(str, Enum):
    ADMIN = "admin"
    CLIENT = "client"


class Identity(BaseModel):
    """Authenticated caller resolved from a bearer token."""

    id: str
    email: Optional[str] = None
    role: Role = Role.CLIENT

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class ProviderUser(BaseModel):
    """User record as returned by the identity provider."""

    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: Optional[datetime] = None

    @property
    def role(self) -> Role:
        # Users without a role in metadata are treated as clients
        try:
            return Role(self.user_metadata.get("role", Role.CLIENT.value))
        except ValueError:
            return Role.CLIENT

    def to_identity(self) -> Identity:
        return Identity(id=self.id, email=self.email, role=self.role)


class AuthSession(BaseModel):
    """Session issued by a password sign-in."""

    access_token: str
    user: ProviderUser
