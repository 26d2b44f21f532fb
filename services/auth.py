"""
Authentication service.

Turns an Authorization header into a typed Identity. Everything after
this point uses the resolved identity, never an id sent by the client.
"""

from typing import Optional

from core.exceptions import AdminRequiredError, AuthenticationError, InvalidTokenError
from core.logging import get_logger
from infrastructure.identity import IdentityProvider
from models.domain import Identity

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Token from an `Authorization: Bearer <token>` header.

    Raises:
        AuthenticationError: header missing or not a bearer token
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise AuthenticationError()

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token or " " in token:
        raise AuthenticationError()
    return token


class AuthService:

    def __init__(self, identity: IdentityProvider, enforce_admin_role: bool = True):
        self.identity = identity
        self.enforce_admin_role = enforce_admin_role

    async def authenticate(self, authorization: Optional[str]) -> Identity:
        """
        Resolve the caller.

        Raises:
            AuthenticationError: missing, malformed or unresolvable token
        """
        token = extract_bearer_token(authorization)

        user = await self.identity.resolve_token(token)
        if user is None:
            raise InvalidTokenError()
        return user.to_identity()

    def require_admin(self, identity: Identity) -> Identity:
        """Admin-only gate; a no-op when ENFORCE_ADMIN_ROLE is off."""
        if self.enforce_admin_role and not identity.is_admin:
            logger.warning(f"Non-admin {identity.id} called an admin operation")
            raise AdminRequiredError()
        return identity
