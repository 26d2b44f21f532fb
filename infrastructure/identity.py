"""
Identity provider adapters.

The provider owns credentials, sessions and the role stored in user
metadata. The service only creates users, resolves bearer tokens and
(for tooling and tests) signs users in.

v1.0: Supabase Auth (remote token check via auth.get_user)
v1.1: Local HS256 verification when SUPABASE_JWT_SECRET is configured
"""

import asyncio
import hashlib
import secrets
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from jose import jwt, JWTError
from supabase import AuthError

from core.exceptions import IdentityProviderError, ValidationError
from core.logging import get_logger
from models.domain import AuthSession, ProviderUser, utcnow

logger = get_logger(__name__)

ALGORITHM = "HS256"


class IdentityProvider(ABC):

    @abstractmethod
    async def create_user(self, email: str, password: str, metadata: Dict[str, Any]) -> ProviderUser:
        """
        Create a confirmed user.

        Raises:
            ValidationError: provider rejected the credentials (duplicate email, weak password)
            IdentityProviderError: anything else
        """

    @abstractmethod
    async def resolve_token(self, token: str) -> Optional[ProviderUser]:
        """User behind an access token, or None if the token is invalid or expired."""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthSession:
        """Password sign-in. Raises ValidationError on bad credentials."""


# ============================================================
# Supabase
# ============================================================

def decode_supabase_jwt(token: str, secret: str) -> Optional[ProviderUser]:
    """
    Verify a Supabase access token locally.

    Returns:
        ProviderUser built from the claims, or None if the token is invalid
    """
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            options={"verify_aud": False}  # Supabase doesn't always set aud
        )
    except JWTError as e:
        logger.warning(f"Supabase JWT verification failed: {e}")
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    return ProviderUser(
        id=user_id,
        email=payload.get("email"),
        user_metadata=payload.get("user_metadata") or {},
    )


def _to_provider_user(user) -> ProviderUser:
    return ProviderUser(
        id=str(user.id),
        email=user.email,
        user_metadata=user.user_metadata or {},
        created_at=user.created_at,
    )


def _is_rejection(error: Exception) -> bool:
    """4xx answers from the auth API (weak password included) mean the input was refused."""
    status = getattr(error, "status", None)
    return isinstance(error, AuthError) and status is not None and 400 <= int(status) < 500


class SupabaseIdentityProvider(IdentityProvider):
    """Supabase Auth via the service-role client."""

    def __init__(self, supabase_client, jwt_secret: Optional[str] = None):
        self.client = supabase_client
        self.jwt_secret = jwt_secret

    async def create_user(self, email: str, password: str, metadata: Dict[str, Any]) -> ProviderUser:
        attributes = {
            "email": email,
            "password": password,
            "user_metadata": metadata,
            "email_confirm": True,  # No email server; users are confirmed on creation
        }
        try:
            response = await asyncio.to_thread(self.client.auth.admin.create_user, attributes)
        except AuthError as e:
            if _is_rejection(e):
                raise ValidationError(e.message, field="email")
            logger.error(f"Auth create_user failed: {e}")
            raise IdentityProviderError(str(e), operation="create_user")
        except Exception as e:
            logger.error(f"Auth create_user failed: {e}")
            raise IdentityProviderError(str(e), operation="create_user")

        return _to_provider_user(response.user)

    async def resolve_token(self, token: str) -> Optional[ProviderUser]:
        if self.jwt_secret:
            return decode_supabase_jwt(token, self.jwt_secret)

        try:
            response = await asyncio.to_thread(self.client.auth.get_user, token)
        except AuthError as e:
            if _is_rejection(e):
                return None
            logger.error(f"Auth get_user failed: {e}")
            raise IdentityProviderError(str(e), operation="get_user")
        except Exception as e:
            logger.error(f"Auth get_user failed: {e}")
            raise IdentityProviderError(str(e), operation="get_user")

        if response is None or response.user is None:
            return None
        return _to_provider_user(response.user)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        client = self.client.new_session_client()
        try:
            response = await asyncio.to_thread(
                client.auth.sign_in_with_password, {"email": email, "password": password}
            )
        except AuthError as e:
            if _is_rejection(e):
                raise ValidationError(e.message)
            logger.error(f"Auth sign_in failed: {e}")
            raise IdentityProviderError(str(e), operation="sign_in")
        except Exception as e:
            logger.error(f"Auth sign_in failed: {e}")
            raise IdentityProviderError(str(e), operation="sign_in")

        return AuthSession(
            access_token=response.session.access_token,
            user=_to_provider_user(response.user),
        )


# ============================================================
# In-memory
# ============================================================

class InMemoryIdentityProvider(IdentityProvider):
    """
    Process-local identity provider.

    Mirrors the Supabase rules the service depends on: unique emails,
    minimum password length, opaque bearer tokens.
    """

    min_password_length = 6

    def __init__(self):
        self.users: Dict[str, ProviderUser] = {}
        self._emails: Dict[str, str] = {}
        self._passwords: Dict[str, str] = {}
        self._tokens: Dict[str, str] = {}

    def reset(self) -> None:
        self.users.clear()
        self._emails.clear()
        self._passwords.clear()
        self._tokens.clear()

    @staticmethod
    def _hash(user_id: str, password: str) -> str:
        return hashlib.sha256(f"{user_id}:{password}".encode()).hexdigest()

    async def create_user(self, email: str, password: str, metadata: Dict[str, Any]) -> ProviderUser:
        normalized = (email or "").strip().lower()
        if "@" not in normalized:
            raise ValidationError("Unable to validate email address: invalid format", field="email")
        if normalized in self._emails:
            raise ValidationError("A user with this email address has already been registered", field="email")
        if len(password or "") < self.min_password_length:
            raise ValidationError(
                f"Password should be at least {self.min_password_length} characters",
                field="password",
            )

        user = ProviderUser(
            id=secrets.token_hex(16),
            email=normalized,
            user_metadata=dict(metadata),
            created_at=utcnow(),
        )
        self.users[user.id] = user
        self._emails[normalized] = user.id
        self._passwords[user.id] = self._hash(user.id, password)
        return user

    async def resolve_token(self, token: str) -> Optional[ProviderUser]:
        user_id = self._tokens.get(token)
        if user_id is None:
            return None
        return self.users.get(user_id)

    async def sign_in(self, email: str, password: str) -> AuthSession:
        user_id = self._emails.get((email or "").strip().lower())
        if user_id is None or self._passwords[user_id] != self._hash(user_id, password):
            raise ValidationError("Invalid login credentials")
        return AuthSession(access_token=self.issue_token(user_id), user=self.users[user_id])

    def issue_token(self, user_id: str) -> str:
        """Mint a bearer token for an existing user."""
        if user_id not in self.users:
            raise ValidationError("User not found")
        token = secrets.token_urlsafe(24)
        self._tokens[token] = user_id
        return token

    def revoke_token(self, token: str) -> None:
        self._tokens.pop(token, None)
