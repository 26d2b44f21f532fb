"""
Unified Supabase client.

One service-role client per process, shared by the document store,
the blob store and the identity provider adapters.
"""

from typing import Optional
from supabase import create_client, Client, ClientOptions

from core.config import settings as default_settings, Settings
from core.exceptions import InternalError
from core.logging import get_logger

logger = get_logger(__name__)


class SupabaseClient:
    """
    Thin holder around the supabase-py client.

    Provides:
    - Connection management
    - Access to tables, storage and auth admin APIs
    """

    def __init__(self, settings: Settings = None):
        """Initialize Supabase client."""
        self.settings = settings or default_settings
        self._client: Optional[Client] = None
        self._connect()

    def _connect(self):
        """Establish connection to Supabase."""
        if not self.settings.supabase_url or not self.settings.supabase_service_role_key:
            raise InternalError(
                "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set",
                code="CONFIG_ERROR",
            )
        try:
            self._client = create_client(
                self.settings.supabase_url,
                self.settings.supabase_service_role_key,
                options=ClientOptions(auto_refresh_token=False, persist_session=False),
            )
            logger.info("Supabase client initialized")
        except Exception as e:
            logger.error(f"Failed to connect to Supabase: {e}")
            raise InternalError(f"Failed to connect to Supabase: {e}", code="CONNECTION_ERROR")

    @property
    def client(self) -> Client:
        """Get raw Supabase client for direct queries."""
        if not self._client:
            self._connect()
        return self._client

    def table(self, name: str):
        """Get table reference for chaining."""
        return self.client.table(name)

    def bucket(self, name: str):
        """Get storage bucket reference."""
        return self.client.storage.from_(name)

    @property
    def storage(self):
        return self.client.storage

    @property
    def auth(self):
        return self.client.auth

    def new_session_client(self) -> Client:
        """
        Fresh client for password sign-in.

        Signing in stores the user's session on the client it runs on,
        so it must never run on the shared service-role client.
        """
        key = self.settings.supabase_anon_key or self.settings.supabase_service_role_key
        return create_client(
            self.settings.supabase_url,
            key,
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )
