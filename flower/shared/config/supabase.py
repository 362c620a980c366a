"""
Supabase client configuration for authentication, table access and realtime.
Handles async Supabase initialization with proper error handling and connection management.
"""

import logging
from typing import Optional

from supabase import AsyncClient, AsyncClientOptions, acreate_client

from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


class SupabaseManager:
    """
    Supabase client manager with lazy connection handling.
    Provides the auth, table and realtime services of one async client.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._client: Optional[AsyncClient] = None
        self.settings = settings or get_settings()

    @property
    def client(self) -> AsyncClient:
        """Get the connected client; ``connect`` must have been awaited."""
        if self._client is None:
            raise ConnectionError("Supabase client is not connected")
        return self._client

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> AsyncClient:
        """Create the async Supabase client once."""
        if self._client is None:
            self._client = await self._create_client()
        return self._client

    async def _create_client(self) -> AsyncClient:
        """Create Supabase client with proper configuration."""
        try:
            client_options = AsyncClientOptions(
                schema="public",
                headers={
                    "User-Agent": f"{self.settings.APP_NAME}/{self.settings.APP_VERSION}",
                },
                auto_refresh_token=True,
                persist_session=True,
            )

            client = await acreate_client(
                supabase_url=self.settings.SUPABASE_URL,
                supabase_key=self.settings.SUPABASE_ANON_KEY,
                options=client_options
            )

            logger.info("Supabase client initialized successfully")
            return client

        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {e}")
            raise ConnectionError(f"Supabase initialization failed: {e}") from e

    async def close(self):
        """Drop realtime channels and the cached client."""
        if self._client:
            try:
                await self._client.remove_all_channels()
            except Exception as e:
                logger.warning(f"Failed to remove realtime channels: {e}")
            self._client = None
            logger.info("Supabase client connections closed")
