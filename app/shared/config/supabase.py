"""
Supabase client configuration for record and object storage access.
Handles lazy async client initialization with proper error handling and shutdown.
"""

import asyncio
import logging
from functools import lru_cache
from typing import Optional

from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from .settings import get_settings


logger = logging.getLogger(__name__)


class SupabaseManager:
    """
    Supabase client manager with lazy connection handling.
    Provides the service-role client used for record and storage maintenance.
    """

    def __init__(self):
        self._client: Optional[AsyncClient] = None
        self._lock = asyncio.Lock()
        self.settings = get_settings()

    async def get_client(self) -> AsyncClient:
        """Get or create the async Supabase client with lazy initialization."""
        if self._client is None:
            async with self._lock:
                if self._client is None:
                    self._client = await self._create_client()
        return self._client

    async def _create_client(self) -> AsyncClient:
        """Create Supabase client with proper configuration."""
        try:
            # Service role access: no end-user session to refresh or persist
            client_options = AsyncClientOptions(
                schema="public",
                headers={
                    "User-Agent": f"PlantCareApp/{self.settings.APP_VERSION}",
                },
                auto_refresh_token=False,
                persist_session=False,
                postgrest_client_timeout=self.settings.SUPABASE_POSTGREST_TIMEOUT,
                storage_client_timeout=self.settings.SUPABASE_STORAGE_TIMEOUT,
            )

            client = await acreate_client(
                supabase_url=self.settings.SUPABASE_URL,
                supabase_key=self.settings.SUPABASE_SERVICE_ROLE_KEY,
                options=client_options,
            )

            logger.info("Supabase client initialized successfully")
            return client

        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {e}")
            raise ConnectionError(f"Supabase initialization failed: {e}") from e

    async def health_check(self) -> dict:
        """
        Perform health check on Supabase storage.

        Returns:
            dict: Health status of Supabase services
        """
        health_status = {
            "supabase_connection": False,
            "storage_service": False,
            "error": None,
        }

        try:
            client = await self.get_client()
            health_status["supabase_connection"] = True
            await client.storage.list_buckets()
            health_status["storage_service"] = True
        except Exception as e:
            error_msg = f"Supabase health check failed: {e}"
            logger.warning(error_msg)
            health_status["error"] = error_msg

        return health_status

    async def close(self):
        """
        Close the PostgREST and Storage HTTP sessions of the cached client.

        The next get_client() call reconnects.
        """
        client, self._client = self._client, None
        if client is None:
            return

        try:
            await client.postgrest.aclose()
            await client.storage.session.aclose()
            logger.info("Supabase client connections closed")
        except Exception as e:
            logger.warning(f"Supabase client close failed: {e}")


@lru_cache()
def get_supabase_manager() -> SupabaseManager:
    """
    Get cached Supabase manager instance.

    Returns:
        SupabaseManager: Singleton Supabase manager
    """
    return SupabaseManager()


async def get_supabase_client() -> AsyncClient:
    """
    Get Supabase client for direct usage (FastAPI dependency).

    Returns:
        AsyncClient: Supabase client instance
    """
    return await get_supabase_manager().get_client()


async def cleanup_supabase():
    """Cleanup Supabase connections on application shutdown."""
    await get_supabase_manager().close()
    logger.info("Supabase cleanup completed")
