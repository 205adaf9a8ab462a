"""
Supabase Client Configuration
Handles connection to Supabase for auth, database, and storage
"""
from typing import Optional
from supabase import create_client, Client, ClientOptions
from dotenv import load_dotenv
from config import get_settings
import logging

load_dotenv()
logger = logging.getLogger(__name__)


class SupabaseClient:
    """Singleton Supabase client"""

    _instance: Optional[Client] = None

    @classmethod
    def get_client(cls) -> Client:
        """Get or create Supabase client instance"""
        if cls._instance is None:
            settings = get_settings()
            url = settings.supabase_url
            # Service role key when available, otherwise fall back to the anon key
            key = settings.supabase_service_role_key or settings.supabase_anon_key

            if not url or not key:
                raise ValueError(
                    "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY (or SUPABASE_ANON_KEY) must be set"
                )

            cls._instance = create_client(url, key)
            logger.info("✓ Supabase client initialized")

        return cls._instance

    @classmethod
    def reset(cls):
        """Reset client instance (for testing)"""
        cls._instance = None


# Convenience function
def get_supabase() -> Client:
    """Get Supabase client instance"""
    return SupabaseClient.get_client()


def get_auth_client() -> Client:
    """
    Fresh client for one Supabase Auth call.

    Signing in or refreshing swaps the client's Authorization header to the
    user's token, so auth calls never touch the shared store client.
    """
    settings = get_settings()
    url = settings.supabase_url
    key = settings.supabase_anon_key or settings.supabase_service_role_key

    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")

    return create_client(
        url,
        key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )
