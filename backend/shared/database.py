"""
Database client factory for Supabase.

Provides the service-role client (for collection reads and writes, always
scoped by user id in the repositories) and fresh anon-key clients (for
Supabase Auth calls, which keep per-client session state).
"""

from typing import Optional
from supabase import create_client, Client

from .config import get_settings

# Module-level client cache
_service_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get Supabase client with service role (bypasses RLS).

    Repositories using this client must filter every query on user_id,
    which UserCollection does for all entity collections. The same client
    serves as the admin client for account deletion.

    Returns:
        Supabase client configured with service role key
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
            )
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def get_supabase_anon_client() -> Client:
    """
    Create a new Supabase client with the anon key.

    Auth calls (sign-in, sign-up, sign-out) store the resulting session on
    the client, so every identity adapter gets its own instance.

    Returns:
        Supabase client configured with the anon key
    """
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_anon_key:
        raise RuntimeError(
            "Supabase configuration missing. "
            "Set SUPABASE_URL and SUPABASE_ANON_KEY environment variables."
        )

    return create_client(
        settings.supabase_url,
        settings.supabase_anon_key,
    )


def reset_client_cache() -> None:
    """
    Reset the cached database client.

    Useful for testing or when configuration changes.
    """
    global _service_client
    _service_client = None
