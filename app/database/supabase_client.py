from typing import Optional

from supabase import create_client, Client
from app.config import settings


class SupabaseClient:
    """Lazily built Supabase clients. Services never reach for these directly;
    they receive a client through their constructor (see get_supabase)."""

    _client: Optional[Client] = None
    _service_client: Optional[Client] = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Optional[Client]:
        """Client with service_role key; bypasses RLS and can call auth.admin. None when not configured."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_service_supabase() -> Optional[Client]:
    return SupabaseClient.get_service_client()
