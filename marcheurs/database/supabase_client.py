from typing import Optional

from supabase import create_client, Client
from marcheurs.config import settings


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        """Client with the anon key; used for auth calls (magic link, token check)."""
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Falls back to the anon client."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def get_admin_client(cls) -> Optional[Client]:
        """Service-role client or None; webhook handlers must not run on the anon key."""
        if not settings.supabase_url or not settings.supabase_service_role_key:
            return None
        return cls.get_service_client()


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_service_supabase() -> Client:
    return SupabaseClient.get_service_client()


def get_admin_supabase() -> Optional[Client]:
    return SupabaseClient.get_admin_client()
