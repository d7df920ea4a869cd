from functools import lru_cache

from supabase import Client, ClientOptions, create_client

from fintrack.config import settings


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    """Service-role client; row ownership is enforced by the importer passing user_id."""
    if not settings.supabase_url or not settings.supabase_service_role_key:
        raise RuntimeError(
            "Supabase credentials are not configured "
            "(SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY)."
        )
    options = ClientOptions(postgrest_client_timeout=settings.supabase_timeout_seconds)
    return create_client(
        settings.supabase_url, settings.supabase_service_role_key, options=options
    )
