from typing import Any

from fintrack.services.supabase_client import get_supabase


def _user_id_from_response(response: Any) -> str | None:
    user = getattr(response, "user", None)
    if user is None and isinstance(response, dict):
        user = response.get("user") or (response.get("data") or {}).get("user")
    if user is None:
        return None
    if isinstance(user, dict):
        return user.get("id")
    return getattr(user, "id", None)


def get_owner_id_from_token(access_token: str) -> str:
    """Resolve the Supabase user behind an access token; that user owns the import."""
    response = get_supabase().auth.get_user(access_token)
    owner_id = _user_id_from_response(response)
    if not owner_id:
        raise RuntimeError("Unable to resolve user from access token")
    return str(owner_id)
