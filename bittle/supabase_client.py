from typing import Optional

from supabase import Client, create_client

from bittle.config import settings


def create_supabase_client(access_token: Optional[str] = None) -> Client:
    """
    Build a Supabase client for one request.

    With an access token the PostgREST calls run as that user, so the
    store's row-level security decides what is visible.
    """
    client = create_client(settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY)
    if access_token:
        client.postgrest.auth(access_token)
    return client
