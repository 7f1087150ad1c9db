from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Depends, Request

from bittle.auth.supabase_auth import extract_access_token, get_current_user
from bittle.core.cache import QueryCache, query_cache
from bittle.supabase_client import create_supabase_client


@dataclass
class RequestContext:
    """Everything a handler needs: the store client, the caller and the cache."""

    client: Any
    user_id: Optional[str]
    cache: QueryCache
    email: Optional[str] = None


def get_context(
    request: Request,
    current_user: dict = Depends(get_current_user),
) -> RequestContext:
    token = extract_access_token(request)
    return RequestContext(
        client=create_supabase_client(token),
        user_id=current_user["sub"],
        email=current_user.get("email"),
        cache=query_cache,
    )


def get_public_context() -> RequestContext:
    """Anonymous context for the applicant-facing pages."""
    return RequestContext(
        client=create_supabase_client(),
        user_id=None,
        cache=query_cache,
    )
