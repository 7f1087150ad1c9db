"""
Session redirect gate for page paths.

- signed out: auth-only pages pass through, everything else goes to /login
- signed in: auth-only pages, "/" and "/dashboard" go to /dashboard/current

API and documentation paths are never redirected; their handlers answer
401 through the auth dependency instead.
"""

from __future__ import annotations

import logging
import re

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from bittle.auth.supabase_auth import get_optional_user
from bittle.config import settings

logger = logging.getLogger(__name__)

AUTH_ROUTES = frozenset({
    "/login",
    "/signup",
    "/input-code",
    "/reset-password",
    "/forgot-password",
})

# Never gated
_PASSTHROUGH: list[re.Pattern[str]] = [
    re.compile(r"^/api(/|$)"),
    re.compile(r"^/health$"),
    re.compile(r"^/docs"),
    re.compile(r"^/redoc"),
    re.compile(r"^/openapi\.json$"),
    re.compile(r"^/favicon\.ico$"),
    re.compile(r"\.(png|jpe?g|gif|svg|webp)$"),
]


def is_auth_route(path: str) -> bool:
    return path in AUTH_ROUTES or path.startswith("/input-code/")


def _is_passthrough(path: str) -> bool:
    return any(pat.search(path) for pat in _PASSTHROUGH)


def redirect_target(path: str, signed_in: bool) -> str | None:
    """Where a page request should be sent instead, or None to serve it."""
    if signed_in:
        if is_auth_route(path) or path in ("/", "/dashboard"):
            return settings.HOME_PATH
        return None

    if is_auth_route(path):
        return None
    return settings.LOGIN_PATH


class SessionRedirectMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if _is_passthrough(path):
            return await call_next(request)

        user = get_optional_user(request)
        target = redirect_target(path, signed_in=user is not None)
        if target and target != path:
            logger.debug("Redirecting %s -> %s", path, target)
            return RedirectResponse(url=target, status_code=307)

        return await call_next(request)
