import logging
from typing import Optional

from fastapi import HTTPException, Request
from jose import JWTError, jwt

from bittle.config import settings

logger = logging.getLogger(__name__)


def extract_access_token(request: Request) -> Optional[str]:
    """Bearer header first, then the session cookie."""
    authorization = request.headers.get("authorization")
    if authorization:
        if not authorization.startswith("Bearer "):
            return None
        return authorization[len("Bearer "):].strip() or None

    return request.cookies.get(settings.ACCESS_TOKEN_COOKIE) or None


def decode_access_token(token: str) -> dict:
    payload = jwt.decode(
        token,
        settings.SUPABASE_JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
    )
    if not payload.get("sub"):
        raise JWTError("token has no subject")
    return payload


def get_optional_user(request: Request) -> Optional[dict]:
    token = extract_access_token(request)
    if not token:
        return None
    try:
        return decode_access_token(token)
    except JWTError as exc:
        logger.info("Rejected access token: %s", exc)
        return None


def get_current_user(request: Request) -> dict:
    token = extract_access_token(request)
    if not token:
        raise HTTPException(status_code=401, detail="Missing auth header")

    try:
        return decode_access_token(token)  # contains sub + email
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
