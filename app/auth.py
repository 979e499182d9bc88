"""Resolve the calling user from a JWT bearer token or auth cookie.

Tokens are issued elsewhere; this module only verifies them.
"""
from typing import Optional
import inspect

from fastapi import HTTPException, Request, status
from fastapi.security.utils import get_authorization_scheme_param
from jose import JWTError, jwt

from app.config import get_settings
from app.database import get_db_connection

import logging

logger = logging.getLogger(__name__)

settings = get_settings()

SECRET_KEY = settings.secret_key
ALGORITHM = settings.jwt_algorithm


def _extract_token_from_request(request: Optional[Request]) -> Optional[str]:
    if request is None:
        return None

    token = request.cookies.get(settings.auth_cookie_name)
    if token:
        return token

    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    scheme, param = get_authorization_scheme_param(auth_header)
    if scheme.lower() != "bearer":
        return None
    return param


async def _resolve_dependency_override(request: Optional[Request], dependency):
    """Return override result and flag if FastAPI dependency override exists."""
    if request is None:
        return None, False

    overrides = getattr(getattr(request, "app", None), "dependency_overrides", None)
    if not overrides:
        return None, False

    override = overrides.get(dependency)
    if override is None:
        return None, False

    result = override()
    if inspect.isawaitable(result):
        result = await result
    return result, True


def _convert_user(row: Optional[dict]) -> Optional[dict]:
    """Normalize database rows to plain dicts for downstream consumers."""
    if not row:
        return None
    return {
        "id": row["id"],
        "email": row.get("email"),
        "username": row["username"],
        "is_active": row["is_active"],
        "created_at": row["created_at"],
    }


def get_user_by_id(user_id: int) -> Optional[dict]:
    """Get a user by ID from the database."""
    with get_db_connection() as conn:
        with conn.cursor() as cur:
            cur.execute(
                "SELECT id, email, username, is_active, created_at FROM users WHERE id = %s",
                (user_id,)
            )
            return _convert_user(cur.fetchone())


def decode_user_id(token: str) -> Optional[int]:
    """Return the user id carried in the token's ``sub`` claim, or None."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        return int(subject)
    except (TypeError, ValueError):
        return None


async def get_current_user(
    request: Optional[Request] = None,
    token: Optional[str] = None,
) -> dict:
    """Get the current authenticated user from the JWT token."""

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token_value = token or _extract_token_from_request(request)
    if not token_value:
        raise credentials_exception

    user_id = decode_user_id(token_value)
    if user_id is None:
        raise credentials_exception

    user = get_user_by_id(user_id)
    if user is None:
        raise credentials_exception

    if not user["is_active"]:
        raise HTTPException(status_code=400, detail="Inactive user")

    return user


async def get_current_user_dependency(request: Request) -> dict:
    """Wrapper for FastAPI dependency injection of required current user."""
    override_value = await _resolve_dependency_override(request, get_current_user_dependency)
    if override_value[1]:
        return override_value[0]

    override_value = await _resolve_dependency_override(request, get_current_user)
    if override_value[1]:
        return override_value[0]

    return await get_current_user(request=request)
