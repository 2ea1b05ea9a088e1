"""
Authentication service.
Decodes MockRise JWTs and resolves the current user.
"""

import logging
from typing import Any, Callable

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError

from app.config import settings
from app.dependencies import get_db
from app.domain.enums import UserRole
from app.domain.models import SessionState, SessionUser
from app.ports.user_port import UserPort

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


def _verify_token_locally(token: str) -> str:
    """
    Verify the JWT signature and expiry, then return the user id.

    Tokens carry the id in `id`; `sub` is accepted for tokens minted by
    standard identity providers.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"verify_iat": False},   # clock skew causes false rejections
            leeway=30,
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {e}",
        )

    user_id = payload.get("id") or payload.get("sub")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing user ID (id/sub claim)",
        )
    return str(user_id)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    db: UserPort = Depends(get_db),
) -> dict[str, Any]:
    """
    FastAPI dependency that verifies the JWT locally,
    then fetches the user row from the database.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    user_id = _verify_token_locally(credentials.credentials)
    user = await db.get_user(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    db: UserPort = Depends(get_db),
) -> dict[str, Any] | None:
    """Like get_current_user, but a missing or bad token just means no session."""
    if credentials is None:
        return None
    try:
        return await get_current_user(credentials, db)
    except HTTPException as exc:
        logger.info(f"Treating request as anonymous: {exc.detail}")
        return None


def require_roles(*roles: UserRole) -> Callable:
    """Dependency factory: 403 unless the caller holds one of `roles`."""
    allowed = {r.value for r in roles}

    async def _check(current_user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
        role = str(current_user.get("role") or "").lower()
        if role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have access to this resource",
            )
        return current_user

    return _check


def settled_session(user_row: dict[str, Any] | None) -> SessionState:
    """A resolved (non-loading) session snapshot for a server-side decision."""
    if user_row is None:
        return SessionState(user=None, loading=False)
    try:
        return SessionState(user=SessionUser.model_validate(user_row), loading=False)
    except ValidationError as exc:
        logger.warning(f"User row {user_row.get('id')} failed validation: {exc.error_count()} error(s)")
        return SessionState(user=None, loading=False)
