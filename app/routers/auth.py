"""
Auth endpoints — the server half of the client session contract.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from app.domain.models import MeResponse, RedirectPathResponse
from app.domain.routes import home_path_for
from app.services.auth_service import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.get("/me", response_model=MeResponse)
async def get_me(current_user: dict[str, Any] = Depends(get_current_user)):
    """Return the authenticated user's record for the client session store."""
    return MeResponse(data=current_user)


@router.post("/logout")
async def logout(current_user: dict[str, Any] = Depends(get_current_user)):
    """
    Acknowledge sign-out. Tokens are stateless JWTs, so the client dropping
    its stored token is what actually ends the session.
    """
    logger.info(f"User {current_user.get('id')} signed out")
    return {"success": True, "message": "Logged out"}


@router.get("/redirect-path", response_model=RedirectPathResponse)
async def get_redirect_path(current_user: dict[str, Any] = Depends(get_current_user)):
    """Where the client should land after login, based on role and status."""
    return RedirectPathResponse(
        redirect=home_path_for(current_user.get("role"), current_user.get("status"))
    )
