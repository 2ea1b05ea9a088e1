"""
Navigation endpoints — run the redirect policy and route guards server-side
for clients that cannot embed the decision layer.
"""

from typing import Any

from fastapi import APIRouter, Depends

from app.domain.enums import ActionKind
from app.domain.models import DecideRequest, NavigationAction, Permissions
from app.domain.routes import protected_views_for
from app.services.auth_service import get_optional_user, settled_session
from app.services.permission_service import resolve_permissions
from app.services.redirect_policy import decide
from app.services.route_guard import RouteGuard

router = APIRouter(prefix="/navigation", tags=["Navigation"])


@router.post("/decide", response_model=NavigationAction)
async def decide_navigation(
    req: DecideRequest,
    current_user: dict[str, Any] | None = Depends(get_optional_user),
):
    """
    Evaluate the global policy, then every guard enclosing the path.
    The session is already resolved here, so the answer is never `wait`.
    """
    state = settled_session(current_user)

    action = decide(req.path, state)
    if action.is_redirect:
        return action

    for view in protected_views_for(req.path):
        guard_action = RouteGuard(view.required_roles).evaluate(state, req.path)
        if guard_action.kind is not ActionKind.PROCEED:
            return guard_action
    return action


@router.get("/permissions", response_model=Permissions)
async def get_permissions(
    current_user: dict[str, Any] | None = Depends(get_optional_user),
):
    """Capability keys for the caller; empty when anonymous."""
    return resolve_permissions(settled_session(current_user))
