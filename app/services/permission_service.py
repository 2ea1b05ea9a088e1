"""
Permission resolver — maps the session role to capability keys.

Advisory only: views use it to hide affordances. Access to a view is decided
by its RouteGuard.
"""

from app.domain.enums import UserRole
from app.domain.models import Permissions, SessionState

_ADMIN_CAPABILITIES = ("overview", "users", "interviews", "content", "analytics")

PERMISSIONS_BY_ROLE: dict[UserRole, tuple[str, ...]] = {
    UserRole.ADMIN: _ADMIN_CAPABILITIES,
    UserRole.SUPER_ADMIN: _ADMIN_CAPABILITIES,
    UserRole.HR_ADMIN: _ADMIN_CAPABILITIES,
    UserRole.INTERVIEWER: ("queue", "current", "feedback", "analytics"),
    UserRole.TRAINEE: ("current", "feedback"),
}

_NO_PERMISSIONS = Permissions()


def resolve_permissions(state: SessionState) -> Permissions:
    """Capability set for the current session; empty while loading or signed out."""
    if state.loading or state.user is None:
        return _NO_PERMISSIONS

    role = state.user.role
    return Permissions(role=role, allowed=PERMISSIONS_BY_ROLE.get(role, ()))
