"""
Route classification table.

Both the global redirect policy and the route guards consult this table, so
the two layers never disagree about which of them owns a path. New pages are
classified here, not in policy code.
"""

from __future__ import annotations

from typing import NamedTuple
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict

from app.domain.enums import ADMIN_ROLES, InterviewerStatus, RouteClass, UserRole


class ROUTES:
    HOME = "/"
    LOGIN = "/login"
    REGISTER = "/register"
    FORGOT_PASSWORD = "/forgot-password"
    RESET_PASSWORD = "/reset-password"
    PRICING = "/pricing"
    RESOURCES = "/resources"
    FAQ = "/faq"
    PENDING_VERIFICATION = "/pending-verification"
    REJECTED_NOTICE = "/rejected-notice"
    OAUTH_ROLE_SELECTION = "/oauth/select-role"
    UNAUTHORIZED = "/unauthorized"

    DASHBOARD = "/dashboard"
    TRAINEE_DASHBOARD = "/dashboard/trainee"
    INTERVIEWER_DASHBOARD = "/dashboard/interviewer"
    ADMIN_DASHBOARD = "/dashboard/admin"
    ADMIN_CONFIG = "/dashboard/admin/config"


def normalize_path(path: str) -> str:
    """Drop query and fragment, collapse a trailing slash (except for `/`)."""
    raw = urlsplit(path or "/").path or "/"
    if not raw.startswith("/"):
        raw = "/" + raw
    if len(raw) > 1:
        raw = raw.rstrip("/") or "/"
    return raw


def path_has_prefix(path: str, prefix: str) -> bool:
    """Segment-aware prefix test: `/dashboard/x` matches `/dashboard`, `/dashboards` does not."""
    return path == prefix or path.startswith(prefix.rstrip("/") + "/")


class RouteTable(BaseModel):
    """Static classification data for every path the client can request."""

    model_config = ConfigDict(frozen=True)

    public_paths: frozenset[str]
    public_prefixes: tuple[str, ...] = ()
    skip_redirect_paths: frozenset[str]
    dashboard_prefix: str = ROUTES.DASHBOARD

    def classify(self, path: str) -> RouteClass:
        """
        Classify a path into exactly one RouteClass.

        Precedence when a path appears in several sets:
        public > skip-redirect > dashboard > protected-other.
        """
        path = normalize_path(path)
        if path in self.public_paths or any(path_has_prefix(path, p) for p in self.public_prefixes):
            return RouteClass.PUBLIC
        if path in self.skip_redirect_paths:
            return RouteClass.SKIP_REDIRECT
        if path_has_prefix(path, self.dashboard_prefix):
            return RouteClass.DASHBOARD
        return RouteClass.PROTECTED_OTHER


DEFAULT_ROUTE_TABLE = RouteTable(
    public_paths=frozenset({
        ROUTES.HOME,
        ROUTES.LOGIN,
        ROUTES.PRICING,
        ROUTES.RESOURCES,
        ROUTES.FAQ,
        ROUTES.FORGOT_PASSWORD,
    }),
    public_prefixes=(ROUTES.RESET_PASSWORD,),
    skip_redirect_paths=frozenset({
        ROUTES.REJECTED_NOTICE,
        ROUTES.PENDING_VERIFICATION,
        ROUTES.LOGIN,
        ROUTES.OAUTH_ROLE_SELECTION,
    }),
)


# ── Protected views ───────────────────────────────────────────


class ProtectedView(NamedTuple):
    prefix: str
    required_roles: frozenset[UserRole]


# Outer views first; nested views follow their parent.
PROTECTED_VIEWS: tuple[ProtectedView, ...] = (
    ProtectedView(ROUTES.TRAINEE_DASHBOARD, frozenset({UserRole.TRAINEE})),
    ProtectedView(ROUTES.INTERVIEWER_DASHBOARD, frozenset({UserRole.INTERVIEWER})),
    ProtectedView(ROUTES.ADMIN_DASHBOARD, ADMIN_ROLES),
    ProtectedView(ROUTES.ADMIN_CONFIG, frozenset({UserRole.ADMIN})),
)


def protected_views_for(
    path: str, views: tuple[ProtectedView, ...] = PROTECTED_VIEWS
) -> list[ProtectedView]:
    """Return every protected view enclosing `path`, outermost first."""
    path = normalize_path(path)
    return [view for view in views if path_has_prefix(path, view.prefix)]


# ── Role → landing page ───────────────────────────────────────


def _coerce(enum_cls, value):
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return None


def home_path_for(role: UserRole | str | None, status: InterviewerStatus | str | None = None) -> str:
    """
    Where a freshly authenticated user lands, given role and interviewer status.

    Raw strings from a user row are normalised the way SessionUser does it.
    """
    role = _coerce(UserRole, role)
    status = _coerce(InterviewerStatus, status)

    if role in ADMIN_ROLES:
        return ROUTES.ADMIN_DASHBOARD
    if role is UserRole.INTERVIEWER:
        if status is InterviewerStatus.PENDING_VERIFICATION:
            return ROUTES.PENDING_VERIFICATION
        if status is InterviewerStatus.REJECTED:
            return ROUTES.REJECTED_NOTICE
        if status is InterviewerStatus.APPROVED:
            return ROUTES.INTERVIEWER_DASHBOARD
        return ROUTES.PENDING_VERIFICATION
    return ROUTES.TRAINEE_DASHBOARD
