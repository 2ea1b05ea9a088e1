"""
Global redirect policy — evaluated on every navigation.

`decide(path, state)` is a pure function. The user-specific checks live in
REDIRECT_RULES and are tried in order; the first matching rule wins.
"""

from typing import Callable, NamedTuple

from app.domain.enums import InterviewerStatus, RouteClass, UserRole
from app.domain.models import NavigationAction, SessionState, SessionUser
from app.domain.routes import DEFAULT_ROUTE_TABLE, ROUTES, RouteTable


class RedirectRule(NamedTuple):
    name: str
    applies: Callable[[SessionUser], bool]
    target: str


def _is_interviewer_with(status: InterviewerStatus) -> Callable[[SessionUser], bool]:
    def _check(user: SessionUser) -> bool:
        return user.role is UserRole.INTERVIEWER and user.status is status
    return _check


# Priority order matters: role selection first, rejection outranks pending.
REDIRECT_RULES: tuple[RedirectRule, ...] = (
    RedirectRule(
        "oauth_role_pending",
        lambda user: user.oauth_role_pending,
        ROUTES.OAUTH_ROLE_SELECTION,
    ),
    RedirectRule(
        "interviewer_rejected",
        _is_interviewer_with(InterviewerStatus.REJECTED),
        ROUTES.REJECTED_NOTICE,
    ),
    RedirectRule(
        "interviewer_pending",
        _is_interviewer_with(InterviewerStatus.PENDING_VERIFICATION),
        ROUTES.PENDING_VERIFICATION,
    ),
)


def decide(
    path: str,
    state: SessionState,
    routes: RouteTable = DEFAULT_ROUTE_TABLE,
    rules: tuple[RedirectRule, ...] = REDIRECT_RULES,
) -> NavigationAction:
    """
    Decide whether the current navigation must be redirected.

    Returns `proceed` when the requested view may render, `wait` while the
    session is still loading, or a `redirect` that replaces the history entry.
    Missing sessions and dashboard paths are left to the route guards.
    """
    route_class = routes.classify(path)

    if route_class is RouteClass.PUBLIC:
        return NavigationAction.proceed()
    if state.loading:
        return NavigationAction.wait()
    if state.user is None:
        return NavigationAction.proceed()
    if route_class in (RouteClass.DASHBOARD, RouteClass.SKIP_REDIRECT):
        return NavigationAction.proceed()

    for rule in rules:
        if rule.applies(state.user):
            return NavigationAction.redirect(rule.target)
    return NavigationAction.proceed()


def matching_rule(state: SessionState, rules: tuple[RedirectRule, ...] = REDIRECT_RULES) -> str | None:
    """Name of the first rule that would fire for this session, if any."""
    if state.user is None:
        return None
    for rule in rules:
        if rule.applies(state.user):
            return rule.name
    return None
