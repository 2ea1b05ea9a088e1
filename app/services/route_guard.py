"""
Route guard — per-view access check, parameterised by the permitted roles.

This is the access authority for protected views; the permission resolver
only shapes UI affordances.
"""

import logging
from typing import Callable, Iterable, NamedTuple

from app.domain.enums import InterviewerStatus, UserRole
from app.domain.models import NavigationAction, SessionState
from app.domain.routes import ROUTES
from app.ports.session_port import SessionStorePort

logger = logging.getLogger(__name__)


class StatusRule(NamedTuple):
    applies: Callable[[InterviewerStatus | None], bool]
    target: str | None   # None → access granted


# First match wins. Anything not explicitly approved falls to the pending notice.
INTERVIEWER_STATUS_RULES: tuple[StatusRule, ...] = (
    StatusRule(lambda s: s is InterviewerStatus.PENDING_VERIFICATION, ROUTES.PENDING_VERIFICATION),
    StatusRule(lambda s: s is InterviewerStatus.REJECTED, ROUTES.REJECTED_NOTICE),
    StatusRule(lambda s: s is InterviewerStatus.APPROVED, None),
    StatusRule(lambda s: True, ROUTES.PENDING_VERIFICATION),
)


class RouteGuard:
    """Wraps one protected view."""

    def __init__(
        self,
        required_roles: Iterable[UserRole | str],
        *,
        login_path: str = ROUTES.LOGIN,
        unauthorized_path: str = ROUTES.UNAUTHORIZED,
        status_rules: tuple[StatusRule, ...] = INTERVIEWER_STATUS_RULES,
    ) -> None:
        self.required_roles = frozenset(UserRole(r) for r in required_roles)
        if not self.required_roles:
            raise ValueError("RouteGuard needs at least one permitted role")
        self._login_path = login_path
        self._unauthorized_path = unauthorized_path
        self._status_rules = status_rules
        self._mounted = False

    @property
    def mounted(self) -> bool:
        return self._mounted

    def evaluate(self, state: SessionState, location: str) -> NavigationAction:
        """
        Decide what the wrapped view shows for this session snapshot.

        `location` is the originally requested location; it rides along with
        the login redirect so a successful login can return there.
        """
        if state.loading:
            return NavigationAction.wait()

        user = state.user
        if user is None:
            return NavigationAction.redirect(self._login_path, state={"from": location})

        if user.role not in self.required_roles:
            return NavigationAction.redirect(self._unauthorized_path)

        if user.role is UserRole.INTERVIEWER and UserRole.INTERVIEWER in self.required_roles:
            for rule in self._status_rules:
                if rule.applies(user.status):
                    if rule.target is not None:
                        return NavigationAction.redirect(rule.target)
                    break

        return NavigationAction.proceed()

    async def mount(self, store: SessionStorePort) -> None:
        """
        Called when the view is first entered.

        A hard page load straight onto a protected view may land here before
        anything else asked for the session, so fetch it once.
        """
        if self._mounted:
            return
        self._mounted = True

        state = store.get_state()
        if not state.loading and state.user is None:
            logger.debug(f"Guard for {sorted(r.value for r in self.required_roles)} fetching session on mount")
            await store.fetch_user()

    def unmount(self) -> None:
        self._mounted = False
