"""
Notification side channel.

Nothing here takes part in an authorization decision; it only posts inbox
entries when the session's data changes in an interesting way.
"""

import logging

from app.domain.enums import InterviewerStatus, NotificationType, UserRole
from app.domain.models import Notification, SessionUser
from app.ports.interviewer_port import InterviewerPort
from app.ports.notification_port import NotificationPort
from app.ports.session_port import SessionStorePort
from app.ports.token_storage_port import TokenStoragePort
from app.services.session_store import DEFAULT_TOKEN_KEY

logger = logging.getLogger(__name__)

# hr_admin reviews users but does not triage interviewer applications.
_WATCHING_ROLES = frozenset({UserRole.ADMIN, UserRole.SUPER_ADMIN})


class PendingApplicationWatcher:
    """
    Tracks the number of pending interviewer applications for admin sessions
    and announces newly arrived ones.
    """

    def __init__(
        self,
        store: SessionStorePort,
        interviewers: InterviewerPort,
        notifications: NotificationPort,
        storage: TokenStoragePort,
        token_key: str = DEFAULT_TOKEN_KEY,
    ) -> None:
        self._store = store
        self._interviewers = interviewers
        self._notifications = notifications
        self._storage = storage
        self._token_key = token_key
        self.last_count = 0

    def _token_if_watching(self) -> str | None:
        user = self._store.get_state().user
        if user is None or user.role not in _WATCHING_ROLES:
            return None
        return self._storage.get(self._token_key)

    async def check(self) -> int:
        """Poll once. Returns how many new applications were announced."""
        token = self._token_if_watching()
        if not token:
            return 0

        try:
            current = await self._interviewers.count_pending(token)
        except Exception as exc:
            logger.info(f"Pending interviewer poll failed: {type(exc).__name__}: {exc}")
            return 0

        new_count = 0
        if self.last_count > 0 and current > self.last_count:
            new_count = current - self.last_count
            plural = new_count > 1
            self._notifications.add_notification(Notification(
                title="New Pending Interviewer Application" + ("s" if plural else ""),
                message=(
                    f"{new_count} new interviewer application{'s' if plural else ''} "
                    f"{'have' if plural else 'has'} been submitted and is awaiting review."
                ),
                type=NotificationType.INFO,
            ))

        self.last_count = current
        return new_count

    async def refresh(self) -> None:
        """Re-baseline without announcing, e.g. after the admin opened the review page."""
        token = self._token_if_watching()
        if not token:
            return
        try:
            self.last_count = await self._interviewers.count_pending(token)
        except Exception as exc:
            logger.info(f"Pending interviewer refresh failed: {exc}")
            self.last_count = 0


class InterviewerStatusNotifier:
    """Announces an interviewer's approval or rejection once per user."""

    def __init__(self, notifications: NotificationPort) -> None:
        self._notifications = notifications
        self._shown: set[str] = set()

    def observe(self, user: SessionUser | None) -> Notification | None:
        if user is None or user.role is not UserRole.INTERVIEWER:
            return None

        if user.status is InterviewerStatus.APPROVED and user.is_approved:
            key = f"interviewer-approved-{user.id}"
            notification = Notification(
                title="Application Approved",
                message=(
                    "Your interviewer application has been approved. "
                    "You now have access to the interviewer dashboard."
                ),
                type=NotificationType.SUCCESS,
            )
        elif user.status is InterviewerStatus.REJECTED:
            key = f"interviewer-rejected-{user.id}"
            notification = Notification(
                title="Application Rejected",
                message=(
                    "Your interviewer application has been rejected. "
                    "Please contact support if you have questions."
                ),
                type=NotificationType.ERROR,
            )
        else:
            return None

        if key in self._shown:
            return None
        self._shown.add(key)
        self._notifications.add_notification(notification)
        return notification
