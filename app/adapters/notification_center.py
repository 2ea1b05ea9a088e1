"""
In-memory notification inbox.
"""

import logging

from app.domain.models import Notification
from app.ports.notification_port import NotificationPort

logger = logging.getLogger(__name__)


class NotificationCenter(NotificationPort):
    """Newest-first inbox with unread tracking."""

    def __init__(self, max_items: int = 50) -> None:
        self._items: list[Notification] = []
        self._max_items = max_items

    def add_notification(self, notification: Notification) -> None:
        self._items.insert(0, notification)
        del self._items[self._max_items:]
        logger.info(f"🔔 {notification.title}")

    @property
    def notifications(self) -> list[Notification]:
        return list(self._items)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self._items if not n.read)

    def mark_all_read(self) -> None:
        self._items = [n.model_copy(update={"read": True}) for n in self._items]

    def clear(self) -> None:
        self._items.clear()
