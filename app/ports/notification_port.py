from abc import ABC, abstractmethod

from app.domain.models import Notification


class NotificationPort(ABC):
    @abstractmethod
    def add_notification(self, notification: Notification) -> None:
        """Post a notification to the user's inbox."""
        ...
