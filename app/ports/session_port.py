"""
Abstract interface for the session cell.

The store is the single writer of session state. Every other component reads
snapshots and may only request writes through these methods.
"""

from abc import ABC, abstractmethod
from typing import Callable

from app.domain.models import SessionState, SessionUser

SessionListener = Callable[[SessionState], None]


class SessionStorePort(ABC):
    @abstractmethod
    def get_state(self) -> SessionState:
        """Current immutable snapshot."""
        ...

    @abstractmethod
    async def fetch_user(self) -> None:
        """(Re)establish the session. Resolves on success or failure, never raises."""
        ...

    @abstractmethod
    async def logout(self) -> None:
        """Drop the session. Leaves `loading` untouched."""
        ...

    @abstractmethod
    def set_user(self, user: SessionUser | None) -> None:
        """Replace the user wholesale."""
        ...

    @abstractmethod
    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener for new snapshots; returns an unsubscribe callable."""
        ...
