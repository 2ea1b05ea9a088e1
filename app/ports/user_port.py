from abc import ABC, abstractmethod
from typing import Any


class UserPort(ABC):
    @abstractmethod
    async def get_user(self, user_id: str) -> dict[str, Any] | None:
        """Fetch a single user by ID."""
        ...

    @abstractmethod
    async def list_pending_interviewers(self) -> list[dict[str, Any]]:
        """Interviewer accounts still awaiting admin review."""
        ...
