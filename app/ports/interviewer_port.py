from abc import ABC, abstractmethod


class InterviewerPort(ABC):
    @abstractmethod
    async def count_pending(self, token: str) -> int:
        """Number of interviewer applications awaiting review."""
        ...
