"""
Abstract interface for durable bearer-token storage.
"""

from abc import ABC, abstractmethod


class TokenStoragePort(ABC):
    """Port for a small synchronous key/value store that survives restarts."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Persist a value. Must be durable once the call returns."""
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a key. Removing a missing key is not an error."""
        ...
