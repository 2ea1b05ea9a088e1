"""
Abstract interface for the navigation primitive of the hosting shell.
"""

from abc import ABC, abstractmethod
from typing import Any


class NavigatorPort(ABC):
    """Port for reading the current location and issuing redirects."""

    @abstractmethod
    def redirect(
        self, path: str, *, replace: bool = True, state: dict[str, Any] | None = None
    ) -> None:
        """
        Navigate to `path`.

        Args:
            path: Target path, optionally with a query string
            replace: Replace the current history entry instead of pushing
            state: Opaque data attached to the new entry (e.g. return location)
        """
        ...

    @abstractmethod
    def get_current_path(self) -> str:
        """Path component of the current location, without query string."""
        ...

    @abstractmethod
    def get_current_url(self) -> str:
        """Path plus query string of the current location."""
        ...

    @abstractmethod
    def get_query_param(self, name: str) -> str | None:
        """First value of a query parameter on the current location."""
        ...
