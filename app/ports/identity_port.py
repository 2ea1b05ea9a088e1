"""
Abstract interface for resolving a bearer token into a user record.
"""

from abc import ABC, abstractmethod
from typing import Any


class IdentityUnauthorizedError(Exception):
    """The identity provider rejected the token (HTTP 401)."""


class IdentityUnavailableError(Exception):
    """The identity provider could not be reached or answered with an error."""


class IdentityPort(ABC):
    """Port for the identity endpoints behind the session store."""

    @abstractmethod
    async def fetch_me(self, token: str) -> dict[str, Any]:
        """
        Resolve the token into the current user's record.

        Raises:
            IdentityUnauthorizedError: token is invalid or expired
            IdentityUnavailableError: network or server failure
        """
        ...

    @abstractmethod
    async def sign_out(self, token: str) -> None:
        """Invalidate the server-side session for this token."""
        ...
