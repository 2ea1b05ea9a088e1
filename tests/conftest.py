import asyncio
import os
from typing import Any

# Settings are read at import time; give the test run a complete environment.
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-service-role-key")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-with-enough-length-for-hs256")

import pytest

from app.adapters.history_navigator import HistoryNavigator
from app.adapters.notification_center import NotificationCenter
from app.adapters.token_storage_adapter import MemoryTokenStorage
from app.domain.models import SessionState, SessionUser
from app.ports.identity_port import IdentityPort, IdentityUnauthorizedError
from app.ports.interviewer_port import InterviewerPort
from app.services.session_store import SessionStore
from app.services.token_bootstrap import TokenBootstrap

TOKEN_KEY = "auth_token"


class FakeIdentity(IdentityPort, InterviewerPort):
    """
    Identity provider double.

    `users` maps tokens to user payloads. `script` (optional) overrides the
    answer of the next fetch_me calls in order: each entry is a gate event
    (or None) and a payload or exception.
    """

    def __init__(self, users: dict[str, dict[str, Any]] | None = None) -> None:
        self.users = dict(users or {})
        self.script: list[tuple[asyncio.Event | None, Any]] = []
        self.fetch_calls: list[str] = []
        self.sign_out_calls: list[str] = []
        self.sign_out_error: Exception | None = None
        self.pending_counts: list[Any] = []

    async def fetch_me(self, token: str) -> dict[str, Any]:
        self.fetch_calls.append(token)
        if self.script:
            gate, outcome = self.script.pop(0)
            if gate is not None:
                await gate.wait()
            if isinstance(outcome, Exception):
                raise outcome
            return dict(outcome)
        if token not in self.users:
            raise IdentityUnauthorizedError("unknown token")
        return dict(self.users[token])

    async def sign_out(self, token: str) -> None:
        self.sign_out_calls.append(token)
        if self.sign_out_error is not None:
            raise self.sign_out_error

    async def count_pending(self, token: str) -> int:
        outcome = self.pending_counts.pop(0) if self.pending_counts else 0
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_user(role: str = "trainee", **extra: Any) -> SessionUser:
    return SessionUser.model_validate({"id": f"{role}-1", "role": role, **extra})


def settled(user: SessionUser | None) -> SessionState:
    return SessionState(user=user, loading=False)


@pytest.fixture()
def identity() -> FakeIdentity:
    return FakeIdentity(
        users={
            "trainee-token": {"id": "u-trainee", "role": "trainee"},
            "admin-token": {"id": "u-admin", "role": "admin"},
            "approved-token": {
                "id": "u-int", "role": "interviewer", "status": "approved", "isApproved": True,
            },
            "pending-token": {"id": "u-pend", "role": "interviewer", "status": "pending_verification"},
            "rejected-token": {"id": "u-rej", "role": "interviewer", "status": "rejected"},
            "oauth-token": {"id": "u-oauth", "role": "trainee", "oauthRolePending": True},
        }
    )


@pytest.fixture()
def storage() -> MemoryTokenStorage:
    return MemoryTokenStorage()


@pytest.fixture()
def store(identity: FakeIdentity, storage: MemoryTokenStorage) -> SessionStore:
    return SessionStore(identity, storage, token_key=TOKEN_KEY)


@pytest.fixture()
def navigator() -> HistoryNavigator:
    return HistoryNavigator("/")


@pytest.fixture()
def bootstrap(store, navigator, storage) -> TokenBootstrap:
    return TokenBootstrap(store, navigator, storage, token_key=TOKEN_KEY)


@pytest.fixture()
def notifications() -> NotificationCenter:
    return NotificationCenter()
