"""
Session store — the single owned cell holding `{user, loading}`.

Fetches may overlap (token bootstrap, guard mount, explicit calls). Each fetch
takes a ticket when it starts; a result is applied only when no newer ticket
has been applied already and no logout happened after the fetch began.
"""

import logging
from typing import Callable

from pydantic import ValidationError

from app.domain.models import SessionState, SessionUser
from app.ports.identity_port import IdentityPort, IdentityUnauthorizedError
from app.ports.session_port import SessionListener, SessionStorePort
from app.ports.token_storage_port import TokenStoragePort

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_KEY = "auth_token"


class SessionStore(SessionStorePort):
    """Owns session state; everything else reads snapshots."""

    def __init__(
        self,
        identity: IdentityPort,
        storage: TokenStoragePort,
        token_key: str = DEFAULT_TOKEN_KEY,
    ) -> None:
        self._identity = identity
        self._storage = storage
        self._token_key = token_key
        self._state = SessionState(user=None, loading=True)
        self._listeners: list[SessionListener] = []

        self._issued = 0          # last ticket handed out
        self._applied = 0         # newest ticket whose result is in the cell
        self._logout_epoch = 0
        self._in_flight = 0

    # ── Reads ─────────────────────────────────────────────────

    def get_state(self) -> SessionState:
        return self._state

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ── Writes ────────────────────────────────────────────────

    def set_user(self, user: SessionUser | None) -> None:
        # A direct write supersedes every fetch issued before it.
        self._applied = self._issued
        self._publish(SessionState(user=user, loading=self._in_flight > 0))

    async def fetch_user(self) -> None:
        self._issued += 1
        ticket = self._issued
        epoch = self._logout_epoch

        token = self._storage.get(self._token_key)
        if not token:
            self._settle(ticket, epoch, None, counted=False)
            return

        self._in_flight += 1
        if not self._state.loading:
            self._publish(SessionState(user=self._state.user, loading=True))

        user: SessionUser | None = None
        try:
            payload = await self._identity.fetch_me(token)
            user = SessionUser.model_validate(payload)
        except IdentityUnauthorizedError:
            logger.info("Stored token rejected by identity provider — clearing it")
            if self._storage.get(self._token_key) == token:
                self._storage.remove(self._token_key)
        except ValidationError as exc:
            logger.warning(f"Identity payload rejected: {exc.error_count()} validation error(s)")
        except Exception as exc:
            logger.warning(f"Session fetch failed: {type(exc).__name__}: {exc}")

        self._settle(ticket, epoch, user, counted=True)

    async def logout(self) -> None:
        self._logout_epoch += 1
        token = self._storage.get(self._token_key)
        try:
            if token:
                await self._identity.sign_out(token)
        except Exception as exc:
            # Non-critical: the local session is always cleared.
            logger.info(f"Server sign-out failed: {type(exc).__name__}: {exc}")
        finally:
            self._storage.remove(self._token_key)
            self._applied = self._issued
            self._publish(SessionState(user=None, loading=self._state.loading))

    # ── Internals ─────────────────────────────────────────────

    def _settle(
        self, ticket: int, epoch: int, user: SessionUser | None, *, counted: bool
    ) -> None:
        if counted:
            self._in_flight -= 1
        loading = self._in_flight > 0

        stale = epoch != self._logout_epoch or ticket <= self._applied
        if stale:
            logger.debug(f"Discarding stale session fetch #{ticket}")
            if loading != self._state.loading:
                self._publish(SessionState(user=self._state.user, loading=loading))
            return

        self._applied = ticket
        self._publish(SessionState(user=user, loading=loading))

    def _publish(self, state: SessionState) -> None:
        if state == self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            listener(state)
