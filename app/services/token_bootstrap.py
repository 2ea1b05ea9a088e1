"""
Token bootstrap — picks up the bearer token an external identity redirect
leaves on the URL.

On every location change:
  1. Read the token query parameter; skip when absent or seen before
  2. Persist it to durable storage
  3. Rewrite the URL without the parameter (history replace)
  4. Fetch the session; failures are swallowed, the stored token stays

The token is marked as processed before anything is awaited, so re-renders
that observe the same URL before the rewrite lands never reprocess it.
"""

import logging
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from app.ports.navigation_port import NavigatorPort
from app.ports.session_port import SessionStorePort
from app.ports.token_storage_port import TokenStoragePort
from app.services.session_store import DEFAULT_TOKEN_KEY

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_PARAM = "token"


def strip_query_param(url: str, name: str) -> str:
    """
    Remove every occurrence of `name` from the query string.

    Path, fragment and the remaining parameters (order included) survive:
    "/dashboard?token=x&tab=2" → "/dashboard?tab=2"
    """
    parts = urlsplit(url)
    kept = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k != name]
    return urlunsplit(("", "", parts.path or "/", urlencode(kept), parts.fragment))


class TokenBootstrap:
    """Moves a URL-borne token into storage and kicks off the session fetch."""

    def __init__(
        self,
        store: SessionStorePort,
        navigator: NavigatorPort,
        storage: TokenStoragePort,
        *,
        token_key: str = DEFAULT_TOKEN_KEY,
        param: str = DEFAULT_TOKEN_PARAM,
    ) -> None:
        self._store = store
        self._navigator = navigator
        self._storage = storage
        self._token_key = token_key
        self._param = param
        self._last_token: str | None = None
        self._processed: set[str] = set()

    @property
    def last_processed(self) -> str | None:
        return self._last_token

    async def handle_location_change(self) -> bool:
        """Returns True when a new token was processed on this call."""
        token = self._navigator.get_query_param(self._param)
        if not token or token in self._processed:
            return False

        # Everything up to the fetch is synchronous.
        self._processed.add(token)
        self._last_token = token
        self._storage.set(self._token_key, token)
        clean_url = strip_query_param(self._navigator.get_current_url(), self._param)
        self._navigator.redirect(clean_url, replace=True)
        logger.info(f"🔑 Token picked up from URL; location rewritten to {clean_url}")

        try:
            await self._store.fetch_user()
        except Exception as exc:
            # Token stays stored; a later reload can retry the fetch.
            logger.warning(f"Session fetch after token hand-off failed: {type(exc).__name__}: {exc}")
        return True
