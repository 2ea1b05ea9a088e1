"""
In-process navigation primitive backed by a history stack.

Used by the client runtime and by tests as the navigation framework the
core plugs into.
"""

import logging
from typing import Any, Callable
from urllib.parse import parse_qs, urlsplit

from pydantic import BaseModel

from app.ports.navigation_port import NavigatorPort

logger = logging.getLogger(__name__)

LocationListener = Callable[["HistoryEntry"], None]


class HistoryEntry(BaseModel):
    url: str
    state: dict[str, Any] | None = None


class HistoryNavigator(NavigatorPort):
    """A browser-like history: push, replace, back."""

    def __init__(self, initial_url: str = "/") -> None:
        self._entries: list[HistoryEntry] = [HistoryEntry(url=initial_url)]
        self._listeners: list[LocationListener] = []

    # ── NavigatorPort ─────────────────────────────────────────

    def redirect(
        self, path: str, *, replace: bool = True, state: dict[str, Any] | None = None
    ) -> None:
        entry = HistoryEntry(url=path, state=state)
        if replace:
            self._entries[-1] = entry
        else:
            self._entries.append(entry)
        logger.debug(f"{'replace' if replace else 'push'} → {path}")
        self._notify()

    def get_current_path(self) -> str:
        return urlsplit(self.current.url).path or "/"

    def get_current_url(self) -> str:
        return self.current.url

    def get_query_param(self, name: str) -> str | None:
        values = parse_qs(urlsplit(self.current.url).query, keep_blank_values=True).get(name)
        return values[0] if values else None

    # ── Shell-side API ────────────────────────────────────────

    @property
    def current(self) -> HistoryEntry:
        return self._entries[-1]

    @property
    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def navigate(self, url: str, state: dict[str, Any] | None = None) -> None:
        """User-initiated navigation: pushes a new entry."""
        self.redirect(url, replace=False, state=state)

    def back(self) -> None:
        if len(self._entries) > 1:
            self._entries.pop()
            self._notify()

    def subscribe(self, listener: LocationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.current)
