"""
Navigation controller — the glue the hosting shell calls on every
`(location, user, loading)` change.

Order per evaluation:
  1. Token bootstrap (awaited, so a pending fetch is visible as `loading`)
  2. Global redirect policy
  3. Route guards of every protected view enclosing the path, outer first

The first redirect is issued through the navigator (history replace) and the
whole pipeline runs again on the new location.
"""

import asyncio
import logging

from app.domain.enums import ActionKind
from app.domain.models import NavigationAction
from app.domain.routes import (
    DEFAULT_ROUTE_TABLE,
    PROTECTED_VIEWS,
    ProtectedView,
    RouteTable,
    protected_views_for,
)
from app.ports.navigation_port import NavigatorPort
from app.ports.session_port import SessionStorePort
from app.services.redirect_policy import decide
from app.services.route_guard import RouteGuard
from app.services.token_bootstrap import TokenBootstrap

logger = logging.getLogger(__name__)

# A chain longer than this means two rules disagree about where a user belongs.
_MAX_REDIRECTS = 8


class NavigationController:
    """Evaluates and applies navigation decisions for one client session."""

    def __init__(
        self,
        store: SessionStorePort,
        navigator: NavigatorPort,
        bootstrap: TokenBootstrap,
        *,
        routes: RouteTable = DEFAULT_ROUTE_TABLE,
        views: tuple[ProtectedView, ...] = PROTECTED_VIEWS,
    ) -> None:
        self._store = store
        self._navigator = navigator
        self._bootstrap = bootstrap
        self._routes = routes
        self._views = views
        self._guards = {view.prefix: RouteGuard(view.required_roles) for view in views}
        self._started = False
        self._task: asyncio.Task | None = None
        self._dirty = False
        self._settling = False
        self.last_action: NavigationAction | None = None

    def guard_for(self, prefix: str) -> RouteGuard:
        return self._guards[prefix]

    async def evaluate(self) -> NavigationAction:
        """Run one pass of the pipeline for the current location and apply it."""
        await self._bootstrap.handle_location_change()

        path = self._navigator.get_current_path()
        location = self._navigator.get_current_url()

        action = decide(path, self._store.get_state(), self._routes)
        if action.is_redirect:
            return self._apply(action, source="policy")

        active = protected_views_for(path, self._views)
        active_prefixes = {view.prefix for view in active}
        for prefix, guard in self._guards.items():
            if guard.mounted and prefix not in active_prefixes:
                guard.unmount()

        for view in active:
            guard = self._guards[view.prefix]
            await guard.mount(self._store)
            guard_action = guard.evaluate(self._store.get_state(), location)
            if guard_action.kind is not ActionKind.PROCEED:
                return self._apply(guard_action, source=f"guard {view.prefix}")

        return self._apply(action, source="policy")

    async def _follow_redirects(self) -> NavigationAction:
        action = await self.evaluate()
        hops = 0
        while action.is_redirect:
            hops += 1
            if hops >= _MAX_REDIRECTS:
                logger.error(
                    f"Redirect chain exceeded {_MAX_REDIRECTS} hops at {self._navigator.get_current_url()}"
                )
                break
            action = await self.evaluate()
        return action

    async def settle(self) -> NavigationAction:
        """
        Evaluate until no further redirect is issued and no change arrived
        while evaluating.
        """
        self._settling = True
        try:
            for _ in range(_MAX_REDIRECTS):
                self._dirty = False
                action = await self._follow_redirects()
                if not self._dirty:
                    break
            return action
        finally:
            self._settling = False

    async def start(self) -> NavigationAction:
        """First evaluation after process start; resolves the initial session."""
        if not self._started:
            self._started = True
            self._settling = True
            try:
                if not await self._bootstrap.handle_location_change():
                    state = self._store.get_state()
                    if state.loading and state.user is None:
                        await self._store.fetch_user()
            finally:
                self._settling = False
        return await self.settle()

    # ── Reactive wiring ───────────────────────────────────────

    def notify_changed(self, *_: object) -> None:
        """Listener for store and navigator changes."""
        if self._settling or (self._task is not None and not self._task.done()):
            self._dirty = True
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop yet: the next explicit settle() picks the change up.
            self._dirty = True
            return
        self._task = loop.create_task(self.settle())
        self._task.add_done_callback(self._log_task_failure)

    @staticmethod
    def _log_task_failure(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(f"Navigation re-evaluation failed: {type(exc).__name__}: {exc}")

    async def wait_idle(self) -> None:
        """Wait for any scheduled re-evaluation to finish."""
        while self._task is not None and not self._task.done():
            await self._task

    def _apply(self, action: NavigationAction, *, source: str) -> NavigationAction:
        self.last_action = action
        if action.is_redirect and action.target is not None:
            logger.info(f"↪ {source}: {self._navigator.get_current_path()} → {action.target}")
            self._navigator.redirect(action.target, replace=action.replace, state=action.state)
        return action
