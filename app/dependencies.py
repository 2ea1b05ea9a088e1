"""
Dependency Injection container.

Wires abstract ports → concrete adapters, for the FastAPI server and for
the client runtime. To swap a provider, change the adapter instantiation
here. Nothing else in the codebase changes.
"""

from functools import lru_cache
from typing import NamedTuple

from supabase import create_client

from app.adapters.http_identity_adapter import HttpIdentityAdapter
from app.adapters.history_navigator import HistoryNavigator
from app.adapters.notification_center import NotificationCenter
from app.adapters.supabase_adapter import SupabaseAdapter
from app.adapters.token_storage_adapter import FileTokenStorage
from app.config import settings
from app.ports.token_storage_port import TokenStoragePort
from app.ports.user_port import UserPort
from app.services.navigation_service import NavigationController
from app.services.notification_service import (
    InterviewerStatusNotifier,
    PendingApplicationWatcher,
)
from app.services.session_store import SessionStore
from app.services.token_bootstrap import TokenBootstrap


# ── Singletons (cached) ──────────────────────────────────────


@lru_cache(maxsize=1)
def _get_supabase_client():
    # Use service role key — bypasses RLS for server-side lookups
    return create_client(settings.supabase_url, settings.supabase_service_role_key)


@lru_cache(maxsize=1)
def _get_supabase_adapter() -> SupabaseAdapter:
    return SupabaseAdapter(client=_get_supabase_client())


# ── FastAPI Dependencies (return abstract types) ──────────────


def get_db() -> UserPort:
    """Inject the user repository adapter."""
    return _get_supabase_adapter()


# ── Client runtime ────────────────────────────────────────────


class ClientRuntime(NamedTuple):
    store: SessionStore
    navigator: HistoryNavigator
    storage: TokenStoragePort
    bootstrap: TokenBootstrap
    controller: NavigationController
    notifications: NotificationCenter
    pending_watcher: PendingApplicationWatcher
    status_notifier: InterviewerStatusNotifier


def build_client_runtime(
    initial_url: str = "/",
    *,
    storage: TokenStoragePort | None = None,
    identity: HttpIdentityAdapter | None = None,
) -> ClientRuntime:
    """
    Assemble one client session: token storage → session store → bootstrap →
    navigation controller, plus the notification side channel.

    Store and navigator changes re-run the controller, so callers only need
    to await `controller.start()` once and `controller.wait_idle()` after
    navigating.
    """
    storage = storage or FileTokenStorage(settings.token_storage_path)
    identity = identity or HttpIdentityAdapter(
        settings.api_base_url, timeout=settings.request_timeout_seconds
    )
    key = settings.token_storage_key

    store = SessionStore(identity, storage, token_key=key)
    navigator = HistoryNavigator(initial_url)
    bootstrap = TokenBootstrap(
        store, navigator, storage, token_key=key, param=settings.token_query_param
    )
    controller = NavigationController(store, navigator, bootstrap)

    notifications = NotificationCenter()
    watcher = PendingApplicationWatcher(store, identity, notifications, storage, token_key=key)
    status_notifier = InterviewerStatusNotifier(notifications)

    store.subscribe(lambda state: status_notifier.observe(state.user))
    store.subscribe(controller.notify_changed)
    navigator.subscribe(controller.notify_changed)

    return ClientRuntime(
        store=store,
        navigator=navigator,
        storage=storage,
        bootstrap=bootstrap,
        controller=controller,
        notifications=notifications,
        pending_watcher=watcher,
        status_notifier=status_notifier,
    )
