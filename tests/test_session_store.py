"""Session store: lifecycle, failure handling and fetch races."""

import asyncio

from conftest import TOKEN_KEY, make_user

from app.ports.identity_port import IdentityUnauthorizedError, IdentityUnavailableError
from app.services.session_store import SessionStore


def test_starts_loading_without_user(store):
    state = store.get_state()
    assert state.loading is True
    assert state.user is None


async def test_fetch_without_token_settles_anonymous(store, identity):
    await store.fetch_user()
    state = store.get_state()
    assert (state.user, state.loading) == (None, False)
    assert identity.fetch_calls == []


async def test_fetch_populates_user(store, storage):
    storage.set(TOKEN_KEY, "pending-token")
    await store.fetch_user()
    user = store.get_state().user
    assert user.id == "u-pend"
    assert user.role.value == "interviewer"
    assert user.status.value == "pending_verification"
    assert store.get_state().loading is False


async def test_unauthorized_fetch_clears_token(store, storage):
    storage.set(TOKEN_KEY, "expired")
    await store.fetch_user()
    assert store.get_state().user is None
    assert store.get_state().loading is False
    assert storage.get(TOKEN_KEY) is None


async def test_network_failure_keeps_token(store, storage, identity):
    storage.set(TOKEN_KEY, "trainee-token")
    identity.script.append((None, IdentityUnavailableError("connection refused")))
    await store.fetch_user()
    assert store.get_state().user is None
    assert store.get_state().loading is False
    assert storage.get(TOKEN_KEY) == "trainee-token"


async def test_unknown_role_is_treated_as_failed_fetch(store, storage, identity):
    storage.set(TOKEN_KEY, "t")
    identity.script.append((None, {"id": "x", "role": "wizard"}))
    await store.fetch_user()
    assert store.get_state().user is None
    assert storage.get(TOKEN_KEY) == "t"


async def test_user_is_replaced_wholesale(store, storage, identity):
    storage.set(TOKEN_KEY, "t")
    identity.script.append((None, {"id": "x", "role": "interviewer", "status": "approved", "name": "Ada"}))
    identity.script.append((None, {"id": "x", "role": "interviewer", "status": "rejected"}))
    await store.fetch_user()
    await store.fetch_user()
    user = store.get_state().user
    assert user.status.value == "rejected"
    assert user.name is None


async def test_loading_is_true_while_fetch_in_flight(store, storage, identity):
    await store.fetch_user()
    storage.set(TOKEN_KEY, "t")
    gate = asyncio.Event()
    identity.script.append((gate, {"id": "x", "role": "trainee"}))

    task = asyncio.create_task(store.fetch_user())
    await asyncio.sleep(0)
    assert store.get_state().loading is True

    gate.set()
    await task
    assert store.get_state().loading is False


async def test_older_slow_fetch_does_not_overwrite_newer(store, storage, identity):
    storage.set(TOKEN_KEY, "t")
    slow, fast = asyncio.Event(), asyncio.Event()
    identity.script.append((slow, {"id": "old", "role": "interviewer", "status": "pending_verification"}))
    identity.script.append((fast, {"id": "new", "role": "interviewer", "status": "approved"}))

    first = asyncio.create_task(store.fetch_user())
    second = asyncio.create_task(store.fetch_user())
    await asyncio.sleep(0)

    fast.set()
    await second
    assert store.get_state().user.id == "new"
    assert store.get_state().loading is True      # the older fetch is still out

    slow.set()
    await first
    assert store.get_state().user.id == "new"
    assert store.get_state().loading is False


async def test_fetch_resolving_after_logout_is_discarded(store, storage, identity):
    storage.set(TOKEN_KEY, "t")
    gate = asyncio.Event()
    identity.script.append((gate, {"id": "x", "role": "admin"}))

    pending = asyncio.create_task(store.fetch_user())
    await asyncio.sleep(0)
    await store.logout()
    assert store.get_state().user is None

    gate.set()
    await pending
    assert store.get_state().user is None
    assert store.get_state().loading is False


async def test_logout_clears_user_and_token_but_not_loading(store, storage, identity):
    storage.set(TOKEN_KEY, "admin-token")
    await store.fetch_user()
    await store.logout()
    assert store.get_state().user is None
    assert store.get_state().loading is False
    assert storage.get(TOKEN_KEY) is None
    assert identity.sign_out_calls == ["admin-token"]


async def test_logout_while_loading_keeps_loading(store):
    await store.logout()
    assert store.get_state().loading is True


async def test_logout_survives_server_errors(store, storage, identity):
    storage.set(TOKEN_KEY, "admin-token")
    await store.fetch_user()
    identity.sign_out_error = IdentityUnavailableError("boom")
    await store.logout()
    assert store.get_state().user is None
    assert storage.get(TOKEN_KEY) is None


async def test_set_user_supersedes_in_flight_fetch(store, storage, identity):
    storage.set(TOKEN_KEY, "t")
    gate = asyncio.Event()
    identity.script.append((gate, {"id": "stale", "role": "trainee"}))

    pending = asyncio.create_task(store.fetch_user())
    await asyncio.sleep(0)
    store.set_user(make_user("admin"))

    gate.set()
    await pending
    assert store.get_state().user.role.value == "admin"


async def test_listeners_receive_snapshots(store, storage):
    seen = []
    unsubscribe = store.subscribe(seen.append)
    storage.set(TOKEN_KEY, "trainee-token")
    await store.fetch_user()
    unsubscribe()
    await store.logout()

    assert len(seen) == 1
    assert seen[0].user.id == "u-trainee"
    assert seen[0].loading is False


async def test_unauthorized_for_old_token_keeps_newer_token(storage, identity):
    store = SessionStore(identity, storage, token_key=TOKEN_KEY)
    storage.set(TOKEN_KEY, "old")
    gate = asyncio.Event()
    identity.script.append((gate, IdentityUnauthorizedError("expired")))

    pending = asyncio.create_task(store.fetch_user())
    await asyncio.sleep(0)
    storage.set(TOKEN_KEY, "fresh")
    gate.set()
    await pending
    assert storage.get(TOKEN_KEY) == "fresh"
