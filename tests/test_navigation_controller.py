"""Navigation controller: bootstrap → policy → guards, end to end."""

import asyncio
import logging

import pytest
from conftest import TOKEN_KEY

from app.adapters.history_navigator import HistoryNavigator
from app.domain.enums import ActionKind
from app.domain.routes import ROUTES
from app.services.navigation_service import NavigationController
from app.services.token_bootstrap import TokenBootstrap


def make_controller(store, storage, url):
    navigator = HistoryNavigator(url)
    bootstrap = TokenBootstrap(store, navigator, storage, token_key=TOKEN_KEY)
    return NavigationController(store, navigator, bootstrap), navigator


async def test_oauth_deep_link_lands_on_requested_dashboard(store, storage, identity):
    controller, navigator = make_controller(store, storage, "/dashboard/trainee?token=trainee-token")

    action = await controller.start()

    assert action.kind is ActionKind.PROCEED
    assert navigator.get_current_url() == "/dashboard/trainee"
    assert storage.get(TOKEN_KEY) == "trainee-token"
    assert identity.fetch_calls == ["trainee-token"]


async def test_anonymous_deep_link_goes_to_login_with_return_location(store, storage):
    controller, navigator = make_controller(store, storage, "/dashboard/admin/users")

    action = await controller.start()

    assert action.kind is ActionKind.PROCEED
    assert navigator.get_current_path() == ROUTES.LOGIN
    assert navigator.current.state == {"from": "/dashboard/admin/users"}
    assert len(navigator.entries) == 1
    assert not controller.guard_for(ROUTES.ADMIN_DASHBOARD).mounted


async def test_pending_interviewer_on_dashboard_is_sent_to_pending_notice(store, storage):
    storage.set(TOKEN_KEY, "pending-token")
    controller, navigator = make_controller(store, storage, "/dashboard/interviewer/assigned")

    await controller.start()

    assert navigator.get_current_path() == ROUTES.PENDING_VERIFICATION
    assert [e.url for e in navigator.entries] == [ROUTES.PENDING_VERIFICATION]


async def test_rejected_interviewer_outside_dashboard_is_sent_to_rejected_notice(store, storage):
    storage.set(TOKEN_KEY, "rejected-token")
    controller, navigator = make_controller(store, storage, "/unauthorized")

    await controller.start()

    assert navigator.get_current_path() == ROUTES.REJECTED_NOTICE


async def test_oauth_role_pending_goes_to_role_selection(store, storage):
    storage.set(TOKEN_KEY, "oauth-token")
    controller, navigator = make_controller(store, storage, "/profile")

    await controller.start()

    assert navigator.get_current_path() == ROUTES.OAUTH_ROLE_SELECTION


async def test_oauth_role_pending_on_dashboard_is_left_to_the_guard(store, storage):
    storage.set(TOKEN_KEY, "oauth-token")
    controller, navigator = make_controller(store, storage, "/dashboard/trainee")

    action = await controller.start()

    assert action.kind is ActionKind.PROCEED
    assert navigator.get_current_path() == "/dashboard/trainee"


async def test_wrong_role_ends_on_unauthorized(store, storage):
    storage.set(TOKEN_KEY, "trainee-token")
    controller, navigator = make_controller(store, storage, "/dashboard/admin")

    action = await controller.start()

    assert navigator.get_current_path() == ROUTES.UNAUTHORIZED
    assert action.kind is ActionKind.PROCEED


async def test_nested_guard_applies_inside_outer_view(store, storage, identity):
    identity.users["hr-token"] = {"id": "u-hr", "role": "hr_admin"}
    storage.set(TOKEN_KEY, "hr-token")
    controller, navigator = make_controller(store, storage, "/dashboard/admin/config")

    await controller.start()

    assert navigator.get_current_path() == ROUTES.UNAUTHORIZED


async def test_admin_reaches_config(store, storage):
    storage.set(TOKEN_KEY, "admin-token")
    controller, navigator = make_controller(store, storage, "/dashboard/admin/config")

    action = await controller.start()

    assert action.kind is ActionKind.PROCEED
    assert navigator.get_current_path() == ROUTES.ADMIN_CONFIG
    assert controller.guard_for(ROUTES.ADMIN_DASHBOARD).mounted
    assert controller.guard_for(ROUTES.ADMIN_CONFIG).mounted


async def test_public_page_never_redirects_even_for_restricted_users(store, storage):
    storage.set(TOKEN_KEY, "rejected-token")
    controller, navigator = make_controller(store, storage, "/pricing")

    action = await controller.start()

    assert action.kind is ActionKind.PROCEED
    assert navigator.get_current_path() == "/pricing"


@pytest.mark.parametrize("url", ["/profile", "/dashboard/interviewer"])
async def test_no_redirect_while_loading(store, storage, identity, url):
    storage.set(TOKEN_KEY, "t")
    gate = asyncio.Event()
    identity.script.append((gate, {"id": "x", "role": "interviewer", "status": "rejected"}))
    controller, navigator = make_controller(store, storage, url)

    fetch = asyncio.create_task(store.fetch_user())
    await asyncio.sleep(0)
    action = await controller.evaluate()

    assert action.kind is ActionKind.WAIT
    assert navigator.get_current_url() == url

    gate.set()
    await fetch
    await controller.settle()
    assert navigator.get_current_path() == ROUTES.REJECTED_NOTICE


async def test_reactive_rerun_after_logout(store, storage):
    storage.set(TOKEN_KEY, "admin-token")
    controller, navigator = make_controller(store, storage, "/dashboard/admin")
    store.subscribe(controller.notify_changed)
    navigator.subscribe(controller.notify_changed)

    await controller.start()
    await controller.wait_idle()
    assert navigator.get_current_path() == ROUTES.ADMIN_DASHBOARD

    await store.logout()
    await controller.wait_idle()

    assert navigator.get_current_path() == ROUTES.LOGIN
    assert navigator.current.state == {"from": ROUTES.ADMIN_DASHBOARD}


async def test_reactive_rerun_on_user_navigation(store, storage):
    storage.set(TOKEN_KEY, "pending-token")
    controller, navigator = make_controller(store, storage, "/")
    store.subscribe(controller.notify_changed)
    navigator.subscribe(controller.notify_changed)

    await controller.start()
    assert navigator.get_current_path() == "/"

    navigator.navigate("/settings")
    await controller.wait_idle()

    assert navigator.get_current_path() == ROUTES.PENDING_VERIFICATION
    assert [e.url for e in navigator.entries] == ["/", ROUTES.PENDING_VERIFICATION]


async def test_failed_reactive_rerun_is_logged(store, caplog):
    class BrokenBootstrap:
        async def handle_location_change(self):
            raise RuntimeError("history unavailable")

    navigator = HistoryNavigator("/")
    controller = NavigationController(store, navigator, BrokenBootstrap())
    navigator.subscribe(controller.notify_changed)

    with caplog.at_level(logging.ERROR, logger="app.services.navigation_service"):
        navigator.navigate("/profile")
        with pytest.raises(RuntimeError):
            await controller.wait_idle()
        await asyncio.sleep(0)

    assert "Navigation re-evaluation failed: RuntimeError: history unavailable" in caplog.text
