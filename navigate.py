"""
Drive one client session against a running API and print where it ends up.
Run from the project root:

    python navigate.py "/dashboard/trainee?token=<jwt>" [/next/path ...] [--watch]

With --watch, admin sessions keep polling for new interviewer applications
until interrupted.
"""
import asyncio
import logging
import sys

sys.stdout.reconfigure(encoding='utf-8', errors='replace')


async def main(urls: list[str], watch: bool):
    from app.config import settings
    from app.dependencies import build_client_runtime
    from app.scheduler import shutdown_scheduler, start_scheduler
    from app.services.permission_service import resolve_permissions

    runtime = build_client_runtime(urls[0])
    controller = runtime.controller

    print(f"[1] Opening {urls[0]}")
    action = await controller.start()
    print(f"  → {runtime.navigator.get_current_url()} ({action.kind.value})")

    for step, url in enumerate(urls[1:], start=2):
        print(f"[{step}] Navigating to {url}")
        runtime.navigator.navigate(url)
        await controller.wait_idle()
        print(f"  → {runtime.navigator.get_current_url()} ({controller.last_action.kind.value})")

    state = runtime.store.get_state()
    user = state.user
    print(f"\nSession: {user.role.value + ' ' + user.id if user else 'anonymous'}")
    print(f"Permissions: {list(resolve_permissions(state).allowed)}")
    for n in runtime.notifications.notifications:
        print(f"Notification [{n.type.value}] {n.title}: {n.message}")

    if not watch:
        return

    await runtime.pending_watcher.refresh()
    start_scheduler(
        runtime.pending_watcher,
        interval_seconds=settings.pending_poll_interval_seconds,
        initial_delay_seconds=settings.pending_initial_delay_seconds,
    )
    seen = len(runtime.notifications.notifications)
    try:
        while True:
            await asyncio.sleep(1)
            inbox = runtime.notifications.notifications
            for n in reversed(inbox[: len(inbox) - seen]):
                print(f"Notification [{n.type.value}] {n.title}: {n.message}")
            seen = len(inbox)
    finally:
        shutdown_scheduler()


if __name__ == "__main__":
    args = [a for a in sys.argv[1:] if a != "--watch"]
    if not args:
        print(__doc__)
        sys.exit(1)
    logging.basicConfig(level=logging.INFO, format="%(levelname)-8s │ %(name)s │ %(message)s")
    try:
        asyncio.run(main(args, watch="--watch" in sys.argv[1:]))
    except KeyboardInterrupt:
        pass
