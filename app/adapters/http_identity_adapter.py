"""
Concrete implementation of IdentityPort and InterviewerPort over the MockRise
HTTP API, using `requests` in a worker thread.
"""

import asyncio
import logging
from typing import Any

import requests

from app.ports.identity_port import (
    IdentityPort,
    IdentityUnauthorizedError,
    IdentityUnavailableError,
)
from app.ports.interviewer_port import InterviewerPort

logger = logging.getLogger(__name__)


class HttpIdentityAdapter(IdentityPort, InterviewerPort):
    """Talks to /auth/me, /auth/logout and /interviewers/pending."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()

    def _request(self, method: str, path: str, token: str) -> dict[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            resp = self._session.request(
                method,
                url,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Accept": "application/json",
                },
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise IdentityUnavailableError(f"{method} {path} failed: {exc}") from exc

        if resp.status_code == 401:
            raise IdentityUnauthorizedError(f"{method} {path} returned 401")
        if resp.status_code >= 400:
            raise IdentityUnavailableError(f"{method} {path} returned {resp.status_code}")

        try:
            body = resp.json()
        except ValueError as exc:
            raise IdentityUnavailableError(f"{method} {path} returned a non-JSON body") from exc
        return body if isinstance(body, dict) else {}

    async def fetch_me(self, token: str) -> dict[str, Any]:
        body = await asyncio.to_thread(self._request, "GET", "/auth/me", token)
        if not body.get("success") or not isinstance(body.get("data"), dict):
            raise IdentityUnauthorizedError("Identity response carried no user")

        data = dict(body["data"])
        # Records coming straight from a document store use `_id`.
        if "id" not in data and "_id" in data:
            data["id"] = data["_id"]
        return data

    async def sign_out(self, token: str) -> None:
        await asyncio.to_thread(self._request, "POST", "/auth/logout", token)

    async def count_pending(self, token: str) -> int:
        body = await asyncio.to_thread(self._request, "GET", "/interviewers/pending", token)
        return int(body.get("count") or 0)
