"""
Pydantic models for session snapshots, navigation decisions and API payloads.
Pure data — no I/O, no side effects.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.domain.enums import ActionKind, InterviewerStatus, NotificationType, UserRole

logger = logging.getLogger(__name__)


# ── Session ───────────────────────────────────────────────────


class SessionUser(BaseModel):
    """
    Identity known to the navigation core.

    `status` only carries meaning for interviewers. Unknown status strings
    are recorded as missing so that every decision falls back to the
    least-privileged branch.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    role: UserRole
    status: InterviewerStatus | None = None
    oauth_role_pending: bool = Field(default=False, alias="oauthRolePending")
    name: str | None = None
    email: str | None = None
    permissions: tuple[str, ...] = ()
    is_approved: bool | None = Field(default=None, alias="isApproved")

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if value is not None else value

    @field_validator("role", mode="before")
    @classmethod
    def _normalize_role(cls, value: Any) -> Any:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("status", mode="before")
    @classmethod
    def _tolerate_unknown_status(cls, value: Any) -> Any:
        if value is None or isinstance(value, InterviewerStatus):
            return value
        normalized = str(value).strip().lower()
        try:
            return InterviewerStatus(normalized)
        except ValueError:
            logger.warning(f"Unrecognized interviewer status {value!r}, treating as missing")
            return None

    @field_validator("oauth_role_pending", mode="before")
    @classmethod
    def _none_is_false(cls, value: Any) -> Any:
        return False if value is None else value


class SessionState(BaseModel):
    """Snapshot of the session cell. `loading` blocks every redirect decision."""

    model_config = ConfigDict(frozen=True)

    user: SessionUser | None = None
    loading: bool = True


# ── Navigation ────────────────────────────────────────────────


class NavigationAction(BaseModel):
    """Outcome of a redirect policy or route guard evaluation."""

    model_config = ConfigDict(frozen=True)

    kind: ActionKind
    target: str | None = None
    replace: bool = True
    state: dict[str, Any] | None = None

    @classmethod
    def proceed(cls) -> "NavigationAction":
        return cls(kind=ActionKind.PROCEED)

    @classmethod
    def wait(cls) -> "NavigationAction":
        return cls(kind=ActionKind.WAIT)

    @classmethod
    def redirect(cls, target: str, state: dict[str, Any] | None = None) -> "NavigationAction":
        return cls(kind=ActionKind.REDIRECT, target=target, replace=True, state=state)

    @property
    def is_redirect(self) -> bool:
        return self.kind is ActionKind.REDIRECT


class Permissions(BaseModel):
    """Capability keys a view may query for cosmetic affordances."""

    model_config = ConfigDict(frozen=True)

    role: UserRole | None = None
    allowed: tuple[str, ...] = ()

    def is_allowed(self, key: str) -> bool:
        return key in self.allowed


# ── Notifications ─────────────────────────────────────────────


class Notification(BaseModel):
    """An entry in the in-app notification inbox."""

    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    read: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


# ── API ───────────────────────────────────────────────────────


class MeResponse(BaseModel):
    """Response for GET /auth/me."""

    success: bool = True
    data: dict[str, Any]


class RedirectPathResponse(BaseModel):
    """Response for GET /auth/redirect-path."""

    redirect: str


class PendingInterviewersResponse(BaseModel):
    """Response for GET /interviewers/pending."""

    success: bool = True
    count: int
    data: list[dict[str, Any]] = Field(default_factory=list)


class DecideRequest(BaseModel):
    """Request body for POST /navigation/decide."""

    path: str = Field(..., min_length=1)
