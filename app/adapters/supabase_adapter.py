"""
Concrete implementation of UserPort using the Supabase Python client.
"""

from typing import Any

from supabase import Client

from app.domain.enums import InterviewerStatus, UserRole
from app.ports.user_port import UserPort

# Columns the session layer needs; never select password hashes.
_USER_COLUMNS = "id,name,email,role,status,permissions,is_approved,oauth_role_pending,created_at"


class SupabaseAdapter(UserPort):
    """All user lookups go through the Supabase REST client."""

    def __init__(self, client: Client) -> None:
        self._client = client

    async def get_user(self, user_id: str) -> dict[str, Any] | None:
        result = (
            self._client.table("users")
            .select(_USER_COLUMNS)
            .eq("id", user_id)
            .maybe_single()
            .execute()
        )
        return result.data if result else None

    async def list_pending_interviewers(self) -> list[dict[str, Any]]:
        result = (
            self._client.table("users")
            .select(_USER_COLUMNS)
            .eq("role", UserRole.INTERVIEWER.value)
            .eq("status", InterviewerStatus.PENDING_VERIFICATION.value)
            .order("created_at", desc=True)
            .execute()
        )
        return result.data or []
