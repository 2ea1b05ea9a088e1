"""
Interviewer application endpoints (admin side).
"""

from typing import Any

from fastapi import APIRouter, Depends

from app.dependencies import get_db
from app.domain.enums import ADMIN_ROLES
from app.domain.models import PendingInterviewersResponse
from app.ports.user_port import UserPort
from app.services.auth_service import require_roles

router = APIRouter(prefix="/interviewers", tags=["Interviewers"])


@router.get("/pending", response_model=PendingInterviewersResponse)
async def get_pending_interviewers(
    current_user: dict[str, Any] = Depends(require_roles(*ADMIN_ROLES)),
    db: UserPort = Depends(get_db),
):
    """List interviewer applications awaiting review, newest first."""
    pending = await db.list_pending_interviewers()
    return PendingInterviewersResponse(count=len(pending), data=pending)
