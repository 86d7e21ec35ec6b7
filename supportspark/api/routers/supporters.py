"""Supporter relationship endpoints.

Routes
------
GET   /api/supporters              Who supports me, and whom I support
POST  /api/supporters/invite       Invite a registered user by email
PATCH /api/supporters/{id}/status  Invitee accepts or rejects
"""

from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, EmailStr

from supportspark.auth.session import current_user, get_storage
from supportspark.storage import FileStorage, Supporter, User

router = APIRouter()


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class InviteRequest(BaseModel):
    email: EmailStr


class StatusUpdateRequest(BaseModel):
    status: Literal["accepted", "rejected"]


# ---------------------------------------------------------------------------
# Serialisation helper
# ---------------------------------------------------------------------------

def _enriched(storage: FileStorage, record: Supporter, other_id: str) -> dict[str, Any]:
    """Relationship dict plus the display name and email of the other party."""
    other = storage.get_user(other_id)
    return {
        **record.to_dict(),
        "userName": other.display_name if other else "Unknown",
        "userEmail": other.email if other else None,
    }


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("", response_model=dict[str, list[dict[str, Any]]])
def list_supporters_endpoint(
    request: Request,
    user: User = Depends(current_user),
) -> dict[str, list[dict[str, Any]]]:
    storage = get_storage(request)
    return {
        "mySupporters": [
            _enriched(storage, s, s.supporter_id)
            for s in storage.get_supporters_for_member(user.id)
        ],
        "supporting": [
            _enriched(storage, s, s.member_id)
            for s in storage.get_supporting_members(user.id)
        ],
    }


@router.post("/invite", status_code=201, response_model=dict[str, Any])
def invite_supporter_endpoint(
    body: InviteRequest,
    request: Request,
    user: User = Depends(current_user),
) -> dict[str, Any]:
    """Create a pending relationship with the current user as member."""
    storage = get_storage(request)
    invited = storage.get_user_by_email(body.email)
    if invited is None:
        raise HTTPException(
            status_code=404, detail="User not found. They need to register first."
        )
    if invited.id == user.id:
        raise HTTPException(status_code=400, detail="You cannot invite yourself.")
    if storage.get_supporter_record(user.id, invited.id) is not None:
        raise HTTPException(status_code=400, detail="Already invited or connected.")

    return storage.create_supporter(user.id, invited.id).to_dict()


@router.patch("/{record_id}/status", response_model=dict[str, Any])
def update_status_endpoint(
    record_id: int,
    body: StatusUpdateRequest,
    request: Request,
    user: User = Depends(current_user),
) -> dict[str, Any]:
    """Accept or reject an invitation addressed to the current user."""
    storage = get_storage(request)
    if not any(s.id == record_id for s in storage.get_supporting_members(user.id)):
        raise HTTPException(
            status_code=404, detail="Invitation not found or you are not the invitee."
        )
    try:
        return storage.update_supporter_status(record_id, body.status).to_dict()
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
