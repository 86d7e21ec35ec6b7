"""Demo-account endpoints.

Routes
------
POST /api/demo/login/patient     Enter as the demo member (no password)
POST /api/demo/login/supporter   Enter as the demo supporter (no password)
GET  /api/demo/info              Names shown on the demo landing page
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request

from supportspark.auth.rate_limit import auth_rate_limit
from supportspark.auth.session import get_storage, login_user
from supportspark.storage import DEMO_MEMBER_ID, DEMO_SUPPORTER_ID

router = APIRouter()


def _demo_login(request: Request, user_id: str, label: str) -> dict[str, Any]:
    user = get_storage(request).get_user(user_id)
    if user is None:
        raise HTTPException(status_code=500, detail=f"Demo {label} not found")
    login_user(request, user)
    return {**user.public_dict(), "isDemo": True}


@router.post(
    "/login/patient",
    response_model=dict[str, Any],
    dependencies=[Depends(auth_rate_limit)],
)
def demo_member_login_endpoint(request: Request) -> dict[str, Any]:
    return _demo_login(request, DEMO_MEMBER_ID, "member")


@router.post(
    "/login/supporter",
    response_model=dict[str, Any],
    dependencies=[Depends(auth_rate_limit)],
)
def demo_supporter_login_endpoint(request: Request) -> dict[str, Any]:
    return _demo_login(request, DEMO_SUPPORTER_ID, "supporter")


@router.get("/info", response_model=dict[str, Any])
def demo_info_endpoint(request: Request) -> dict[str, Any]:
    storage = get_storage(request)

    def _names(user_id: str) -> dict[str, Any] | None:
        user = storage.get_user(user_id)
        if user is None:
            return None
        return {"firstName": user.first_name, "lastName": user.last_name}

    return {"patient": _names(DEMO_MEMBER_ID), "supporter": _names(DEMO_SUPPORTER_ID)}
