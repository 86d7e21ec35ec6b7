"""Account endpoints.

Routes
------
POST /api/register     Create an account and log it in
POST /api/login        Email + password login
POST /api/logout       End the session
GET  /api/auth/user    The logged-in user (401 when anonymous)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, EmailStr, Field

from supportspark.auth.passwords import hash_password, verify_password
from supportspark.auth.rate_limit import auth_rate_limit
from supportspark.auth.session import current_user, get_storage, login_user, logout_user
from supportspark.storage import User

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=72)
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/register",
    status_code=201,
    response_model=dict[str, Any],
    dependencies=[Depends(auth_rate_limit)],
)
def register_endpoint(body: RegisterRequest, request: Request) -> dict[str, Any]:
    """Register a new account and start a session for it."""
    storage = get_storage(request)
    if storage.get_user_by_email(body.email) is not None:
        raise HTTPException(status_code=400, detail="Email already registered")

    user = storage.create_user(
        email=body.email,
        password=hash_password(body.password),
        first_name=body.first_name,
        last_name=body.last_name,
    )
    login_user(request, user)
    logger.info("Registered user %s", user.id)
    return user.public_dict()


@router.post("/login", response_model=dict[str, Any], dependencies=[Depends(auth_rate_limit)])
def login_endpoint(body: LoginRequest, request: Request) -> dict[str, Any]:
    """Verify credentials and start a session."""
    storage = get_storage(request)
    user = storage.get_user_by_email(body.email)
    if user is None:
        logger.info("Login failed: unknown email")
        raise HTTPException(status_code=401, detail="Incorrect email or password.")
    if not user.password_version:
        raise HTTPException(
            status_code=401,
            detail="Password security upgrade required. Please reset your password.",
        )
    if not verify_password(body.password, user.password):
        logger.info("Login failed: bad password for user %s", user.id)
        raise HTTPException(status_code=401, detail="Incorrect email or password.")

    login_user(request, user)
    return user.public_dict()


@router.post("/logout")
def logout_endpoint(request: Request) -> dict[str, str]:
    logout_user(request)
    return {"status": "ok"}


@router.get("/auth/user", response_model=dict[str, Any])
def current_user_endpoint(user: User = Depends(current_user)) -> dict[str, Any]:
    """Return the logged-in user without credential fields."""
    return user.public_dict()
