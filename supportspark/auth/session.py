"""Cookie-session helpers built on Starlette's ``SessionMiddleware``.

The session only ever holds the logged-in user's id under ``user_id``.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from supportspark.storage import FileStorage, User

_SESSION_KEY = "user_id"


def get_storage(request: Request) -> FileStorage:
    """Return the storage handle attached to the app at startup."""
    return request.app.state.storage


def login_user(request: Request, user: User) -> None:
    """Start a fresh session for *user*, discarding anything stored before."""
    request.session.clear()
    request.session[_SESSION_KEY] = user.id


def logout_user(request: Request) -> None:
    request.session.clear()


def session_user(request: Request) -> User | None:
    user_id = request.session.get(_SESSION_KEY)
    if not user_id:
        return None
    return get_storage(request).get_user(user_id)


def current_user(request: Request) -> User:
    """FastAPI dependency: the logged-in user, or 401."""
    user = session_user(request)
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user
