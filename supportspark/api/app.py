"""FastAPI application factory.

Lifespan
--------
Storage is injected through :func:`create_app` (tests pass an isolated
handle pointed at a temp directory).  When none is given, the lifespan opens
one from ``settings.data_dir`` on startup, seeding the demo accounts unless
``SEED_DEMO_DATA`` is off.  Route handlers reach it via
``request.app.state.storage``.

Routers
-------
All endpoint groups are mounted under ``/api``:

    /api               register / login / logout / current user
    /api/conversations threaded updates, replies, image uploads
    /api/supporters    invitations and their status
    /api/demo          password-less demo logins
    /api/quotes        encouragement quotes
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from supportspark.api.routers import auth as auth_router
from supportspark.api.routers import conversations as conversations_router
from supportspark.api.routers import demo as demo_router
from supportspark.api.routers import quotes as quotes_router
from supportspark.api.routers import supporters as supporters_router
from supportspark.auth.rate_limit import RateLimiter
from supportspark.config import Settings, configure_logging, settings
from supportspark.storage import FileStorage, open_storage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the data directory on startup unless a storage handle was injected."""
    configure_logging(app.state.settings.log_level)
    if app.state.storage is None:
        app_settings: Settings = app.state.settings
        app.state.storage = open_storage(
            app_settings.data_dir, seed_demo=app_settings.seed_demo_data
        )
    logger.info("SupportSpark API serving data from %s", app.state.storage.data_dir)
    yield


def create_app(
    storage: Optional[FileStorage] = None,
    app_settings: Optional[Settings] = None,
) -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app_settings = app_settings or settings

    app = FastAPI(
        title="SupportSpark API",
        description=(
            "Journal-style updates shared between a member and their invited "
            "supporters, with threaded replies and image attachments."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.storage = storage
    app.state.auth_limiter = RateLimiter(
        app_settings.auth_rate_limit, app_settings.auth_rate_window
    )

    app.add_middleware(
        SessionMiddleware,
        secret_key=app_settings.session_secret,
        session_cookie="supportspark_session",
        max_age=app_settings.session_max_age,
        same_site="lax",
    )

    app.include_router(auth_router.router, prefix="/api", tags=["auth"])
    app.include_router(
        conversations_router.router, prefix="/api/conversations", tags=["conversations"]
    )
    app.include_router(supporters_router.router, prefix="/api/supporters", tags=["supporters"])
    app.include_router(demo_router.router, prefix="/api/demo", tags=["demo"])
    app.include_router(quotes_router.router, prefix="/api/quotes", tags=["quotes"])

    @app.get("/health")
    def health_check() -> dict[str, str]:
        """Health check endpoint to verify the service is running."""
        return {"status": "ok"}

    return app


# Module-level instance used by uvicorn:
#   uvicorn supportspark.api.app:app --reload
app = create_app()
