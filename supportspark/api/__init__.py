"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from supportspark.api import create_app

    uvicorn supportspark.api:app --reload
"""

from supportspark.api.app import app, create_app

__all__ = ["app", "create_app"]
