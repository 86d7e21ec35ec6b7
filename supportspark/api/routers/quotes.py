"""GET /api/quotes: serve ``<data_dir>/quotes.json`` verbatim."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def list_quotes_endpoint(request: Request) -> Any:
    path = request.app.state.settings.quotes_path
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("Failed to load quotes from %s: %s", path, exc)
        raise HTTPException(status_code=500, detail="Failed to load quotes") from exc
