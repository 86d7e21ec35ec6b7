"""Conversation (update thread) endpoints.

Routes
------
GET  /api/conversations                          Own + supported members' conversations
POST /api/conversations                          Start a conversation with its first update
GET  /api/conversations/{id}                     One conversation (owner or accepted supporter)
POST /api/conversations/{id}/messages            New top-level update or a reply
POST /api/conversations/{id}/images              Upload images (owner only, multipart)
GET  /api/conversations/{id}/images/{filename}   Serve an uploaded image
"""

from __future__ import annotations

import logging
import secrets
import time
import uuid
from pathlib import Path
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import FileResponse
from pydantic import BaseModel, Field

from supportspark.auth.session import current_user, get_storage
from supportspark.storage import Conversation, FileStorage, Message, User
from supportspark.storage.models import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter()

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class CreateConversationRequest(BaseModel):
    title: str = Field(min_length=1)
    initial_message: str = Field(alias="initialMessage")


class AddMessageRequest(BaseModel):
    content: str
    parent_message_id: Optional[str] = Field(default=None, alias="parentMessageId")
    images: Optional[list[str]] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _can_view(storage: FileStorage, conversation: Conversation, user: User) -> bool:
    if conversation.member_id == user.id:
        return True
    record = storage.get_supporter_record(conversation.member_id, user.id)
    return record is not None and record.status == "accepted"


def _load_visible(storage: FileStorage, conversation_id: int, user: User) -> Conversation:
    """Fetch a conversation the user may see, or raise 404/403."""
    conversation = storage.get_conversation(conversation_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    if not _can_view(storage, conversation, user):
        raise HTTPException(status_code=403, detail="Access denied")
    return conversation


def _new_message(user: User, content: str, images: Optional[list[str]] = None) -> Message:
    return Message(
        id=str(uuid.uuid4()),
        author_id=user.id,
        author_name=user.display_name,
        content=content,
        timestamp=utc_now_iso(),
        images=list(images) if images else None,
        replies=[],
    )


def _image_dir(request: Request, conversation_id: int) -> Path:
    return request.app.state.settings.images_dir / f"conv-{conversation_id}"


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("", response_model=list[dict[str, Any]])
def list_conversations_endpoint(
    request: Request,
    user: User = Depends(current_user),
) -> list[dict[str, Any]]:
    """Return the user's own conversations plus those they support."""
    storage = get_storage(request)
    return [c.to_dict() for c in storage.get_conversations_for_user(user.id)]


@router.post("", status_code=201, response_model=dict[str, Any])
def create_conversation_endpoint(
    body: CreateConversationRequest,
    request: Request,
    user: User = Depends(current_user),
) -> dict[str, Any]:
    """Create a conversation owned by the current user."""
    storage = get_storage(request)
    conversation = storage.create_conversation(
        user.id, body.title, _new_message(user, body.initial_message)
    )
    return conversation.to_dict()


@router.get("/{conversation_id}", response_model=dict[str, Any])
def get_conversation_endpoint(
    conversation_id: int,
    request: Request,
    user: User = Depends(current_user),
) -> dict[str, Any]:
    storage = get_storage(request)
    return _load_visible(storage, conversation_id, user).to_dict()


@router.post("/{conversation_id}/messages", response_model=dict[str, Any])
def add_message_endpoint(
    conversation_id: int,
    body: AddMessageRequest,
    request: Request,
    user: User = Depends(current_user),
) -> dict[str, Any]:
    """Append a top-level update, or a reply when ``parentMessageId`` is given."""
    storage = get_storage(request)
    conversation = _load_visible(storage, conversation_id, user)
    if body.parent_message_id and conversation.find_message(body.parent_message_id) is None:
        raise HTTPException(status_code=404, detail="Parent message not found")

    message = _new_message(user, body.content, body.images)
    try:
        updated = storage.append_message(conversation_id, message, body.parent_message_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return updated.to_dict()


@router.post("/{conversation_id}/images", response_model=dict[str, list[str]])
async def upload_images_endpoint(
    conversation_id: int,
    request: Request,
    images: list[UploadFile] = File(...),
    user: User = Depends(current_user),
) -> dict[str, list[str]]:
    """Store up to ``max_images_per_upload`` images for a conversation.

    Only the owning member may upload.  Files must be JPEG, PNG, GIF or
    WebP by both MIME type and extension, each within ``max_image_bytes``.
    """
    storage = get_storage(request)
    app_settings = request.app.state.settings

    conversation = storage.get_conversation(conversation_id)
    if conversation is None:
        raise HTTPException(status_code=404, detail="Conversation not found")
    if conversation.member_id != user.id:
        raise HTTPException(status_code=403, detail="Only the member can upload images")
    if len(images) > app_settings.max_images_per_upload:
        raise HTTPException(
            status_code=400,
            detail=f"At most {app_settings.max_images_per_upload} images per upload",
        )

    accepted: list[tuple[str, bytes]] = []
    for upload in images:
        ext = Path(upload.filename or "").suffix.lower()
        if upload.content_type not in ALLOWED_IMAGE_TYPES or ext not in ALLOWED_IMAGE_EXTENSIONS:
            raise HTTPException(
                status_code=400, detail="Only JPEG, PNG, GIF, and WebP images are allowed"
            )
        content = await upload.read(app_settings.max_image_bytes + 1)
        if len(content) > app_settings.max_image_bytes:
            raise HTTPException(status_code=413, detail="Image exceeds the upload size limit")
        accepted.append((f"{time.time_ns()}-{secrets.token_hex(4)}{ext}", content))

    target_dir = _image_dir(request, conversation_id)
    target_dir.mkdir(parents=True, exist_ok=True)
    for filename, content in accepted:
        (target_dir / filename).write_bytes(content)

    logger.info("Stored %d image(s) for conversation %s", len(accepted), conversation_id)
    return {
        "images": [f"/api/conversations/{conversation_id}/images/{name}" for name, _ in accepted]
    }


@router.get("/{conversation_id}/images/{filename}", response_class=FileResponse)
def get_image_endpoint(
    conversation_id: int,
    filename: str,
    request: Request,
    user: User = Depends(current_user),
) -> FileResponse:
    """Serve an uploaded image to anyone allowed to view the conversation."""
    storage = get_storage(request)
    _load_visible(storage, conversation_id, user)

    if Path(filename).name != filename or filename.startswith("."):
        raise HTTPException(status_code=404, detail="Image not found")
    path = _image_dir(request, conversation_id) / filename
    if not path.is_file():
        raise HTTPException(status_code=404, detail="Image not found")
    return FileResponse(path)
