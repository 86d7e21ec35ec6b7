"""Per-owner conversation files.

Layout::

    <root>/<member_id>/<conversation_id>.json

Each file holds one full conversation (messages and nested replies).  Updates
rewrite the whole file atomically; there are no partial writes.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from supportspark.storage.atomic import atomic_write_json
from supportspark.storage.models import Conversation


class ConversationFiles:
    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def member_dir(self, member_id: str) -> Path:
        """Directory holding *member_id*'s conversations.

        Raises:
            ValueError: If *member_id* could escape the conversations root.
        """
        if not member_id or member_id in (".", "..") or "/" in member_id or "\\" in member_id:
            raise ValueError(f"Invalid member id for file storage: {member_id!r}")
        return self.root / member_id

    def path_for(self, member_id: str, conversation_id: int) -> Path:
        return self.member_dir(member_id) / f"{int(conversation_id)}.json"

    def write(self, conversation: Conversation) -> Path:
        """Persist the full *conversation*, creating the member directory on demand."""
        path = self.path_for(conversation.member_id, conversation.id)
        path.parent.mkdir(parents=True, exist_ok=True)
        atomic_write_json(path, conversation.to_dict())
        return path

    def read(self, member_id: str, conversation_id: int) -> Optional[Conversation]:
        """Load a conversation.  Returns ``None`` if its file does not exist."""
        path = self.path_for(member_id, conversation_id)
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        return Conversation.from_dict(json.loads(content))
