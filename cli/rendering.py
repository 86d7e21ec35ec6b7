"""Utilities for rendering conversations in the CLI."""

from __future__ import annotations

from typing import List

from supportspark.storage import Conversation, Message

_PREVIEW_CHARS = 72


def _preview(text: str) -> str:
    flat = " ".join(text.split())
    if len(flat) <= _PREVIEW_CHARS:
        return flat
    return flat[: _PREVIEW_CHARS - 1] + "…"


def render_thread(conversation: Conversation) -> str:
    """Render a conversation and its nested replies as an ASCII tree.

    Example::

        #2 Week 1 - Finding my footing  (demo-member-sarah)
        ├── Sarah Mitchell: First week has been…
        │   └── James Chen: Those ups and downs…
        └── Sarah Mitchell: Applied to five positions…
    """
    lines: List[str] = [f"#{conversation.id} {conversation.title}  ({conversation.member_id})"]

    def _render(message: Message, prefix: str, is_last: bool) -> None:
        connector = "└── " if is_last else "├── "
        suffix = f"  [{len(message.images)} image(s)]" if message.images else ""
        lines.append(f"{prefix}{connector}{message.author_name}: {_preview(message.content)}{suffix}")

        child_prefix = prefix + ("    " if is_last else "│   ")
        replies = message.replies or []
        for i, reply in enumerate(replies):
            _render(reply, child_prefix, i == len(replies) - 1)

    for i, message in enumerate(conversation.messages):
        _render(message, "", i == len(conversation.messages) - 1)

    return "\n".join(lines)
