"""Storage layer package.

Public re-exports so callers can write::

    from supportspark.storage import FileStorage, open_storage
    from supportspark.storage import Conversation, Message
"""

from supportspark.storage.facade import FileStorage, open_storage
from supportspark.storage.models import (
    Conversation,
    ConversationIndexEntry,
    Message,
    Supporter,
    User,
)
from supportspark.storage.demo import DEMO_MEMBER_ID, DEMO_SUPPORTER_ID, ensure_demo_data

__all__ = [
    "FileStorage",
    "open_storage",
    "ensure_demo_data",
    "DEMO_MEMBER_ID",
    "DEMO_SUPPORTER_ID",
    "Conversation",
    "ConversationIndexEntry",
    "Message",
    "Supporter",
    "User",
]
