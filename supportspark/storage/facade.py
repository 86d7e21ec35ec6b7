"""FileStorage: the single entry point route handlers and the CLI call.

Usage::

    from supportspark.storage import open_storage

    storage = open_storage(Path("data"))
    user = storage.get_user_by_email("alice@example.com")

Data directory layout::

    <data_dir>/users.json
    <data_dir>/supporters.json
    <data_dir>/conversations/index.json
    <data_dir>/conversations/meta.json
    <data_dir>/conversations/<member_id>/<conversation_id>.json

All state is cached in memory and mutated before the matching file write,
so every call observes all earlier writes made through the same instance.
Mutations are serialised with a re-entrant lock because FastAPI runs sync
endpoints on a worker thread pool.
"""

from __future__ import annotations

import logging
import threading
import uuid
from pathlib import Path
from typing import Optional

from supportspark.storage.conversations import ConversationFiles
from supportspark.storage.models import (
    PASSWORD_VERSION,
    Conversation,
    ConversationIndexEntry,
    Message,
    Supporter,
    SupporterStatus,
    User,
    utc_now_iso,
)
from supportspark.storage.stores import ConversationIndex, SupporterStore, UserStore

logger = logging.getLogger(__name__)


class FileStorage:
    """JSON-file backed store for users, conversations and supporter links."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        self.conversations_dir = self.data_dir / "conversations"

        self.users = UserStore(self.data_dir / "users.json")
        self.supporters = SupporterStore(self.data_dir / "supporters.json")
        self.index = ConversationIndex(
            self.conversations_dir / "index.json",
            self.conversations_dir / "meta.json",
        )
        self.files = ConversationFiles(self.conversations_dir)

        self._lock = threading.RLock()
        self.initialized = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self) -> FileStorage:
        """Create the directory layout and hydrate every store from disk.

        Safe to call more than once; later calls are no-ops.
        """
        with self._lock:
            if self.initialized:
                return self
            self.conversations_dir.mkdir(parents=True, exist_ok=True)
            self.users.load()
            self.supporters.load()
            self.index.load()
            self.initialized = True
            logger.info(
                "Storage ready at %s (%d users, %d supporter links, %d conversations)",
                self.data_dir,
                len(self.users),
                len(self.supporters),
                len(self.index),
            )
        return self

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.users.find_by_email(email)

    def list_users(self) -> list[User]:
        return list(self.users)

    def create_user(
        self,
        email: str,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        profile_image_url: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> User:
        """Insert a new account.  *password* must already be hashed.

        Email uniqueness is the caller's responsibility (check with
        :meth:`get_user_by_email` first).
        """
        now = utc_now_iso()
        user = User(
            id=user_id or str(uuid.uuid4()),
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            profile_image_url=profile_image_url,
            password_version=PASSWORD_VERSION,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            return self.users.put(user)

    # ------------------------------------------------------------------
    # Conversations
    # ------------------------------------------------------------------

    def _read_entry(self, entry: ConversationIndexEntry) -> Optional[Conversation]:
        conversation = self.files.read(entry.member_id, entry.id)
        if conversation is None:
            logger.warning(
                "Conversation %s is indexed for member %s but its file is missing",
                entry.id,
                entry.member_id,
            )
        return conversation

    def get_conversations_for_user(self, user_id: str) -> list[Conversation]:
        """The user's own conversations plus those of members who accepted them."""
        member_ids = {
            s.member_id for s in self.supporters.for_supporter(user_id) if s.status == "accepted"
        }
        member_ids.add(user_id)

        conversations: list[Conversation] = []
        for entry in self.index.for_members(member_ids):
            conversation = self._read_entry(entry)
            if conversation is not None:
                conversations.append(conversation)
        return conversations

    def get_conversation(self, conversation_id: int) -> Optional[Conversation]:
        entry = self.index.get(conversation_id)
        if entry is None:
            return None
        return self._read_entry(entry)

    def create_conversation(
        self,
        member_id: str,
        title: str,
        initial_message: Message,
        created_at: Optional[str] = None,
    ) -> Conversation:
        """Start a new thread owned by *member_id* with *initial_message* first."""
        with self._lock:
            conversation = Conversation(
                id=self.index.next_id(),
                member_id=member_id,
                title=title,
                created_at=created_at or utc_now_iso(),
                messages=[initial_message],
            )
            self.files.write(conversation)
            self.index.put(ConversationIndexEntry.for_conversation(conversation))
        logger.debug("Created conversation %s for member %s", conversation.id, member_id)
        return conversation

    def update_conversation(self, conversation_id: int, conversation: Conversation) -> Conversation:
        """Rewrite an existing conversation, refreshing its index entry on a title change.

        Raises:
            ValueError: Unknown *conversation_id*, mismatched ids, or an
                attempt to change the owning member.
        """
        if conversation.id != conversation_id:
            raise ValueError(
                f"Conversation id mismatch: {conversation_id!r} != {conversation.id!r}"
            )
        with self._lock:
            entry = self.index.get(conversation_id)
            if entry is None:
                raise ValueError(f"Conversation not found: {conversation_id!r}")
            if entry.member_id != conversation.member_id:
                raise ValueError("The owning member of a conversation cannot change")
            if entry.title != conversation.title:
                self.index.put(ConversationIndexEntry.for_conversation(conversation))
            self.files.write(conversation)
        return conversation

    def append_message(
        self,
        conversation_id: int,
        message: Message,
        parent_message_id: Optional[str] = None,
    ) -> Conversation:
        """Add *message* to a conversation, as a reply when *parent_message_id* is set.

        The read, the change and the rewrite happen under the storage lock, so
        concurrent posts to the same conversation are never lost.

        Raises:
            ValueError: Unknown conversation or parent message.
        """
        with self._lock:
            conversation = self.get_conversation(conversation_id)
            if conversation is None:
                raise ValueError(f"Conversation not found: {conversation_id!r}")
            if parent_message_id:
                parent = conversation.find_message(parent_message_id)
                if parent is None:
                    raise ValueError("Parent message not found")
                parent.add_reply(message)
            else:
                conversation.messages.append(message)
            return self.update_conversation(conversation_id, conversation)

    # ------------------------------------------------------------------
    # Supporters
    # ------------------------------------------------------------------

    def get_supporters_for_member(self, member_id: str) -> list[Supporter]:
        return self.supporters.for_member(member_id)

    def get_supporting_members(self, supporter_id: str) -> list[Supporter]:
        return self.supporters.for_supporter(supporter_id)

    def get_supporter_record(self, member_id: str, supporter_id: str) -> Optional[Supporter]:
        return self.supporters.find_pair(member_id, supporter_id)

    def create_supporter(
        self,
        member_id: str,
        supporter_id: str,
        status: SupporterStatus = "pending",
    ) -> Supporter:
        """Record a relationship, pending unless *status* says otherwise.

        Duplicate checks are the caller's job.
        """
        with self._lock:
            return self.supporters.add(member_id, supporter_id, status=status)

    def update_supporter_status(self, record_id: int, status: SupporterStatus) -> Supporter:
        """Accept or reject an invitation.

        Raises:
            ValueError: If *record_id* does not exist or *status* is not
                ``accepted`` / ``rejected``.
        """
        if status not in ("accepted", "rejected"):
            raise ValueError(f"Invalid supporter status: {status!r}")
        with self._lock:
            return self.supporters.set_status(record_id, status)


def open_storage(data_dir: Path, seed_demo: bool = True) -> FileStorage:
    """Construct, initialise and (optionally) seed a :class:`FileStorage`."""
    storage = FileStorage(data_dir).init()
    if seed_demo:
        from supportspark.storage.demo import ensure_demo_data

        ensure_demo_data(storage)
    return storage
