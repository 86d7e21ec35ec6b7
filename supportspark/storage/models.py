"""Dataclass models representing persisted records.

These are plain Python objects – not ORM models.  The storage layer
serialises / deserialises them to and from the camelCase JSON documents
kept in the data directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal, Optional

SupporterStatus = Literal["pending", "accepted", "rejected"]
SUPPORTER_STATUSES: tuple[str, ...] = ("pending", "accepted", "rejected")

# Tag stored on every account whose password was hashed with bcrypt (10 rounds)
PASSWORD_VERSION = "bcrypt-10"


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return format_timestamp(datetime.now(timezone.utc))


def format_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _put_optional(data: dict[str, Any], key: str, value: Any) -> None:
    if value is not None:
        data[key] = value


@dataclass(frozen=True)
class User:
    id: str
    email: str
    password: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    password_version: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def display_name(self) -> str:
        """``"First Last"`` or ``"Anonymous"`` when neither name is set."""
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or "Anonymous"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "email": self.email, "password": self.password}
        _put_optional(data, "firstName", self.first_name)
        _put_optional(data, "lastName", self.last_name)
        _put_optional(data, "profileImageUrl", self.profile_image_url)
        _put_optional(data, "passwordVersion", self.password_version)
        _put_optional(data, "createdAt", self.created_at)
        _put_optional(data, "updatedAt", self.updated_at)
        return data

    def public_dict(self) -> dict[str, Any]:
        """Serialised form with credential fields stripped."""
        data = self.to_dict()
        data.pop("password", None)
        data.pop("passwordVersion", None)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> User:
        return cls(
            id=data["id"],
            email=data["email"],
            password=data["password"],
            first_name=data.get("firstName"),
            last_name=data.get("lastName"),
            profile_image_url=data.get("profileImageUrl"),
            password_version=data.get("passwordVersion"),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )


@dataclass
class Message:
    """One entry in a conversation thread.

    ``replies`` holds nested messages of the same shape, so a thread can be
    arbitrarily deep even though the application only ever adds one level.
    """

    id: str
    author_id: str
    author_name: str
    content: str
    timestamp: Optional[str] = None
    images: Optional[list[str]] = None
    replies: Optional[list[Message]] = None

    def find(self, message_id: str) -> Optional[Message]:
        """Depth-first search for *message_id* in this message and its replies."""
        if self.id == message_id:
            return self
        for reply in self.replies or []:
            found = reply.find(message_id)
            if found is not None:
                return found
        return None

    def add_reply(self, reply: Message) -> None:
        if self.replies is None:
            self.replies = []
        self.replies.append(reply)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "authorId": self.author_id,
            "authorName": self.author_name,
            "content": self.content,
        }
        _put_optional(data, "timestamp", self.timestamp)
        if self.images is not None:
            data["images"] = list(self.images)
        if self.replies is not None:
            data["replies"] = [r.to_dict() for r in self.replies]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Message:
        replies = data.get("replies")
        images = data.get("images")
        return cls(
            id=data["id"],
            author_id=data["authorId"],
            author_name=data["authorName"],
            content=data["content"],
            timestamp=data.get("timestamp"),
            images=list(images) if images is not None else None,
            replies=[cls.from_dict(r) for r in replies] if replies is not None else None,
        )


@dataclass
class Conversation:
    id: int
    member_id: str
    title: str
    created_at: str
    messages: list[Message] = field(default_factory=list)

    def find_message(self, message_id: str) -> Optional[Message]:
        for message in self.messages:
            found = message.find(message_id)
            if found is not None:
                return found
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "memberId": self.member_id,
            "title": self.title,
            "createdAt": self.created_at,
            "data": {"messages": [m.to_dict() for m in self.messages]},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Conversation:
        raw_messages = (data.get("data") or {}).get("messages", [])
        return cls(
            id=int(data["id"]),
            member_id=data["memberId"],
            title=data["title"],
            created_at=data["createdAt"],
            messages=[Message.from_dict(m) for m in raw_messages],
        )


@dataclass(frozen=True)
class ConversationIndexEntry:
    """Denormalised projection of a Conversation used for listings."""

    id: int
    member_id: str
    title: str
    created_at: str

    @classmethod
    def for_conversation(cls, conversation: Conversation) -> ConversationIndexEntry:
        return cls(
            id=conversation.id,
            member_id=conversation.member_id,
            title=conversation.title,
            created_at=conversation.created_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "memberId": self.member_id,
            "title": self.title,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConversationIndexEntry:
        return cls(
            id=int(data["id"]),
            member_id=data["memberId"],
            title=data["title"],
            created_at=data["createdAt"],
        )


@dataclass(frozen=True)
class Supporter:
    """Relationship edge: *supporter_id* follows *member_id*'s updates."""

    id: int
    member_id: str
    supporter_id: str
    status: SupporterStatus
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "memberId": self.member_id,
            "supporterId": self.supporter_id,
            "status": self.status,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Supporter:
        return cls(
            id=int(data["id"]),
            member_id=data["memberId"],
            supporter_id=data["supporterId"],
            status=data["status"],
            created_at=data["createdAt"],
        )
