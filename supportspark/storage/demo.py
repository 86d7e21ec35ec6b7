"""Seed the two demo accounts and their example conversations.

``ensure_demo_data(storage)`` is idempotent: every entity is looked up by
its fixed id (or, for conversations, by the demo member owning any) and only
created when missing.  Existing records are never modified.

Demo passwords are a fresh random token on every run, so the accounts can
only be entered through the dedicated demo-login routes.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from supportspark.storage.facade import FileStorage
from supportspark.storage.models import Message, format_timestamp

logger = logging.getLogger(__name__)

DEMO_MEMBER_ID = "demo-member-sarah"
DEMO_SUPPORTER_ID = "demo-supporter-james"

_MEMBER_NAME = "Sarah Mitchell"
_SUPPORTER_NAME = "James Chen"

# (title, days ago, [(message content, days ago, reply content or None, reply delay hours)])
_DEMO_THREADS: list[tuple[str, int, list[tuple[str, int, str | None, int]]]] = [
    (
        "Starting fresh after a big change",
        7,
        [
            (
                "Hi everyone. I wanted to create this space to keep you all updated during "
                "this transition. As some of you know, I was laid off last week. It's been a "
                "shock, but I'm trying to stay positive and see this as an opportunity for a "
                "fresh start.",
                7,
                "Sarah, I'm so sorry to hear this. We've all been thinking of you. Your skills "
                "and experience are incredible - this is just a temporary setback. We're here "
                "for whatever you need.",
                2,
            ),
            (
                "Day 2 update: Started updating my resume today. It's been a while since I've "
                "done this, but it's actually nice to reflect on what I've accomplished. Small "
                "steps forward!",
                6,
                "That's the spirit! Every small step counts. Happy to review your resume if "
                "you'd like another set of eyes on it.",
                3,
            ),
            (
                "Had a great call with a former colleague who offered to introduce me to some "
                "people in her network. It really helps to know I'm not alone in this. Thank "
                "you all for the encouraging messages.",
                5,
                None,
                0,
            ),
        ],
    ),
    (
        "Week 1 - Finding my footing",
        3,
        [
            (
                "First week has been an emotional rollercoaster. Some days I feel motivated, "
                "others I just want to stay in bed. My cat hasn't left my side - she seems to "
                "know I need extra cuddles right now.",
                3,
                "Those ups and downs are completely normal. Be kind to yourself - you're going "
                "through a major life change. We're all cheering for you!",
                4,
            ),
            (
                "Milestone today - had my first informational interview! It went really well "
                "and they mentioned a potential opening. Also established a daily routine "
                "which helps a lot. Feeling more like myself each day.",
                2,
                "That's amazing progress! Establishing a routine is so important. Keep "
                "celebrating those wins - they add up!",
                2,
            ),
            (
                "Applied to five positions this week and feeling hopeful. Also taking time to "
                "think about what I really want in my next role. Grateful for all your support "
                "through this journey.",
                1,
                None,
                0,
            ),
        ],
    ),
]


@dataclass
class DemoSeedResult:
    users: list[str] = field(default_factory=list)
    supporter_link: bool = False
    conversations: list[int] = field(default_factory=list)

    @property
    def created_anything(self) -> bool:
        return bool(self.users or self.supporter_link or self.conversations)


def _demo_password() -> str:
    return f"DEMO_ONLY_{uuid.uuid4()}"


def _build_messages(
    thread_no: int,
    entries: list[tuple[str, int, str | None, int]],
    now: datetime,
) -> list[Message]:
    messages: list[Message] = []
    for msg_no, (content, days_ago, reply, reply_hours) in enumerate(entries, start=1):
        posted = now - timedelta(days=days_ago)
        replies: list[Message] = []
        if reply is not None:
            replies.append(
                Message(
                    id=f"msg-{thread_no}-{msg_no}-reply-1",
                    author_id=DEMO_SUPPORTER_ID,
                    author_name=_SUPPORTER_NAME,
                    content=reply,
                    timestamp=format_timestamp(posted + timedelta(hours=reply_hours)),
                    replies=[],
                )
            )
        messages.append(
            Message(
                id=f"msg-{thread_no}-{msg_no}",
                author_id=DEMO_MEMBER_ID,
                author_name=_MEMBER_NAME,
                content=content,
                timestamp=format_timestamp(posted),
                replies=replies,
            )
        )
    return messages


def ensure_demo_data(storage: FileStorage) -> DemoSeedResult:
    """Create whichever demo entities are missing and report what was added."""
    result = DemoSeedResult()
    password = _demo_password()

    for user_id, email, first, last in (
        (DEMO_MEMBER_ID, "sarah@demo.supportspark.com", "Sarah", "Mitchell"),
        (DEMO_SUPPORTER_ID, "james@demo.supportspark.com", "James", "Chen"),
    ):
        if storage.get_user(user_id) is None:
            storage.create_user(
                email=email,
                password=password,
                first_name=first,
                last_name=last,
                user_id=user_id,
            )
            result.users.append(user_id)

    if storage.get_supporter_record(DEMO_MEMBER_ID, DEMO_SUPPORTER_ID) is None:
        storage.create_supporter(DEMO_MEMBER_ID, DEMO_SUPPORTER_ID, status="accepted")
        result.supporter_link = True

    if not storage.index.for_members([DEMO_MEMBER_ID]):
        now = datetime.now(timezone.utc)
        for thread_no, (title, days_ago, entries) in enumerate(_DEMO_THREADS, start=1):
            messages = _build_messages(thread_no, entries, now)
            conversation = storage.create_conversation(
                DEMO_MEMBER_ID,
                title,
                messages[0],
                created_at=format_timestamp(now - timedelta(days=days_ago)),
            )
            conversation.messages.extend(messages[1:])
            storage.update_conversation(conversation.id, conversation)
            result.conversations.append(conversation.id)

    if result.created_anything:
        logger.info(
            "Seeded demo data: users=%s link=%s conversations=%s",
            result.users,
            result.supporter_link,
            result.conversations,
        )
    return result
