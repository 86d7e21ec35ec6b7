"""In-memory entity stores backed by whole-collection JSON files.

Each store keeps a ``dict`` keyed by primary id as the source of truth for
reads.  Every insert/update mutates the dict first and then rewrites the
full collection through :func:`~supportspark.storage.atomic.atomic_write_json`.
There is no delete operation.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Generic, Hashable, Iterable, Iterator, Optional, TypeVar

from supportspark.storage.atomic import atomic_write_json, read_json
from supportspark.storage.models import (
    SUPPORTER_STATUSES,
    ConversationIndexEntry,
    Supporter,
    SupporterStatus,
    User,
    utc_now_iso,
)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class JsonCollection(Generic[K, V]):
    """A keyed collection persisted as one JSON array file."""

    def __init__(
        self,
        path: Path,
        key: Callable[[V], K],
        decode: Callable[[dict[str, Any]], V],
        encode: Callable[[V], dict[str, Any]],
    ) -> None:
        self.path = Path(path)
        self._key = key
        self._decode = decode
        self._encode = encode
        self._items: dict[K, V] = {}

    def load(self) -> None:
        """Hydrate from disk, creating an empty file when none exists."""
        raw = read_json(self.path, [])
        self._items = {}
        for record in raw:
            item = self._decode(record)
            self._items[self._key(item)] = item

    def persist(self) -> None:
        atomic_write_json(self.path, [self._encode(v) for v in self._items.values()])

    def get(self, key: K) -> Optional[V]:
        return self._items.get(key)

    def put(self, item: V) -> V:
        """Insert or replace *item* and flush the whole collection."""
        self._items[self._key(item)] = item
        self.persist()
        return item

    def values(self) -> list[V]:
        """Snapshot of the stored items, safe to iterate while another thread writes."""
        return list(self._items.values())

    def find(self, predicate: Callable[[V], bool]) -> Optional[V]:
        return next((v for v in self.values() if predicate(v)), None)

    def filter(self, predicate: Callable[[V], bool]) -> list[V]:
        return [v for v in self.values() if predicate(v)]

    def keys(self) -> list[K]:
        return list(self._items.keys())

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[V]:
        return iter(self.values())

    def __len__(self) -> int:
        return len(self._items)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserStore(JsonCollection[str, User]):
    def __init__(self, path: Path) -> None:
        super().__init__(path, key=lambda u: u.id, decode=User.from_dict, encode=User.to_dict)

    def find_by_email(self, email: str) -> Optional[User]:
        """Linear scan; emails are compared exactly as stored."""
        return self.find(lambda u: u.email == email)


# ---------------------------------------------------------------------------
# Supporters
# ---------------------------------------------------------------------------

class SupporterStore(JsonCollection[int, Supporter]):
    def __init__(self, path: Path) -> None:
        super().__init__(
            path, key=lambda s: s.id, decode=Supporter.from_dict, encode=Supporter.to_dict
        )

    def _next_id(self) -> int:
        return max(self.keys(), default=0) + 1

    def add(
        self,
        member_id: str,
        supporter_id: str,
        status: SupporterStatus = "pending",
        created_at: Optional[str] = None,
    ) -> Supporter:
        record = Supporter(
            id=self._next_id(),
            member_id=member_id,
            supporter_id=supporter_id,
            status=status,
            created_at=created_at or utc_now_iso(),
        )
        return self.put(record)

    def set_status(self, record_id: int, status: SupporterStatus) -> Supporter:
        """Move a relationship to *status*.

        Raises:
            ValueError: Unknown *record_id* or a status outside pending/accepted/rejected.
        """
        if status not in SUPPORTER_STATUSES:
            raise ValueError(f"Invalid supporter status: {status!r}")
        record = self.get(record_id)
        if record is None:
            raise ValueError(f"Supporter record not found: {record_id!r}")
        return self.put(replace(record, status=status))

    def for_member(self, member_id: str) -> list[Supporter]:
        return self.filter(lambda s: s.member_id == member_id)

    def for_supporter(self, supporter_id: str) -> list[Supporter]:
        return self.filter(lambda s: s.supporter_id == supporter_id)

    def find_pair(self, member_id: str, supporter_id: str) -> Optional[Supporter]:
        return self.find(lambda s: s.member_id == member_id and s.supporter_id == supporter_id)


# ---------------------------------------------------------------------------
# Conversation index
# ---------------------------------------------------------------------------

class ConversationIndex(JsonCollection[int, ConversationIndexEntry]):
    """Listing index plus the persisted conversation-id counter.

    The counter lives in its own ``meta.json`` (``{"lastConversationId": n}``)
    so ids stay strictly increasing across restarts.
    """

    def __init__(self, path: Path, meta_path: Path) -> None:
        super().__init__(
            path,
            key=lambda e: e.id,
            decode=ConversationIndexEntry.from_dict,
            encode=ConversationIndexEntry.to_dict,
        )
        self.meta_path = Path(meta_path)
        self.last_id = 0

    def load(self) -> None:
        super().load()
        meta = read_json(self.meta_path, {"lastConversationId": 0})
        # Never hand out an id already present in the index, even if meta lags.
        self.last_id = max(int(meta.get("lastConversationId", 0)), max(self.keys(), default=0))

    def next_id(self) -> int:
        """Reserve the next conversation id and persist the counter."""
        self.last_id += 1
        self.persist_meta()
        return self.last_id

    def persist_meta(self) -> None:
        atomic_write_json(self.meta_path, {"lastConversationId": self.last_id})

    def for_members(self, member_ids: Iterable[str]) -> list[ConversationIndexEntry]:
        wanted = set(member_ids)
        return sorted(self.filter(lambda e: e.member_id in wanted), key=lambda e: e.id)
