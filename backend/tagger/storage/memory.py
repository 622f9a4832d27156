"""
Image Tagger Backend — In-Memory Storage
==========================================

What:  Dict-backed repositories; all state lives in process memory.
How:   Each repository keeps an insertion-ordered dict of id → record. Writes
       take one asyncio.Lock shared by all repositories of the backend, so a
       cascading delete is a single critical section.
When:  Default backend (STORAGE_BACKEND=memory). A restart discards all data.

Records are immutable Pydantic models; update() swaps in a copy rather than
mutating the stored object, so callers never hold a reference that changes
under them.
"""

import asyncio
import logging
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple

from tagger.exceptions import ConflictError, NotFoundError
from tagger.schemas import Image, Thread, User
from tagger.storage.base import RecordT, Repository, Storage

logger = logging.getLogger(__name__)


class MemoryRepository(Repository[RecordT], Generic[RecordT]):
    """
    Repository over a plain dict.

    Args:
        entity:        Name used in conflict messages ("user", "image", ...)
        lock:          Write lock shared with the owning storage
        unique_fields: Fields whose values must be unique across records
        foreign_key:   (field, parent repository); inserts whose field names a
                       missing parent record raise NotFoundError
    """

    def __init__(
        self,
        entity: str,
        lock: asyncio.Lock,
        unique_fields: Sequence[str] = (),
        foreign_key: Optional[Tuple[str, "MemoryRepository[Any]"]] = None,
    ):
        self.entity = entity
        self._lock = lock
        self._unique_fields = tuple(unique_fields)
        self._foreign_key = foreign_key
        self._records: Dict[str, RecordT] = {}

    @staticmethod
    def _matches(record: RecordT, filters: Dict[str, Any]) -> bool:
        return all(getattr(record, field) == value for field, value in filters.items())

    async def list(self, **filters: Any) -> List[RecordT]:
        return [r for r in self._records.values() if self._matches(r, filters)]

    async def get(self, record_id: str) -> Optional[RecordT]:
        return self._records.get(record_id)

    async def insert(self, record: RecordT) -> RecordT:
        async with self._lock:
            if self._foreign_key is not None:
                field, parent = self._foreign_key
                if getattr(record, field) not in parent._records:
                    raise NotFoundError(resource=parent.entity, context={"entity": self.entity})
            for field in self._unique_fields:
                value = getattr(record, field)
                if any(getattr(r, field) == value for r in self._records.values()):
                    raise ConflictError(
                        message=f"{self.entity.capitalize()} already exists",
                        context={"field": field, "value": value},
                    )
            self._records[record.id] = record
        return record

    async def update(self, record_id: str, **changes: Any) -> Optional[RecordT]:
        async with self._lock:
            current = self._records.get(record_id)
            if current is None:
                return None
            updated = current.model_copy(update=changes)
            self._records[record_id] = updated
        return updated

    async def delete(self, record_id: str) -> bool:
        async with self._lock:
            return self._records.pop(record_id, None) is not None

    def _remove_where_locked(self, **filters: Any) -> int:
        """Remove matching records. Caller must hold the write lock."""
        doomed = [rid for rid, r in self._records.items() if self._matches(r, filters)]
        for rid in doomed:
            del self._records[rid]
        return len(doomed)


class MemoryStorage(Storage):
    """Process-local storage. Nothing survives a restart."""

    name = "memory"

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self.users: MemoryRepository[User] = MemoryRepository(
            "user", self._lock, unique_fields=("name",)
        )
        self.images: MemoryRepository[Image] = MemoryRepository("image", self._lock)
        self.threads: MemoryRepository[Thread] = MemoryRepository(
            "thread", self._lock, foreign_key=("image_id", self.images)
        )

    async def ping(self) -> bool:
        return True

    async def delete_image_cascade(self, image_id: str) -> int:
        async with self._lock:
            removed = self.threads._remove_where_locked(image_id=image_id)
            self.images._remove_where_locked(id=image_id)
        logger.debug("Cascade delete of image %s removed %d threads", image_id, removed)
        return removed
