"""
Image Tagger Backend — Storage Interface
==========================================

What:  Abstract repositories for users, images and threads, plus the one
       multi-entity operation the domain needs (cascading image delete).
How:   Services depend only on `Storage`; concrete backends live in
       memory.py (dicts) and sql.py (SQLAlchemy async).
Who:   Built once by `build_storage()` and attached to the FastAPI app; handed
       to services per request through the `get_storage` dependency.

Contract shared by every backend:
    - list() returns records in creation order (ascending ULID)
    - filters are equality matches on schema field names (image_id=..., name=...)
    - insert() raises ConflictError when a unique field is already taken
    - insert() raises NotFoundError when a thread names an image that does
      not exist, so no thread is ever stored without its image
    - update()/delete() return None/False for unknown ids instead of raising;
      the services decide whether that is a 404
    - delete_image_cascade() removes an image's threads and then the image as
      one atomic unit; readers never see an orphaned thread
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, List, Optional, TypeVar

from tagger.schemas import Image, Thread, User

RecordT = TypeVar("RecordT", User, Image, Thread)


class Repository(ABC, Generic[RecordT]):
    """CRUD operations for one entity type."""

    @abstractmethod
    async def list(self, **filters: Any) -> List[RecordT]:
        """All records matching `filters`, oldest first."""
        ...

    @abstractmethod
    async def get(self, record_id: str) -> Optional[RecordT]:
        """The record with this id, or None."""
        ...

    async def find_one(self, **filters: Any) -> Optional[RecordT]:
        """First record matching `filters`, or None."""
        matches = await self.list(**filters)
        return matches[0] if matches else None

    @abstractmethod
    async def insert(self, record: RecordT) -> RecordT:
        """Store a new record and return it."""
        ...

    @abstractmethod
    async def update(self, record_id: str, **changes: Any) -> Optional[RecordT]:
        """Apply field changes and return the updated record, or None if missing."""
        ...

    @abstractmethod
    async def delete(self, record_id: str) -> bool:
        """Remove a record; True if it existed."""
        ...


class Storage(ABC):
    """A complete storage backend: one repository per entity."""

    name: str = "abstract"
    # False only for backends that outlive the process
    in_memory: bool = True

    users: Repository[User]
    images: Repository[Image]
    threads: Repository[Thread]

    async def startup(self) -> None:
        """Prepare the backend (create tables, open pools)."""

    async def shutdown(self) -> None:
        """Release backend resources."""

    @abstractmethod
    async def ping(self) -> bool:
        """True if the backend can serve requests."""
        ...

    @abstractmethod
    async def delete_image_cascade(self, image_id: str) -> int:
        """
        Delete every thread of `image_id`, then the image, atomically.

        Returns:
            Number of threads removed.
        """
        ...
