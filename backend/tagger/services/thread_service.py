"""
Image Tagger Backend — Thread Service (Positioning & Ownership)
=================================================================

What:  Creating, listing, moving and deleting threads (positioned comments).
How:   Enforces the three rules that make pins trustworthy:
       1. A thread can only be created on an existing image.
       2. Coordinates are finite numbers, clamped into [0, 100].
       3. Only a thread's creator may move or delete it.
Who:   routes/threads.py and routes/images.py (nested thread routes).

Coordinate handling:
    ┌──────────────────┬──────────────────────────────────────────────┐
    │ Input            │ Result                                       │
    ├──────────────────┼──────────────────────────────────────────────┤
    │ 42.5             │ stored as 42.5                               │
    │ -3 / 140         │ stored as 0.0 / 100.0 (clamped)              │
    │ "50", true, NaN  │ ValidationError (400)                        │
    │ omitted (PATCH)  │ stored value kept                            │
    └──────────────────┴──────────────────────────────────────────────┘
    Clamping is the same on create and on update, and matches what the
    client's drag math produces, so the server never stores an off-image pin.

Check order:
    create: image exists (404) → payload valid (400)
    update: thread exists (404) → owner (403) → payload valid (400)
    delete: thread exists (404) → owner (403)
"""

import logging
from typing import Any, Dict, List

from tagger.exceptions import ForbiddenError, NotFoundError, ValidationError
from tagger.ids import new_id
from tagger.schemas import Thread, User
from tagger.services.content_service import content_service
from tagger.services.positioning import clamp_percent, is_coordinate
from tagger.services.sanitizer import sanitize
from tagger.storage import Storage

logger = logging.getLogger(__name__)

INVALID_THREAD_MESSAGE = (
    "Invalid thread data. x, y must be numbers and comment must be a string"
)


class ThreadService:
    """Business logic for threads. Stateless; storage is passed in."""

    @staticmethod
    def _coordinate(value: Any, field: str) -> float:
        if not is_coordinate(value):
            raise ValidationError(
                message=INVALID_THREAD_MESSAGE,
                field=field,
                context={"value": repr(value)},
            )
        return clamp_percent(value)

    async def _owned_thread(
        self, storage: Storage, principal: User, thread_id: str, action: str
    ) -> Thread:
        thread = await storage.threads.get(thread_id)
        if thread is None:
            raise NotFoundError(resource="thread", resource_id=thread_id)
        if thread.created_by != principal.name:
            raise ForbiddenError(
                message=f"You can only {action} your own threads",
                context={"thread_id": thread_id, "principal": principal.name},
            )
        return thread

    async def create_thread(
        self,
        storage: Storage,
        principal: User,
        image_id: str,
        x: Any,
        y: Any,
        comment: Any,
    ) -> Thread:
        """
        Pin a new comment on an image.

        Raises:
            NotFoundError:   the image does not exist
            ValidationError: x/y not finite numbers, comment not a non-empty
                             string, or comment empty once markup is removed
        """
        await content_service.get_image(storage, image_id)

        if not isinstance(comment, str) or not comment:
            raise ValidationError(message=INVALID_THREAD_MESSAGE, field="comment")
        x_value = self._coordinate(x, "x")
        y_value = self._coordinate(y, "y")

        cleaned = sanitize(comment)
        if not cleaned.strip():
            raise ValidationError(message="Comment is empty after removing markup", field="comment")

        thread = await storage.threads.insert(
            Thread(
                id=new_id(),
                image_id=image_id,
                x=x_value,
                y=y_value,
                comment=cleaned,
                created_by=principal.name,
            )
        )
        logger.info(
            "User %s pinned thread %s on image %s at (%.2f, %.2f)",
            principal.name, thread.id, image_id, thread.x, thread.y,
        )
        return thread

    async def list_threads_for_image(self, storage: Storage, image_id: str) -> List[Thread]:
        """
        Threads of an image in creation order.

        Raises:
            NotFoundError: the image does not exist (a deleted image is a 404,
                           never an empty list)
        """
        await content_service.get_image(storage, image_id)
        return await storage.threads.list(image_id=image_id)

    async def update_thread_position(
        self,
        storage: Storage,
        principal: User,
        thread_id: str,
        x: Any = None,
        y: Any = None,
    ) -> Thread:
        """
        Move a thread. Each axis is optional; None keeps the stored value.

        Raises:
            NotFoundError:   the thread does not exist
            ForbiddenError:  `principal` did not create the thread
            ValidationError: a provided axis is not a finite number
        """
        thread = await self._owned_thread(storage, principal, thread_id, "update")

        changes: Dict[str, float] = {}
        if x is not None:
            changes["x"] = self._coordinate(x, "x")
        if y is not None:
            changes["y"] = self._coordinate(y, "y")
        if not changes:
            return thread

        updated = await storage.threads.update(thread_id, **changes)
        if updated is None:
            # Deleted between the ownership check and the write
            raise NotFoundError(resource="thread", resource_id=thread_id)
        logger.info(
            "User %s moved thread %s to (%.2f, %.2f)",
            principal.name, thread_id, updated.x, updated.y,
        )
        return updated

    async def delete_thread(self, storage: Storage, principal: User, thread_id: str) -> None:
        """
        Remove a thread.

        Raises:
            NotFoundError:  the thread does not exist
            ForbiddenError: `principal` did not create the thread
        """
        await self._owned_thread(storage, principal, thread_id, "delete")
        await storage.threads.delete(thread_id)
        logger.info("User %s deleted thread %s", principal.name, thread_id)


thread_service = ThreadService()
