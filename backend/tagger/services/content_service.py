"""
Image Tagger Backend — Content Service (Images)
=================================================

What:  Listing, generating and deleting images.
How:   New images get their URL from the injected ImageSource; deletion is
       owner-only and goes through Storage.delete_image_cascade() so an image
       and all of its threads disappear together.
Who:   routes/images.py.

Delete flow (DELETE /images/{id}):
    ┌────────────┐    ┌──────────────┐    ┌──────────────────────────────┐
    │ Look up    │───▶│ Owner check  │───▶│ Cascade: threads, then image │
    │ (404)      │    │ (403)        │    │ (one atomic storage unit)    │
    └────────────┘    └──────────────┘    └──────────────────────────────┘
"""

import logging
from typing import List

from tagger.exceptions import ForbiddenError, NotFoundError
from tagger.ids import new_id
from tagger.schemas import Image, User
from tagger.services.image_source import ImageSource
from tagger.storage import Storage

logger = logging.getLogger(__name__)


class ContentService:
    """Business logic for images. Stateless; storage and source are passed in."""

    async def list_images(self, storage: Storage) -> List[Image]:
        """All images in creation order."""
        return await storage.images.list()

    async def get_image(self, storage: Storage, image_id: str) -> Image:
        """
        Raises:
            NotFoundError: no image with this id
        """
        image = await storage.images.get(image_id)
        if image is None:
            raise NotFoundError(resource="image", resource_id=image_id)
        return image

    async def create_image(
        self,
        storage: Storage,
        source: ImageSource,
        principal: User,
    ) -> Image:
        """
        Record a new externally sourced image owned by `principal`.

        Raises:
            ImageSourceError: the source failed; nothing is stored
        """
        url = await source.create_reference()
        image = await storage.images.insert(
            Image(id=new_id(), url=url, created_by=principal.name)
        )
        logger.info("User %s generated image %s", principal.name, image.id)
        return image

    async def delete_image(self, storage: Storage, principal: User, image_id: str) -> None:
        """
        Delete an image and every thread pinned to it.

        Raises:
            NotFoundError:  no image with this id
            ForbiddenError: `principal` did not create the image
        """
        image = await self.get_image(storage, image_id)
        if image.created_by != principal.name:
            raise ForbiddenError(
                message="You can only delete your own images",
                context={"image_id": image_id, "principal": principal.name},
            )

        removed = await storage.delete_image_cascade(image_id)
        logger.info(
            "User %s deleted image %s and %d thread(s)", principal.name, image_id, removed
        )


content_service = ContentService()
