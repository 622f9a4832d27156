"""
Image Tagger Backend — External Image Source
==============================================

What:  Produces URLs of externally hosted placeholder photos.
How:   `ImageSource` is the interface the content service depends on;
       `PicsumImageSource` draws a random photo id in [0, max_id) and builds
       a https://picsum.photos/id/{n}/{width}/{height} URL.
Who:   ContentService.create_image(); attached to the app as
       `app.state.image_source` so tests can swap in a stub.
When:  Once per POST /images.

Verification (IMAGE_SOURCE_VERIFY=true):
    A HEAD request (following redirects) confirms the photo exists. Transport
    errors and non-2xx responses raise ImageSourceError → HTTP 503.
    There is no retry; the first failure is the request's failure.
"""

import logging
import random
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from tagger.config import settings
from tagger.exceptions import ImageSourceError

logger = logging.getLogger(__name__)


class ImageSource(ABC):
    """Interface for anything that can hand out a fetchable image URL."""

    @abstractmethod
    async def create_reference(self) -> str:
        """
        Return the URL of a new image.

        Raises:
            ImageSourceError: The source could not provide a usable URL.
        """
        ...


class PicsumImageSource(ImageSource):
    """
    Random photos from Lorem Picsum.

    Args:
        base_url:  Service root (default from settings)
        max_id:    Photo ids are drawn from [0, max_id)
        width:     Requested width in pixels
        height:    Requested height in pixels
        verify:    HEAD-check each URL before returning it
        timeout:   Seconds allowed for the HEAD check
        transport: Optional httpx transport (tests inject httpx.MockTransport)
        rng:       Optional random.Random for deterministic ids
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        max_id: Optional[int] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
        verify: Optional[bool] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        rng: Optional[random.Random] = None,
    ):
        self.base_url = (base_url or settings.image_source_base_url).rstrip("/")
        self.max_id = max_id if max_id is not None else settings.image_source_max_id
        self.width = width or settings.image_width
        self.height = height or settings.image_height
        self.verify = settings.image_source_verify if verify is None else verify
        self.timeout = timeout or settings.image_source_timeout
        self._transport = transport
        self._rng = rng or random.Random()

    def build_url(self, photo_id: int) -> str:
        return f"{self.base_url}/id/{photo_id}/{self.width}/{self.height}"

    async def create_reference(self) -> str:
        photo_id = self._rng.randrange(self.max_id)
        url = self.build_url(photo_id)
        if self.verify:
            await self._verify(url)
        logger.info("Image source produced %s", url)
        return url

    async def _verify(self, url: str) -> None:
        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self.timeout,
                follow_redirects=True,
            ) as client:
                response = await client.head(url)
        except httpx.HTTPError as e:
            logger.warning("Image source unreachable for %s: %s", url, e)
            raise ImageSourceError(context={"url": url, "error": type(e).__name__})

        if response.is_error:
            logger.warning("Image source returned %d for %s", response.status_code, url)
            raise ImageSourceError(
                message="Image source could not provide an image. Please try again.",
                context={"url": url, "status": response.status_code},
            )


def build_image_source() -> ImageSource:
    """The image source configured by settings."""
    return PicsumImageSource()
