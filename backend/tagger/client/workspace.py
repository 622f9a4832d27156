"""
Image Tagger — Workspace (Main Screen)
========================================

What:  The logged-in screen: image list, selected image, its threads, the
       comment-mode viewer and a dismissible error banner.
How:   Every operation calls the API through TaggerClient and updates local
       state only on success. Failures never raise out of the workspace;
       they set `error` to an operation-specific message instead.
Who:   Any front end (CLI, TUI, notebook) driving the Image Tagger API.

State transitions:
    sign_in / register / restore → load_images → first image auto-selected
    select_image(id)             → threads for that image loaded
    generate_image()             → new image appended and selected
    delete_image(id)             → if selected, first remaining image selected
    sign_out()                   → session file removed, state reset
"""

import logging
from typing import Awaitable, Callable, List, Optional

from tagger.client.api import ApiError, TaggerClient
from tagger.client.session import SessionStore
from tagger.client.viewer import ImageViewer
from tagger.schemas import Image, Thread, User

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], Awaitable[bool]]

DELETE_THREAD_PROMPT = "Are you sure you want to delete this comment?"
DELETE_IMAGE_PROMPT = (
    "Are you sure you want to delete this image and all its comments? "
    "This action cannot be undone!"
)


class Workspace:
    """
    Args:
        client:  API client; its `username` is managed by the workspace
        session: Where the logged-in name is persisted
        confirm: Optional async yes/no prompt for destructive actions.
                 Without one, deletes proceed unasked.
    """

    def __init__(
        self,
        client: TaggerClient,
        session: SessionStore,
        confirm: Optional[ConfirmCallback] = None,
    ):
        self.client = client
        self.session = session
        self._confirm = confirm
        self.username: Optional[str] = None
        self.images: List[Image] = []
        self.selected_image_id: Optional[str] = None
        self.threads: List[Thread] = []
        self.error: Optional[str] = None
        self.loading = False
        self._viewer: Optional[ImageViewer] = None

    def _fail(self, message: str, exc: Exception) -> None:
        logger.warning("%s: %s", message, exc)
        self.error = message

    def dismiss_error(self) -> None:
        self.error = None

    @property
    def selected_image(self) -> Optional[Image]:
        for image in self.images:
            if image.id == self.selected_image_id:
                return image
        return None

    # ══════════════════════════════════════════════════════════════════════
    # Session
    # ══════════════════════════════════════════════════════════════════════

    async def _start_session(self, name: str) -> None:
        self.username = name
        self.client.username = name
        await self.session.save(name)
        await self.load_images()

    async def sign_in(self, name: str) -> Optional[User]:
        """Log in as an existing user. On failure `error` holds the server's reason."""
        self.error = None
        try:
            user = await self.client.login(name)
        except ApiError as e:
            self._fail(e.message, e)
            return None
        await self._start_session(user.name)
        return user

    async def register(self, name: str) -> Optional[User]:
        """Create a user and sign in as them."""
        self.error = None
        try:
            user = await self.client.create_user(name)
        except ApiError as e:
            self._fail(e.message, e)
            return None
        await self._start_session(user.name)
        return user

    async def restore(self) -> bool:
        """Resume the persisted session, if any. Returns True when logged in."""
        name = await self.session.load()
        if name is None:
            return False
        self.username = name
        self.client.username = name
        await self.load_images()
        return True

    async def sign_out(self) -> None:
        await self.session.clear()
        self.client.username = None
        self.username = None
        self.images = []
        self.selected_image_id = None
        self.threads = []
        self.error = None
        self._viewer = None

    # ══════════════════════════════════════════════════════════════════════
    # Images
    # ══════════════════════════════════════════════════════════════════════

    async def load_images(self) -> None:
        try:
            self.images = await self.client.list_images()
        except ApiError as e:
            self._fail("Failed to load images", e)
            return
        if self.images and self.selected_image_id is None:
            await self.select_image(self.images[0].id)

    async def select_image(self, image_id: Optional[str]) -> None:
        self.selected_image_id = image_id
        self.threads = []
        self._viewer = None
        if image_id is None:
            return
        try:
            self.threads = await self.client.list_threads(image_id)
        except ApiError as e:
            self._fail("Failed to load threads", e)

    async def generate_image(self) -> Optional[Image]:
        self.loading = True
        self.error = None
        try:
            image = await self.client.create_image()
        except ApiError as e:
            self._fail("Failed to generate image", e)
            return None
        finally:
            self.loading = False
        self.images.append(image)
        await self.select_image(image.id)
        return image

    async def delete_image(self, image_id: str) -> bool:
        if self._confirm is not None and not await self._confirm(DELETE_IMAGE_PROMPT):
            return False
        try:
            await self.client.delete_image(image_id)
        except ApiError as e:
            self._fail("Failed to delete image", e)
            return False

        self.images = [image for image in self.images if image.id != image_id]
        if self.selected_image_id == image_id:
            await self.select_image(self.images[0].id if self.images else None)
        return True

    # ══════════════════════════════════════════════════════════════════════
    # Threads
    # ══════════════════════════════════════════════════════════════════════

    def _refresh_viewer(self) -> None:
        if self._viewer is not None:
            self._viewer.set_threads(self.threads)

    async def create_thread(self, x: float, y: float, comment: str) -> Optional[Thread]:
        if self.selected_image_id is None:
            return None
        try:
            thread = await self.client.create_thread(self.selected_image_id, x, y, comment)
        except ApiError as e:
            self._fail("Failed to create comment", e)
            return None
        self.threads.append(thread)
        self._refresh_viewer()
        return thread

    async def delete_thread(self, thread_id: str) -> bool:
        if self._confirm is not None and not await self._confirm(DELETE_THREAD_PROMPT):
            return False
        try:
            await self.client.delete_thread(thread_id)
        except ApiError as e:
            self._fail("Failed to delete comment", e)
            return False
        self.threads = [t for t in self.threads if t.id != thread_id]
        self._refresh_viewer()
        return True

    async def update_thread_position(self, thread_id: str, x: float, y: float) -> Optional[Thread]:
        try:
            updated = await self.client.update_thread_position(thread_id, x, y)
        except ApiError as e:
            self._fail("Failed to update pin position", e)
            return None
        self.threads = [updated if t.id == thread_id else t for t in self.threads]
        self._refresh_viewer()
        return updated

    # ══════════════════════════════════════════════════════════════════════
    # Viewer
    # ══════════════════════════════════════════════════════════════════════

    def viewer(self) -> Optional[ImageViewer]:
        """Viewer for the selected image, wired to this workspace's operations."""
        image = self.selected_image
        if image is None:
            return None
        if self._viewer is None or self._viewer.image.id != image.id:
            self._viewer = ImageViewer(
                image,
                self.username,
                on_create=self.create_thread,
                on_move=self.update_thread_position,
                on_delete=self.delete_thread,
                threads=self.threads,
            )
        return self._viewer
