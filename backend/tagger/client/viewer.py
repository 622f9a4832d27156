"""
Image Tagger — Image Viewer Model
===================================

What:  Everything that happens over one displayed image: comment mode, the
       comment composer, and pin gestures (drag to move, owner-only delete).
How:   The view reports the rendered image rectangle via layout() and feeds
       pointer events in screen pixels. Persistence goes through async
       callbacks supplied by the owner (normally the Workspace).

Comment placement:
    click (comment mode, inside the laid-out image, not on a pin)
        → (x%, y%) = offset inside image / rendered size * 100
        → composer opens at the click's screen position
        → submit(text) → on_create(x%, y%, text) → composer closes

Pin hit-testing:
    Pins render as PIN_SIZE_PX circles centred on their position, so a point
    within PIN_SIZE_PX / 2 of a pin's centre belongs to that pin.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Iterable, List, NamedTuple, Optional

from tagger.client.pins import PinDrag, Point
from tagger.schemas import Image, Thread
from tagger.services.positioning import to_percent

logger = logging.getLogger(__name__)

PIN_SIZE_PX = 32

CreateCallback = Callable[[float, float, str], Awaitable[Optional[Thread]]]
MoveCallback = Callable[[str, float, float], Awaitable[Optional[Thread]]]
DeleteCallback = Callable[[str], Awaitable[bool]]


class ImageRect(NamedTuple):
    """Rendered image bounds in screen pixels."""
    left: float
    top: float
    width: float
    height: float


@dataclass
class Composer:
    """An open "Add Comment" dialog."""
    x: float
    y: float
    screen_x: float
    screen_y: float


class ImageViewer:
    """
    Args:
        image:        The image being shown
        current_user: Logged-in user name; decides which pins are draggable
        on_create:    Persist a new thread at (x%, y%) with a comment
        on_move:      Persist a pin's new position; returns the stored thread
                      or None on failure
        on_delete:    Delete a thread; returns True on success
        threads:      Threads already loaded for the image
    """

    def __init__(
        self,
        image: Image,
        current_user: Optional[str],
        on_create: CreateCallback,
        on_move: MoveCallback,
        on_delete: DeleteCallback,
        threads: Iterable[Thread] = (),
    ):
        self.image = image
        self.current_user = current_user
        self.comment_mode = False
        self.rect = ImageRect(0.0, 0.0, 0.0, 0.0)
        self.composer: Optional[Composer] = None
        self.pins: Dict[str, PinDrag] = {}
        self._on_create = on_create
        self._on_move = on_move
        self._on_delete = on_delete
        self._active: Optional[PinDrag] = None
        self.set_threads(threads)

    # ── State from the outside ────────────────────────────────────────────

    def set_threads(self, threads: Iterable[Thread]) -> None:
        """Replace the pin set, keeping drag state for pins that survive."""
        pins: Dict[str, PinDrag] = {}
        for thread in threads:
            pin = self.pins.get(thread.id)
            if pin is None:
                pin = PinDrag(thread, self.current_user)
            else:
                pin.sync(thread)
            pins[thread.id] = pin
        self.pins = pins
        if self._active is not None and self._active.thread.id not in pins:
            self._active = None

    def layout(self, rect: ImageRect) -> None:
        self.rect = rect

    def set_comment_mode(self, enabled: bool) -> None:
        self.comment_mode = enabled
        if not enabled:
            self.composer = None

    def toggle_comment_mode(self) -> bool:
        self.set_comment_mode(not self.comment_mode)
        return self.comment_mode

    @property
    def threads(self) -> List[Thread]:
        return [pin.thread for pin in self.pins.values()]

    # ── Geometry ──────────────────────────────────────────────────────────

    def _pin_centre(self, pin: PinDrag) -> Point:
        return Point(
            self.rect.left + pin.position.x / 100.0 * self.rect.width,
            self.rect.top + pin.position.y / 100.0 * self.rect.height,
        )

    def pin_at(self, client_x: float, client_y: float) -> Optional[PinDrag]:
        """Topmost pin under the point (later pins render above earlier ones)."""
        radius = PIN_SIZE_PX / 2
        for pin in reversed(list(self.pins.values())):
            centre = self._pin_centre(pin)
            if (client_x - centre.x) ** 2 + (client_y - centre.y) ** 2 <= radius ** 2:
                return pin
        return None

    # ── Comment placement ─────────────────────────────────────────────────

    def contains(self, client_x: float, client_y: float) -> bool:
        """True if the point lies on the rendered image (edges included)."""
        rect = self.rect
        if rect.width <= 0 or rect.height <= 0:
            return False
        return (
            rect.left <= client_x <= rect.left + rect.width
            and rect.top <= client_y <= rect.top + rect.height
        )

    def click(self, client_x: float, client_y: float) -> bool:
        """Open the composer for a click on the image. Returns True if it opened."""
        if not self.comment_mode or not self.contains(client_x, client_y):
            return False
        if self.pin_at(client_x, client_y) is not None:
            return False
        self.composer = Composer(
            x=to_percent(client_x - self.rect.left, self.rect.width),
            y=to_percent(client_y - self.rect.top, self.rect.height),
            screen_x=client_x,
            screen_y=client_y,
        )
        return True

    async def submit_comment(self, text: str) -> Optional[Thread]:
        """
        Create a thread at the composer's position.

        Whitespace-only text does nothing and leaves the composer open.
        Otherwise the composer closes whether or not creation succeeded.
        """
        composer = self.composer
        if composer is None or not text.strip():
            return None
        self.composer = None
        return await self._on_create(composer.x, composer.y, text)

    def cancel_comment(self) -> None:
        self.composer = None

    # ── Pin gestures ──────────────────────────────────────────────────────

    def pointer_down(self, client_x: float, client_y: float) -> bool:
        """Start dragging the pin under the pointer, if the user owns it."""
        pin = self.pin_at(client_x, client_y)
        if pin is None or not pin.pointer_down(client_x, client_y):
            return False
        self._active = pin
        return True

    def pointer_move(self, client_x: float, client_y: float) -> Optional[Point]:
        if self._active is None:
            return None
        return self._active.pointer_move(client_x, client_y, self.rect.width, self.rect.height)

    async def pointer_up(self) -> Optional[Thread]:
        """
        Finish a drag. Persists the new position once if it changed; a failed
        update snaps the pin back to its last confirmed position.
        """
        pin, self._active = self._active, None
        if pin is None:
            return None
        target = pin.pointer_up()
        if target is None:
            return None

        updated = await self._on_move(pin.thread.id, target.x, target.y)
        if updated is None:
            logger.info("Move of thread %s was not saved; reverting", pin.thread.id)
            pin.revert()
            return None
        pin.sync(updated)
        return updated

    async def delete_pin(self, thread_id: str) -> bool:
        """Delete a pin. Only its creator gets the delete control."""
        pin = self.pins.get(thread_id)
        if pin is None or not pin.is_owner:
            return False
        if not await self._on_delete(thread_id):
            return False
        self.pins.pop(thread_id, None)
        return True
