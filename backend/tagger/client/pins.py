"""
Image Tagger — Pin Drag Controller
====================================

What:  State of one pin (a thread marker) while the user may be dragging it.
How:   Pointer events arrive in screen pixels; positions are kept in percent of
       the rendered image. The drag math lives in services/positioning.py so the
       client and the server clamp identically.

Gesture:
    pointer_down  → only the thread's creator may start a drag
    pointer_move  → position = clamp(start % + Δpx / extent px * 100)
    pointer_up    → returns the new position if it differs from the
                    server-confirmed one, else None (no update call)
"""

from typing import NamedTuple, Optional

from tagger.schemas import Thread
from tagger.services.positioning import drag_position


class Point(NamedTuple):
    x: float
    y: float


class PinDrag:
    """
    Drag state for a single pin.

    Args:
        thread:       The server-confirmed thread this pin renders
        current_user: Name of the logged-in user (None when logged out)
    """

    def __init__(self, thread: Thread, current_user: Optional[str]):
        self.thread = thread
        self.current_user = current_user
        self.position = Point(thread.x, thread.y)
        self.dragging = False
        self._start_pointer = Point(0.0, 0.0)
        self._start_position = self.position

    @property
    def is_owner(self) -> bool:
        return self.current_user is not None and self.thread.created_by == self.current_user

    @property
    def initials(self) -> str:
        """Badge text: the creator's first two characters, upper-cased."""
        return self.thread.created_by[:2].upper()

    def sync(self, thread: Thread) -> None:
        """Adopt a newer server copy of the thread (e.g. after a PATCH)."""
        self.thread = thread
        if not self.dragging:
            self.position = Point(thread.x, thread.y)

    def pointer_down(self, client_x: float, client_y: float) -> bool:
        """Begin a drag. Returns False (and does nothing) for non-owners."""
        if not self.is_owner:
            return False
        self.dragging = True
        self._start_pointer = Point(client_x, client_y)
        self._start_position = self.position
        return True

    def pointer_move(self, client_x: float, client_y: float, width: float, height: float) -> Point:
        if self.dragging:
            self.position = Point(
                drag_position(self._start_position.x, self._start_pointer.x, client_x, width),
                drag_position(self._start_position.y, self._start_pointer.y, client_y, height),
            )
        return self.position

    def pointer_up(self) -> Optional[Point]:
        """End the drag. Returns the position to persist, or None if unchanged."""
        if not self.dragging:
            return None
        self.dragging = False
        if self.position == (self.thread.x, self.thread.y):
            return None
        return self.position

    def revert(self) -> None:
        """Snap back to the server-confirmed position (after a failed update)."""
        self.dragging = False
        self.position = Point(self.thread.x, self.thread.y)
