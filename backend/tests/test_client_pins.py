"""
Image Tagger — Pin Drag Controller Tests
==========================================

What we test:
    ✅ Owner-only drag start
    ✅ Pixel deltas become clamped percentage positions
    ✅ A gesture yields a position to persist only when it changed
"""

import pytest

from tagger.client.pins import PinDrag, Point
from tagger.schemas import Thread


def _thread(x: float = 50.0, y: float = 50.0, owner: str = "alice") -> Thread:
    return Thread(id="t1", image_id="i1", x=x, y=y, comment="c", created_by=owner)


class TestOwnership:

    def test_owner_can_start_drag(self):
        pin = PinDrag(_thread(), "alice")
        assert pin.is_owner
        assert pin.pointer_down(100, 100) is True
        assert pin.dragging

    @pytest.mark.parametrize("user", ["bob", None])
    def test_others_cannot(self, user):
        pin = PinDrag(_thread(), user)
        assert pin.pointer_down(100, 100) is False
        assert pin.pointer_move(300, 300, 800, 600) == Point(50.0, 50.0)
        assert pin.pointer_up() is None

    def test_initials(self):
        assert PinDrag(_thread(owner="alice"), None).initials == "AL"
        assert PinDrag(_thread(owner="q"), None).initials == "Q"


class TestDragging:

    def test_move_converts_pixels_to_percent(self):
        pin = PinDrag(_thread(x=20, y=30), "alice")
        pin.pointer_down(100, 100)

        # +80px of 800 wide is +10%, -60px of 600 high is -10%
        assert pin.pointer_move(180, 40, 800, 600) == pytest.approx(Point(30.0, 20.0))

    def test_move_is_relative_to_gesture_start(self):
        pin = PinDrag(_thread(x=20, y=30), "alice")
        pin.pointer_down(100, 100)
        pin.pointer_move(500, 500, 800, 600)
        assert pin.pointer_move(100, 100, 800, 600) == Point(20.0, 30.0)

    def test_position_clamped(self):
        pin = PinDrag(_thread(x=90, y=5), "alice")
        pin.pointer_down(0, 0)
        assert pin.pointer_move(400, -400, 800, 600) == Point(100.0, 0.0)

    def test_zero_extent_does_not_move(self):
        pin = PinDrag(_thread(x=40, y=40), "alice")
        pin.pointer_down(0, 0)
        assert pin.pointer_move(50, 50, 0, 0) == Point(40.0, 40.0)

    def test_pointer_up_returns_changed_position(self):
        pin = PinDrag(_thread(x=20, y=30), "alice")
        pin.pointer_down(100, 100)
        pin.pointer_move(180, 100, 800, 600)

        assert pin.pointer_up() == pytest.approx(Point(30.0, 30.0))
        assert not pin.dragging

    def test_click_without_movement_persists_nothing(self):
        pin = PinDrag(_thread(), "alice")
        pin.pointer_down(100, 100)
        pin.pointer_move(100, 100, 800, 600)
        assert pin.pointer_up() is None

    def test_drag_back_to_start_persists_nothing(self):
        pin = PinDrag(_thread(), "alice")
        pin.pointer_down(100, 100)
        pin.pointer_move(300, 200, 800, 600)
        pin.pointer_move(100, 100, 800, 600)
        assert pin.pointer_up() is None


class TestSync:

    def test_sync_adopts_server_position(self):
        pin = PinDrag(_thread(), "alice")
        pin.sync(_thread(x=10, y=90))
        assert pin.position == Point(10.0, 90.0)

    def test_sync_during_drag_keeps_pointer_position(self):
        pin = PinDrag(_thread(), "alice")
        pin.pointer_down(0, 0)
        pin.pointer_move(80, 0, 800, 600)
        pin.sync(_thread(x=0, y=0))
        assert pin.position == pytest.approx(Point(60.0, 50.0))

    def test_revert(self):
        pin = PinDrag(_thread(), "alice")
        pin.pointer_down(0, 0)
        pin.pointer_move(80, 60, 800, 600)
        pin.pointer_up()
        pin.revert()
        assert pin.position == Point(50.0, 50.0)
