"""
Image Tagger — Pin Positioning Math
=====================================

What:  Pure functions converting between screen pixels and pin percentages.
Who:   The thread service (server-side clamping) and the client pin/viewer
       models (drag gestures and comment placement).

Coordinate model:
    A pin position is (x, y) in percent of the rendered image's width and
    height, so 0 is the left/top edge and 100 the right/bottom edge.
    Positions always lie in the closed range [0, 100] on both axes.

        start pointer (px) ──delta px──▶ current pointer (px)
        delta %  = delta px / rendered extent px * 100
        position = clamp(start % + delta %)
"""

import math

PERCENT_MIN = 0.0
PERCENT_MAX = 100.0


def clamp_percent(value: float) -> float:
    """Clamp a percentage into [0, 100]."""
    return max(PERCENT_MIN, min(PERCENT_MAX, float(value)))


def to_percent(offset: float, extent: float) -> float:
    """
    Convert a pixel offset along one axis into a percentage of that axis.

    A non-positive extent (image not laid out yet) maps every offset to 0
    instead of dividing by zero.
    """
    if extent <= 0:
        return 0.0
    return offset / extent * 100.0


def drag_position(
    start_percent: float,
    start_pointer: float,
    pointer: float,
    extent: float,
) -> float:
    """
    Position along one axis after dragging from start_pointer to pointer.

    Args:
        start_percent: Pin position when the gesture began
        start_pointer: Pointer screen coordinate when the gesture began
        pointer:       Current pointer screen coordinate
        extent:        Rendered image size along this axis, in pixels
    """
    return clamp_percent(start_percent + to_percent(pointer - start_pointer, extent))


def is_coordinate(value: object) -> bool:
    """
    True for finite real numbers.

    bool is excluded even though it subclasses int: JSON true/false is not a
    coordinate.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
