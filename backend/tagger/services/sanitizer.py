"""
Image Tagger Backend — Free-Text Sanitizer
============================================

What:  Strips all markup from user-submitted text (display names, comments).
How:   nh3 (Rust ammonia bindings) with an empty tag allow-list: tags are
       removed, their text content kept, and <script>/<style> bodies dropped.
Who:   Identity service (names) and thread service (comments).

Examples:
    "<b>hi</b>"                      → "hi"
    "<script>alert(1)</script>hello" → "hello"
"""

import nh3


def sanitize(text: str) -> str:
    """Return text with every HTML tag removed."""
    return nh3.clean(text, tags=set())
