"""
Image Tagger — Sanitizer Unit Tests
=====================================

What we test:
    ✅ Tags are removed and their text kept
    ✅ Script bodies are dropped entirely
    ✅ Plain text passes through unchanged
"""

import pytest

from tagger.services.sanitizer import sanitize


class TestSanitize:

    def test_strips_tags_keeps_text(self):
        assert sanitize("<b>hi</b>") == "hi"

    def test_drops_script_content(self):
        assert sanitize("<script>alert(1)</script>hello") == "hello"

    def test_nested_markup(self):
        assert sanitize('<div><a href="x">link</a> text</div>') == "link text"

    @pytest.mark.parametrize("text", ["alice", "Looks good to me", "50% off"])
    def test_plain_text_unchanged(self, text):
        assert sanitize(text) == text

    def test_markup_only_becomes_empty(self):
        assert sanitize("<br><img src=x>") == ""
