"""
Image Tagger — Session Store Tests

What we test:
    ✅ Save/load persists the name across store instances
    ✅ Clear removes it (and is safe to repeat)
    ✅ Missing or malformed files read as "not logged in"
"""

import pytest

from tagger.client import SessionStore


class TestSessionStore:

    @pytest.mark.asyncio
    async def test_empty_store_loads_none(self, session_store):
        assert await session_store.load() is None

    @pytest.mark.asyncio
    async def test_save_survives_new_instance(self, session_store):
        await session_store.save("alice")
        assert await SessionStore(session_store.path).load() == "alice"

    @pytest.mark.asyncio
    async def test_save_overwrites(self, session_store):
        await session_store.save("alice")
        await session_store.save("bob")
        assert await session_store.load() == "bob"

    @pytest.mark.asyncio
    async def test_clear(self, session_store):
        await session_store.save("alice")
        await session_store.clear()
        assert await session_store.load() is None
        assert not session_store.path.exists()
        await session_store.clear()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", ["not json", "[1, 2]", '{"name": ""}', '{"name": 3}'])
    async def test_malformed_file_ignored(self, session_store, content):
        session_store.path.parent.mkdir(parents=True, exist_ok=True)
        session_store.path.write_text(content, encoding="utf-8")
        assert await session_store.load() is None

    def test_home_directory_expanded(self):
        store = SessionStore("~/tagger-session.json")
        assert "~" not in str(store.path)
