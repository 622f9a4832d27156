"""
Image Tagger — Workspace Tests
================================

What:  The main-screen model driven end to end against the test app.

What we test:
    ✅ Sign-in persists the session; restore resumes it; sign-out clears it
    ✅ First image auto-selected; selection loads threads
    ✅ Generated images are appended and selected
    ✅ Deleting the selected image falls back to the first remaining one
    ✅ Failures set an operation-scoped, dismissible error
    ✅ The viewer is wired to the workspace's thread operations
"""

from unittest.mock import AsyncMock

import pytest

from tagger.client import ImageRect, Workspace


@pytest.fixture
def workspace(tagger_client, session_store):
    return Workspace(tagger_client, session_store)


class TestSession:

    @pytest.mark.asyncio
    async def test_register_signs_in_and_persists(self, workspace, session_store):
        user = await workspace.register("  alice ")

        assert user.name == "alice"
        assert workspace.username == "alice"
        assert await session_store.load() == "alice"

    @pytest.mark.asyncio
    async def test_sign_in_unknown_user_sets_error(self, workspace, session_store):
        assert await workspace.sign_in("ghost") is None
        assert workspace.error == "User not found"
        assert workspace.username is None
        assert await session_store.load() is None

    @pytest.mark.asyncio
    async def test_duplicate_register_sets_error(self, workspace, tagger_client):
        await tagger_client.create_user("alice")
        assert await workspace.register("alice") is None
        assert workspace.error == "User already exists"

    @pytest.mark.asyncio
    async def test_restore_and_sign_out(self, tagger_client, session_store):
        first = Workspace(tagger_client, session_store)
        await first.register("alice")
        await first.generate_image()

        second = Workspace(tagger_client, session_store)
        assert await second.restore() is True
        assert second.username == "alice"
        assert len(second.images) == 1
        assert second.selected_image_id == second.images[0].id

        await second.sign_out()
        assert second.username is None
        assert second.images == []
        assert await session_store.load() is None
        assert await Workspace(tagger_client, session_store).restore() is False


class TestImages:

    @pytest.mark.asyncio
    async def test_first_image_auto_selected(self, workspace, tagger_client):
        await tagger_client.create_user("alice")
        tagger_client.username = "alice"
        first = await tagger_client.create_image()
        await tagger_client.create_image()
        await tagger_client.create_thread(first.id, 5, 5, "hello")

        await workspace.sign_in("alice")

        assert workspace.selected_image_id == first.id
        assert [t.comment for t in workspace.threads] == ["hello"]

    @pytest.mark.asyncio
    async def test_generate_appends_and_selects(self, workspace):
        await workspace.register("alice")
        first = await workspace.generate_image()
        second = await workspace.generate_image()

        assert workspace.images == [first, second]
        assert workspace.selected_image == second
        assert workspace.loading is False

    @pytest.mark.asyncio
    async def test_generate_failure(self, workspace, image_source):
        await workspace.register("alice")
        image_source.fail = True

        assert await workspace.generate_image() is None
        assert workspace.error == "Failed to generate image"
        assert workspace.loading is False

        workspace.dismiss_error()
        assert workspace.error is None

    @pytest.mark.asyncio
    async def test_delete_selected_falls_back_to_first(self, workspace):
        await workspace.register("alice")
        first = await workspace.generate_image()
        second = await workspace.generate_image()
        third = await workspace.generate_image()

        assert await workspace.delete_image(third.id) is True
        assert workspace.images == [first, second]
        assert workspace.selected_image_id == first.id

        await workspace.delete_image(first.id)
        await workspace.delete_image(second.id)
        assert workspace.selected_image_id is None
        assert workspace.threads == []

    @pytest.mark.asyncio
    async def test_delete_other_users_image_fails(self, workspace, tagger_client):
        await workspace.register("bob")
        await tagger_client.create_user("alice")
        tagger_client.username = "alice"
        image = await tagger_client.create_image()
        tagger_client.username = "bob"
        await workspace.load_images()

        assert await workspace.delete_image(image.id) is False
        assert workspace.error == "Failed to delete image"
        assert workspace.images == [image]

    @pytest.mark.asyncio
    async def test_declined_confirmation_keeps_image(self, tagger_client, session_store):
        confirm = AsyncMock(return_value=False)
        workspace = Workspace(tagger_client, session_store, confirm=confirm)
        await workspace.register("alice")
        image = await workspace.generate_image()

        assert await workspace.delete_image(image.id) is False
        confirm.assert_awaited_once()
        assert workspace.images == [image]


class TestThreads:

    @pytest.mark.asyncio
    async def test_thread_lifecycle(self, workspace):
        await workspace.register("alice")
        await workspace.generate_image()

        thread = await workspace.create_thread(10, 20, "look here")
        assert workspace.threads == [thread]

        moved = await workspace.update_thread_position(thread.id, 70, 80)
        assert workspace.threads == [moved]

        assert await workspace.delete_thread(thread.id) is True
        assert workspace.threads == []

    @pytest.mark.asyncio
    async def test_failures_are_scoped(self, workspace):
        await workspace.register("alice")
        await workspace.generate_image()

        assert await workspace.delete_thread("missing") is False
        assert workspace.error == "Failed to delete comment"

        assert await workspace.update_thread_position("missing", 1, 1) is None
        assert workspace.error == "Failed to update pin position"

        assert await workspace.create_thread(1, 1, "<i></i>") is None
        assert workspace.error == "Failed to create comment"

    @pytest.mark.asyncio
    async def test_create_without_selection_is_noop(self, workspace):
        await workspace.register("alice")
        assert await workspace.create_thread(1, 1, "nowhere") is None
        assert workspace.error is None


class TestViewerIntegration:

    @pytest.mark.asyncio
    async def test_place_and_drag_comment(self, workspace):
        await workspace.register("alice")
        await workspace.generate_image()
        viewer = workspace.viewer()
        viewer.layout(ImageRect(0, 0, 800, 600))
        viewer.set_comment_mode(True)

        viewer.click(200, 300)
        thread = await viewer.submit_comment("pinned")
        assert (thread.x, thread.y) == (25.0, 50.0)
        assert list(viewer.pins) == [thread.id]

        viewer.set_comment_mode(False)
        assert viewer.pointer_down(200, 300) is True
        viewer.pointer_move(280, 300)
        updated = await viewer.pointer_up()

        assert updated.x == pytest.approx(35.0)
        assert workspace.threads[0].x == pytest.approx(35.0)

        assert await viewer.delete_pin(thread.id) is True
        assert workspace.threads == []
        assert viewer.pins == {}

    @pytest.mark.asyncio
    async def test_no_viewer_without_selection(self, workspace):
        await workspace.register("alice")
        assert workspace.viewer() is None
