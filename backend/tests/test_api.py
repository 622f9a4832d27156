"""
Image Tagger Backend — HTTP API Tests
=======================================

What:  End-to-end tests through the FastAPI app (routes, guard, handlers).
How:   HTTPX AsyncClient over ASGITransport; every test runs on both storage
       backends because `test_client` is built on the `storage` fixture.

What we test:
    ✅ Registration and login status codes and bodies
    ✅ camelCase JSON records
    ✅ The two-user ownership walkthrough (403 → 204 → 404)
    ✅ Sanitized comments and clamped coordinates
    ✅ Error body shape and malformed bodies
    ✅ Health endpoint
"""

import pytest
import pytest_asyncio

from conftest import auth


class TestUsers:

    @pytest.mark.asyncio
    async def test_register_returns_201(self, test_client):
        response = await test_client.post("/users", json={"name": "  alice "})
        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "alice"
        assert set(body) == {"id", "name"}

    @pytest.mark.asyncio
    async def test_duplicate_register_is_400(self, test_client, register):
        await register("alice")
        response = await test_client.post("/users", json={"name": "alice"})
        assert response.status_code == 400
        assert response.json()["error"] == "User already exists"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": "   "}, {"name": 5}])
    async def test_register_without_name_is_400(self, test_client, body):
        response = await test_client.post("/users", json=body)
        assert response.status_code == 400
        assert response.json()["error"] == "Name is required"

    @pytest.mark.asyncio
    async def test_login(self, test_client, register):
        alice = await register("alice")
        response = await test_client.post("/login", json={"name": "alice"})
        assert response.status_code == 200
        assert response.json() == {"message": "Login successful", "user": alice}

    @pytest.mark.asyncio
    async def test_login_with_same_typed_name(self, test_client):
        created = await test_client.post("/users", json={"name": "Tom & Jerry"})
        response = await test_client.post("/login", json={"name": "Tom & Jerry"})
        assert response.status_code == 200
        assert response.json()["user"] == created.json()

    @pytest.mark.asyncio
    async def test_login_unknown_is_401(self, test_client):
        response = await test_client.post("/login", json={"name": "ghost"})
        assert response.status_code == 401
        assert response.json()["error"] == "User not found"

    @pytest.mark.asyncio
    async def test_login_without_name_is_400(self, test_client):
        response = await test_client.post("/login", json={})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_list_users_requires_identity(self, test_client, register):
        await register("alice")
        await register("bob")
        assert (await test_client.get("/users")).status_code == 401

        response = await test_client.get("/users", headers=auth("bob"))
        assert response.status_code == 200
        assert [u["name"] for u in response.json()] == ["alice", "bob"]


class TestAccessGuard:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, path",
        [
            ("GET", "/images"),
            ("POST", "/images"),
            ("DELETE", "/images/x"),
            ("GET", "/images/x/threads"),
            ("POST", "/images/x/threads"),
            ("PATCH", "/threads/x"),
            ("DELETE", "/threads/x"),
        ],
    )
    async def test_protected_routes_reject_missing_identity(self, test_client, method, path):
        response = await test_client.request(method, path, json={})
        assert response.status_code == 401
        assert response.json()["code"] == "unauthorized"

    @pytest.mark.asyncio
    async def test_unknown_identity_rejected(self, test_client):
        response = await test_client.get("/images", headers=auth("mallory"))
        assert response.status_code == 401


class TestOwnershipWalkthrough:

    @pytest.mark.asyncio
    async def test_two_users_one_image(self, test_client, register):
        await register("alice")
        await register("bob")

        response = await test_client.post("/images", headers=auth("alice"))
        assert response.status_code == 201
        image = response.json()
        assert image["createdBy"] == "alice"
        assert image["url"].startswith("https://picsum.photos/id/")

        response = await test_client.post(
            f"/images/{image['id']}/threads",
            headers=auth("bob"),
            json={"x": 25, "y": 75, "comment": "Nice"},
        )
        assert response.status_code == 201
        thread = response.json()
        assert thread["imageId"] == image["id"]
        assert thread["createdBy"] == "bob"
        assert (thread["x"], thread["y"]) == (25, 75)

        # Alice owns the image but not bob's thread
        response = await test_client.delete(f"/threads/{thread['id']}", headers=auth("alice"))
        assert response.status_code == 403
        assert response.json()["error"] == "You can only delete your own threads"

        response = await test_client.delete(f"/threads/{thread['id']}", headers=auth("bob"))
        assert response.status_code == 204
        assert response.content == b""

        response = await test_client.get(
            f"/images/{image['id']}/threads", headers=auth("alice")
        )
        assert response.json() == []

        response = await test_client.delete(f"/images/{image['id']}", headers=auth("alice"))
        assert response.status_code == 204

        response = await test_client.get(
            f"/images/{image['id']}/threads", headers=auth("alice")
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_only_creator_deletes_image(self, test_client, register):
        await register("alice")
        await register("bob")
        image = (await test_client.post("/images", headers=auth("alice"))).json()

        response = await test_client.delete(f"/images/{image['id']}", headers=auth("bob"))
        assert response.status_code == 403
        assert response.json()["error"] == "You can only delete your own images"

        response = await test_client.get("/images", headers=auth("bob"))
        assert [i["id"] for i in response.json()] == [image["id"]]

    @pytest.mark.asyncio
    async def test_image_delete_cascades(self, test_client, register):
        await register("alice")
        await register("bob")
        image = (await test_client.post("/images", headers=auth("alice"))).json()
        thread = (
            await test_client.post(
                f"/images/{image['id']}/threads",
                headers=auth("bob"),
                json={"x": 1, "y": 1, "comment": "soon gone"},
            )
        ).json()

        await test_client.delete(f"/images/{image['id']}", headers=auth("alice"))

        response = await test_client.patch(
            f"/threads/{thread['id']}", headers=auth("bob"), json={"x": 5}
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_image_delete_is_404(self, test_client, register):
        await register("alice")
        response = await test_client.delete("/images/missing", headers=auth("alice"))
        assert response.status_code == 404
        assert response.json()["error"] == "Image not found"


class TestThreads:

    @pytest_asyncio.fixture
    async def image(self, test_client, register):
        await register("alice")
        await register("bob")
        return (await test_client.post("/images", headers=auth("alice"))).json()

    @pytest.mark.asyncio
    async def test_comment_markup_stripped(self, test_client, image):
        response = await test_client.post(
            f"/images/{image['id']}/threads",
            headers=auth("alice"),
            json={"x": 10, "y": 10, "comment": "<b>hi</b>"},
        )
        assert response.status_code == 201
        assert response.json()["comment"] == "hi"

    @pytest.mark.asyncio
    async def test_create_clamps_coordinates(self, test_client, image):
        response = await test_client.post(
            f"/images/{image['id']}/threads",
            headers=auth("alice"),
            json={"x": -20, "y": 180.5, "comment": "corner"},
        )
        assert response.status_code == 201
        assert (response.json()["x"], response.json()["y"]) == (0, 100)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {"x": "10", "y": 10, "comment": "c"},
            {"x": 10, "comment": "c"},
            {"x": 10, "y": 10},
            {"x": 10, "y": 10, "comment": ""},
            {"x": True, "y": 10, "comment": "c"},
        ],
    )
    async def test_invalid_thread_is_400(self, test_client, image, body):
        response = await test_client.post(
            f"/images/{image['id']}/threads", headers=auth("alice"), json=body
        )
        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    @pytest.mark.asyncio
    async def test_thread_on_missing_image_is_404(self, test_client, image):
        response = await test_client.post(
            "/images/missing/threads",
            headers=auth("alice"),
            json={"x": 10, "y": 10, "comment": "c"},
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_patch_moves_and_clamps(self, test_client, image):
        thread = (
            await test_client.post(
                f"/images/{image['id']}/threads",
                headers=auth("bob"),
                json={"x": 50, "y": 50, "comment": "drag me"},
            )
        ).json()

        response = await test_client.patch(
            f"/threads/{thread['id']}", headers=auth("bob"), json={"x": 130, "y": 12.5}
        )
        assert response.status_code == 200
        assert (response.json()["x"], response.json()["y"]) == (100, 12.5)

        response = await test_client.patch(
            f"/threads/{thread['id']}", headers=auth("bob"), json={"y": 60}
        )
        assert (response.json()["x"], response.json()["y"]) == (100, 60)

    @pytest.mark.asyncio
    async def test_patch_by_non_owner_is_403(self, test_client, image):
        thread = (
            await test_client.post(
                f"/images/{image['id']}/threads",
                headers=auth("bob"),
                json={"x": 50, "y": 50, "comment": "bob's pin"},
            )
        ).json()

        response = await test_client.patch(
            f"/threads/{thread['id']}", headers=auth("alice"), json={"x": 1, "y": 1}
        )
        assert response.status_code == 403
        assert response.json()["error"] == "You can only update your own threads"

    @pytest.mark.asyncio
    async def test_patch_with_text_coordinate_is_400(self, test_client, image):
        thread = (
            await test_client.post(
                f"/images/{image['id']}/threads",
                headers=auth("alice"),
                json={"x": 50, "y": 50, "comment": "c"},
            )
        ).json()
        response = await test_client.patch(
            f"/threads/{thread['id']}", headers=auth("alice"), json={"x": "left"}
        )
        assert response.status_code == 400


class TestErrorsAndHealth:

    @pytest.mark.asyncio
    async def test_error_body_shape(self, test_client):
        response = await test_client.post(
            "/login", json={"name": "ghost"}, headers={"X-Request-ID": "req-123"}
        )
        assert response.json() == {
            "error": "User not found",
            "code": "unauthorized",
            "request_id": "req-123",
        }

    @pytest.mark.asyncio
    async def test_malformed_json_is_400(self, test_client):
        response = await test_client.post(
            "/users", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    @pytest.mark.asyncio
    async def test_image_source_failure_is_503(self, test_client, register, image_source):
        await register("alice")
        image_source.fail = True

        response = await test_client.post("/images", headers=auth("alice"))

        assert response.status_code == 503
        assert response.json()["code"] == "image_source_unavailable"
        assert (await test_client.get("/images", headers=auth("alice"))).json() == []

    @pytest.mark.asyncio
    async def test_health(self, test_client, storage):
        response = await test_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["storage_backend"] == storage.name
        assert body["in_memory"] is True
