"""
Image Tagger — HTTP API Client
================================

What:  Async client for every endpoint of the Image Tagger API.
How:   Wraps httpx.AsyncClient. Protected calls send the current username in
       the identity header. Any non-2xx response raises ApiError carrying the
       server's `error` message (or a per-operation fallback).
Who:   Workspace (and scripts/tests that talk to a running server).

Usage:
    async with TaggerClient("http://localhost:3001") as client:
        user = await client.login("alice")
        client.username = user.name
        image = await client.create_image()
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from tagger.config import settings
from tagger.schemas import Image, LoginResponse, Thread, User

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    A request the server rejected, or one that never got a response.

    Attributes:
        status_code: HTTP status, or None for transport failures
        message:     Server-provided error text or the operation's fallback
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class TaggerClient:
    """
    Args:
        base_url:    API root (default: settings.client_api_base_url)
        username:    Identity sent on protected requests
        header_name: Identity header (default: settings.auth_header)
        timeout:     Per-request timeout in seconds
        transport:   Optional httpx transport (tests pass ASGITransport(app))
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        username: Optional[str] = None,
        header_name: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.username = username
        self.header_name = header_name or settings.auth_header
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.client_api_base_url,
            timeout=timeout or settings.client_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "TaggerClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ── Plumbing ──────────────────────────────────────────────────────────

    def _auth_headers(self) -> Dict[str, str]:
        if not self.username:
            raise ApiError("Not logged in", status_code=401)
        return {self.header_name: self.username}

    @staticmethod
    def _error_message(response: httpx.Response, fallback: str) -> str:
        try:
            body = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict) and isinstance(body.get("error"), str):
            return body["error"]
        return fallback

    async def _request(
        self,
        method: str,
        path: str,
        fallback: str,
        auth: bool = True,
        json: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        headers = self._auth_headers() if auth else {}
        try:
            response = await self._client.request(method, path, headers=headers, json=json)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ApiError(fallback) from e

        if response.is_error:
            message = self._error_message(response, fallback)
            logger.info("%s %s → %d: %s", method, path, response.status_code, message)
            raise ApiError(message, status_code=response.status_code)
        return response

    # ── Public endpoints ──────────────────────────────────────────────────

    async def create_user(self, name: str) -> User:
        response = await self._request(
            "POST", "/users", "Failed to create user", auth=False, json={"name": name}
        )
        return User.model_validate(response.json())

    async def login(self, name: str) -> User:
        response = await self._request(
            "POST", "/login", "Login failed", auth=False, json={"name": name}
        )
        return LoginResponse.model_validate(response.json()).user

    # ── Protected endpoints ───────────────────────────────────────────────

    async def list_users(self) -> List[User]:
        response = await self._request("GET", "/users", "Failed to fetch users")
        return [User.model_validate(item) for item in response.json()]

    async def create_image(self) -> Image:
        response = await self._request("POST", "/images", "Failed to create image")
        return Image.model_validate(response.json())

    async def list_images(self) -> List[Image]:
        response = await self._request("GET", "/images", "Failed to fetch images")
        return [Image.model_validate(item) for item in response.json()]

    async def delete_image(self, image_id: str) -> None:
        await self._request("DELETE", f"/images/{image_id}", "Failed to delete image")

    async def create_thread(self, image_id: str, x: float, y: float, comment: str) -> Thread:
        response = await self._request(
            "POST",
            f"/images/{image_id}/threads",
            "Failed to create thread",
            json={"x": x, "y": y, "comment": comment},
        )
        return Thread.model_validate(response.json())

    async def list_threads(self, image_id: str) -> List[Thread]:
        response = await self._request(
            "GET", f"/images/{image_id}/threads", "Failed to fetch threads"
        )
        return [Thread.model_validate(item) for item in response.json()]

    async def update_thread_position(self, thread_id: str, x: float, y: float) -> Thread:
        response = await self._request(
            "PATCH",
            f"/threads/{thread_id}",
            "Failed to update thread position",
            json={"x": x, "y": y},
        )
        return Thread.model_validate(response.json())

    async def delete_thread(self, thread_id: str) -> None:
        await self._request("DELETE", f"/threads/{thread_id}", "Failed to delete thread")
