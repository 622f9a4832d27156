"""
Image Tagger Backend — Test Configuration (conftest.py)
=========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.
Who:   Used by all test files in the tests/ directory.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── storage:        every storage backend in turn (memory, sql)
    ├── memory_storage: just the dict-backed backend
    ├── image_source:   deterministic ImageSource stub (no network)
    ├── app:            FastAPI app built around storage + image_source
    ├── test_client:    HTTPX AsyncClient for API endpoint testing
    └── register:       helper that registers a user over HTTP
"""

import os
import tempfile

# Override settings for testing BEFORE any tagger imports
os.environ["STORAGE_BACKEND"] = "memory"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["IMAGE_SOURCE_VERIFY"] = "false"
os.environ["CLIENT_SESSION_PATH"] = os.path.join(
    tempfile.mkdtemp(prefix="tagger_test_"), "session.json"
)
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce noise during tests

from typing import Dict, List  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from tagger.exceptions import ImageSourceError  # noqa: E402
from tagger.main import create_app  # noqa: E402
from tagger.services.image_source import ImageSource  # noqa: E402
from tagger.storage import MemoryStorage  # noqa: E402
from tagger.storage.sql import SqlStorage  # noqa: E402


class StubImageSource(ImageSource):
    """Hands out predictable picsum-style URLs; can be told to fail."""

    def __init__(self):
        self.fail = False
        self.issued: List[str] = []

    async def create_reference(self) -> str:
        if self.fail:
            raise ImageSourceError(context={"stub": True})
        url = f"https://picsum.photos/id/{len(self.issued)}/800/600"
        self.issued.append(url)
        return url


def auth(name: str) -> Dict[str, str]:
    """Identity header for `name`."""
    return {"X-User-Name": name}


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture(params=["memory", "sql"])
async def storage(request):
    """
    Each storage backend in turn; tests using it run once per backend.

    The SQL backend uses a private in-memory SQLite database. ASGITransport
    does not run the app lifespan, so startup/shutdown happen here.
    """
    if request.param == "sql":
        backend = SqlStorage("sqlite+aiosqlite://")
    else:
        backend = MemoryStorage()
    await backend.startup()
    yield backend
    await backend.shutdown()


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def image_source():
    return StubImageSource()


@pytest.fixture
def app(storage, image_source):
    return create_app(storage=storage, image_source=image_source)


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient configured to talk to a fresh FastAPI app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def register(test_client):
    """
    Register a user over HTTP and return its JSON.

    Usage:
        alice = await register("alice")
    """

    async def _register(name: str) -> dict:
        response = await test_client.post("/users", json={"name": name})
        assert response.status_code == 201, response.text
        return response.json()

    return _register


@pytest_asyncio.fixture
async def tagger_client(app):
    """The Python client wired straight to the test app (no network)."""
    from tagger.client import TaggerClient

    async with TaggerClient(base_url="http://test", transport=ASGITransport(app=app)) as client:
        yield client


@pytest.fixture
def session_store(tmp_path):
    from tagger.client import SessionStore

    return SessionStore(tmp_path / "session" / "session.json")
