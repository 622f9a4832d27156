"""
Image Tagger Backend — Storage Package
========================================

What:  Storage interface, the memory and SQL backends, and the helpers that
       select a backend from settings and hand it to request handlers.

Backend selection (STORAGE_BACKEND):
    memory → MemoryStorage   (default; dict-backed)
    sql    → SqlStorage      (SQLAlchemy async on DATABASE_URL)
"""

from fastapi import Request

from tagger.config import Settings, settings
from tagger.storage.base import Repository, Storage
from tagger.storage.memory import MemoryStorage


def build_storage(config: Settings = settings) -> Storage:
    """Instantiate the backend named by `config.storage_backend`."""
    if config.storage_backend == "sql":
        from tagger.storage.sql import SqlStorage

        return SqlStorage(config.database_url)
    return MemoryStorage()


def get_storage(request: Request) -> Storage:
    """FastAPI dependency: the storage attached to the running app."""
    return request.app.state.storage


__all__ = ["MemoryStorage", "Repository", "Storage", "build_storage", "get_storage"]
