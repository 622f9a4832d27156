"""
Image Tagger Backend — SQL Engine & Session Factory
=====================================================

What:  Async SQLAlchemy engine, session factory and declarative base used by
       the SQL storage backend.
How:   `create_engine_for()` builds an async engine for DATABASE_URL. SQLite
       in-memory URLs get a StaticPool so every session shares the single
       connection that owns the database; otherwise each new connection
       would see an empty database.
Who:   SqlStorage (storage/sql.py) and the ORM models in models/.
When:  Engine is created when the SQL backend is built; disposed on shutdown.
"""

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from tagger.config import settings


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""
    pass


def is_sqlite_memory_url(url: str) -> bool:
    """True for SQLite URLs whose database lives only in process memory."""
    return url.startswith("sqlite") and (url.endswith("://") or ":memory:" in url)


def create_engine_for(url: str) -> AsyncEngine:
    """
    Create an async engine for `url`.

    SQLite in-memory:
        poolclass=StaticPool keeps one connection alive for the engine's
        lifetime; check_same_thread=False lets aiosqlite's worker thread use it.
    Anything else:
        Default pool with pre-ping so stale connections are replaced.
    Any SQLite URL:
        PRAGMA foreign_keys=ON on every new connection, so a thread can never
        reference a missing image.
    """
    if is_sqlite_memory_url(url):
        engine = create_async_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            echo=settings.log_level == "DEBUG",
        )
    else:
        engine = create_async_engine(
            url,
            pool_pre_ping=True,
            echo=settings.log_level == "DEBUG",
        )

    if url.startswith("sqlite"):
        _enforce_sqlite_foreign_keys(engine)
    return engine


def _enforce_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores FOREIGN KEY clauses unless each connection opts in."""

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    expire_on_commit=False: rows stay readable after commit, so repositories
    can convert them to schemas once the transaction is closed.
    """
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    """Create all tables registered on Base.metadata (idempotent)."""
    # Model modules register their tables on import
    from tagger.models import image, thread, user  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine(engine: AsyncEngine) -> None:
    """Close all pooled connections. For in-memory SQLite this drops the data."""
    await engine.dispose()
