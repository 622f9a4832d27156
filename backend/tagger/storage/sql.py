"""
Image Tagger Backend — SQL Storage
====================================

What:  Repositories backed by SQLAlchemy 2.0 async sessions.
How:   One short-lived session per repository call; rows are converted to
       Pydantic schemas before the session closes. The cascading image delete
       runs both DELETE statements inside one transaction.
When:  STORAGE_BACKEND=sql. With the default DATABASE_URL
       ("sqlite+aiosqlite://") the database lives in memory and is dropped
       when the engine is disposed at shutdown.

Error translation:
    IntegrityError on insert → NotFoundError (foreign key: parent row missing)
                             → ConflictError (unique name taken)
    Any other SQLAlchemyError → StorageError (details logged, not returned)
"""

import logging
from typing import Any, Generic, List, Optional, Type

from sqlalchemy import delete, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from tagger.database import (
    Base,
    create_engine_for,
    create_session_factory,
    create_tables,
    dispose_engine,
    is_sqlite_memory_url,
)
from tagger.exceptions import ConflictError, NotFoundError, StorageError
from tagger.models.image import ImageRow
from tagger.models.thread import ThreadRow
from tagger.models.user import UserRow
from tagger.schemas import Image, Thread, User
from tagger.storage.base import RecordT, Repository, Storage

logger = logging.getLogger(__name__)


class SqlRepository(Repository[RecordT], Generic[RecordT]):
    """
    Repository mapping one ORM model to one schema.

    Args:
        entity:          Name used in error messages ("user", "image", ...)
        session_factory: Produces AsyncSession instances
        model:           ORM row class
        schema:          Pydantic schema returned to callers
        parent:          Resource named by this entity's foreign key, reported
                         as not found when an insert references a missing row
    """

    def __init__(
        self,
        entity: str,
        session_factory: async_sessionmaker[AsyncSession],
        model: Type[Base],
        schema: Type[RecordT],
        parent: Optional[str] = None,
    ):
        self.entity = entity
        self.parent = parent
        self._session_factory = session_factory
        self._model = model
        self._schema = schema

    def _storage_error(self, operation: str, exc: Exception) -> StorageError:
        logger.error("SQL %s on %s failed: %s", operation, self.entity, exc, exc_info=True)
        return StorageError(context={"entity": self.entity, "operation": operation})

    async def list(self, **filters: Any) -> List[RecordT]:
        try:
            async with self._session_factory() as session:
                stmt = select(self._model).filter_by(**filters).order_by(self._model.id)
                result = await session.execute(stmt)
                return [self._schema.model_validate(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            raise self._storage_error("list", e)

    async def get(self, record_id: str) -> Optional[RecordT]:
        try:
            async with self._session_factory() as session:
                row = await session.get(self._model, record_id)
                return self._schema.model_validate(row) if row is not None else None
        except SQLAlchemyError as e:
            raise self._storage_error("get", e)

    async def insert(self, record: RecordT) -> RecordT:
        try:
            async with self._session_factory() as session:
                session.add(self._model(**record.model_dump()))
                await session.commit()
        except IntegrityError as e:
            if self.parent and "FOREIGN KEY" in str(e.orig).upper():
                logger.info("Rejected %s for missing %s: %s", self.entity, self.parent, e.orig)
                raise NotFoundError(resource=self.parent, context={"entity": self.entity})
            logger.info("Rejected duplicate %s: %s", self.entity, e.orig)
            raise ConflictError(
                message=f"{self.entity.capitalize()} already exists",
                context={"entity": self.entity},
            )
        except SQLAlchemyError as e:
            raise self._storage_error("insert", e)
        return record

    async def update(self, record_id: str, **changes: Any) -> Optional[RecordT]:
        try:
            async with self._session_factory() as session:
                row = await session.get(self._model, record_id)
                if row is None:
                    return None
                for field, value in changes.items():
                    setattr(row, field, value)
                await session.commit()
                return self._schema.model_validate(row)
        except SQLAlchemyError as e:
            raise self._storage_error("update", e)

    async def delete(self, record_id: str) -> bool:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    delete(self._model).where(self._model.id == record_id)
                )
                await session.commit()
                return result.rowcount > 0
        except SQLAlchemyError as e:
            raise self._storage_error("delete", e)


class SqlStorage(Storage):
    """Storage on an async SQLAlchemy engine."""

    name = "sql"

    def __init__(self, database_url: str):
        self.database_url = database_url
        self.in_memory = is_sqlite_memory_url(database_url)
        self.engine = create_engine_for(database_url)
        self._session_factory = create_session_factory(self.engine)
        self.users: SqlRepository[User] = SqlRepository(
            "user", self._session_factory, UserRow, User
        )
        self.images: SqlRepository[Image] = SqlRepository(
            "image", self._session_factory, ImageRow, Image
        )
        self.threads: SqlRepository[Thread] = SqlRepository(
            "thread", self._session_factory, ThreadRow, Thread, parent="image"
        )

    async def startup(self) -> None:
        await create_tables(self.engine)
        logger.info("SQL storage ready (tables created)")

    async def shutdown(self) -> None:
        await dispose_engine(self.engine)

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning("SQL storage ping failed: %s", e)
            return False

    async def delete_image_cascade(self, image_id: str) -> int:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(
                        delete(ThreadRow).where(ThreadRow.image_id == image_id)
                    )
                    await session.execute(delete(ImageRow).where(ImageRow.id == image_id))
            return result.rowcount
        except SQLAlchemyError as e:
            logger.error("Cascade delete of image %s failed: %s", image_id, e, exc_info=True)
            raise StorageError(context={"image_id": image_id, "operation": "cascade"})
