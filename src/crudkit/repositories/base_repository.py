"""
Base repository providing the generic persistence operations.

`BaseRepository` is the SQLAlchemy (async) implementation of the
`Repository` protocol: `save`, `find_all`, `find_by_id` and `delete`.
It is a pass-through to the store and adds no business rules; existence and
not-found checks belong to the service layer.

Transactions:
    Repositories only `flush()`. Committing is done by the request-scoped
    session dependency (database/session.py), so one request is one transaction.

Errors:
    Every store call runs inside `db_error_handler`, which rolls back and
    raises `AlreadyExistsError` for unique violations or `DefaultError` for
    any other storage failure.
"""

import time
import logging
from typing import Generic, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from crudkit.database.base import Base
from crudkit.exceptions.mapper import db_error_handler

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository for one model class.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages. It is
                   expected to use the `Entity` mixin (integer `id` key).
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        """
        Args:
            model: The SQLAlchemy model class (e.g. `Widget`, not `Widget()`),
                   used to build queries like `select(self.model)`.
            db: The async database session, usually injected per request.
        """
        self.model = model
        self.db = db

    # =================================================================================================================
    # Write Operations
    # =================================================================================================================

    async def save(self, entity: ModelType) -> ModelType:
        """
        Persist an entity.

        - `entity.id is None`: the entity is inserted and the store assigns its key.
        - `entity.id` set: the entity's state is merged onto the stored row with
          that key and the merged (persistent) instance is returned.

        `flush()` sends the SQL so the key and server defaults are available;
        `refresh()` reloads them onto the returned instance.
        """
        logger.debug(
            "repo.save.start",
            extra={"model": self.model.__name__, "operation": "save", "id": entity.id},
        )
        start = time.perf_counter()

        async with db_error_handler(self.db, self.model.__name__):
            if entity.id is None:
                self.db.add(entity)
                stored = entity
            else:
                stored = await self.db.merge(entity)
            await self.db.flush()
            await self.db.refresh(stored)

        logger.info(
            "repo.save.success",
            extra={
                "model": self.model.__name__,
                "operation": "save",
                "id": stored.id,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return stored

    async def delete(self, entity: ModelType) -> None:
        """
        Delete a persistent entity. The instance keeps its last loaded state
        (sessions use expire_on_commit=False), so callers can still return it.
        """
        async with db_error_handler(self.db, self.model.__name__):
            await self.db.delete(entity)
            await self.db.flush()

        logger.info(
            "repo.delete.success",
            extra={"model": self.model.__name__, "operation": "delete", "id": entity.id},
        )

    # =================================================================================================================
    # Read Operations
    # =================================================================================================================

    async def find_by_id(self, entity_id: int) -> ModelType | None:
        """
        Get an entity by its key.

        Returns:
            The entity if found, otherwise None (0 or 1 rows: the filter is on the primary key).
        """
        async with db_error_handler(self.db, self.model.__name__):
            result = await self.db.execute(
                select(self.model).where(self.model.id == entity_id)
            )
            entity = result.scalar_one_or_none()

        logger.debug(
            "repo.find_by_id",
            extra={"model": self.model.__name__, "id": entity_id, "found": entity is not None},
        )
        return entity

    async def find_all(self) -> list[ModelType]:
        """
        Get every stored entity, ordered by key.

        Returns:
            A list of model instances (empty if none found).
        """
        async with db_error_handler(self.db, self.model.__name__):
            result = await self.db.execute(select(self.model).order_by(self.model.id))
            entities = list(result.scalars().all())

        logger.debug(
            "repo.find_all",
            extra={"model": self.model.__name__, "count": len(entities)},
        )
        return entities
