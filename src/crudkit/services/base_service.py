"""
Generic CRUD orchestration on top of a repository.

`BaseService` adds the only business rules of the scaffolding:

- create:  reject duplicates (value-equal to a stored entity) with AlreadyExistsError
- read:    lookup-or-404 (NotFoundError carrying the requested id)
- update:  the stored key wins over any key present on the incoming entity
- delete:  lookup-or-404, then return the deleted entity's last known state

Every successful call returns an `APIResponse` in the SUCCESS state. Failures
are raised, never returned, and travel unmodified up to the HTTP boundary.

Entity-specific services subclass it and are wired per request by
`provide_service` (api/dependencies.py):

    class WidgetService(BaseService[Widget, int]):
        ...

    get_widget_service = provide_service(Widget, WidgetService)
"""

from __future__ import annotations

import logging
from typing import Generic, TypeVar

from crudkit.exceptions.base import AlreadyExistsError, NotFoundError
from crudkit.models.base import EntityLike
from crudkit.repositories.protocols import Repository
from crudkit.schemas.envelope import APIResponse

E = TypeVar("E", bound=EntityLike)
ID = TypeVar("ID")

logger = logging.getLogger(__name__)


class BaseService(Generic[E, ID]):
    """Create/read/update/delete for one entity type."""

    def __init__(self, repository: Repository[E, ID], entity_name: str | None = None):
        self.repository = repository
        # Only used in log events and messages
        self.entity_name = entity_name or getattr(getattr(repository, "model", None), "__name__", "Entity")

    async def create(self, entity: E) -> APIResponse[E]:
        """
        Persist a new entity unless a value-equal one is already stored.

        Raises:
            AlreadyExistsError: if `check_if_exist(entity)` is true.
        """
        logger.debug("service.create.start", extra={"entity": self.entity_name})

        if await self.check_if_exist(entity):
            logger.info("service.create.duplicate", extra={"entity": self.entity_name})
            raise AlreadyExistsError(f"{self.entity_name} already exists")

        stored = await self.repository.save(entity)
        logger.info("service.create.success", extra={"entity": self.entity_name, "id": stored.id})
        return APIResponse.success(stored)

    async def check_if_exist(self, entity: E) -> bool:
        """
        True if any stored entity holds the same values as `entity`.

        Linear scan over `find_all()`. Not protected against concurrent
        creates; unique constraints on the model are the storage-level guard.
        """
        for stored in await self.repository.find_all():
            if stored.matches(entity):
                return True
        return False

    async def find_by_id(self, entity_id: ID) -> APIResponse[E]:
        """
        Raises:
            NotFoundError: if nothing is stored under `entity_id`.
        """
        logger.debug("service.find_by_id.start", extra={"entity": self.entity_name, "id": entity_id})
        entity = await self._get_or_raise(entity_id, operation="find_by_id")
        logger.debug("service.find_by_id.success", extra={"entity": self.entity_name, "id": entity_id})
        return APIResponse.success(entity)

    async def find_all(self) -> APIResponse[list[E]]:
        """Every stored entity. An empty store is a SUCCESS with an empty list."""
        logger.debug("service.find_all.start", extra={"entity": self.entity_name})
        entities = list(await self.repository.find_all())
        logger.debug("service.find_all.success", extra={"entity": self.entity_name, "count": len(entities)})
        return APIResponse.success(entities)

    async def update(self, entity_id: ID, entity: E) -> APIResponse[E]:
        """
        Overwrite the entity stored under `entity_id` with the incoming values.

        Any key carried by `entity` is replaced by the stored key first, so the
        request body can never move a row to another id.

        Raises:
            NotFoundError: if nothing is stored under `entity_id`.
        """
        logger.debug("service.update.start", extra={"entity": self.entity_name, "id": entity_id})
        existing = await self._get_or_raise(entity_id, operation="update")

        entity.id = existing.id

        stored = await self.repository.save(entity)
        logger.info("service.update.success", extra={"entity": self.entity_name, "id": stored.id})
        return APIResponse.success(stored)

    async def delete(self, entity_id: ID) -> APIResponse[E]:
        """
        Remove the entity stored under `entity_id` and return its last known state.

        Raises:
            NotFoundError: if nothing is stored under `entity_id`.
        """
        logger.debug("service.delete.start", extra={"entity": self.entity_name, "id": entity_id})
        entity = await self._get_or_raise(entity_id, operation="delete")
        await self.repository.delete(entity)
        logger.info("service.delete.success", extra={"entity": self.entity_name, "id": entity_id})
        return APIResponse.success(entity)

    async def _get_or_raise(self, entity_id: ID, *, operation: str) -> E:
        entity = await self.repository.find_by_id(entity_id)
        if entity is None:
            logger.info(
                f"service.{operation}.not_found",
                extra={"entity": self.entity_name, "id": entity_id},
            )
            raise NotFoundError(str(entity_id))
        return entity
