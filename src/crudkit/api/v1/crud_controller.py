"""
Generic CRUD controller.

`CrudController` turns a `BaseService` into an `APIRouter`:

| Verb   | Path    | Service call      | Success status |
| ------ | ------- | ----------------- | -------------- |
| POST   | `/`     | create(entity)    | 201            |
| GET    | `/{id}` | find_by_id(id)    | 200            |
| GET    | `/`     | find_all()        | 200            |
| PUT    | `/{id}` | update(id, entity)| 200            |
| DELETE | `/{id}` | delete(id)        | 204 (403 if the service returned nothing) |

Bodies are validated against `create_schema`; payloads are rendered through
`read_schema` inside the response envelope. Failures are not caught here: the
exceptions raised by the service reach the handlers in error_handlers.py.

Example:
    widgets = CrudController(
        Widget,
        create_schema=WidgetCreate,
        read_schema=WidgetRead,
        prefix="/widgets",
    )
    app.include_router(widgets.router)
"""

# No `from __future__ import annotations` here: FastAPI resolves the endpoint
# annotations below at runtime and they reference per-instance schema classes.

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Iterable, Type, TypeVar

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from crudkit.api.dependencies import provide_service
from crudkit.exceptions.base import OperationNotSupportedError
from crudkit.schemas.envelope import APIResponse
from crudkit.services.base_service import BaseService

E = TypeVar("E")

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    CREATE = "create"
    READ = "read"
    READ_ALL = "read_all"
    UPDATE = "update"
    DELETE = "delete"


class CrudController(Generic[E]):
    """
    Router factory for one entity type.

    Args:
        model: ORM class built from validated request bodies.
        create_schema: Pydantic model for POST/PUT bodies (no `id`).
        read_schema: Pydantic model used to render entities (`from_attributes=True`).
        prefix: Base path, e.g. "/widgets".
        service_provider: FastAPI dependency returning a `BaseService`.
                          Defaults to `provide_service(model)`.
        operations: Enabled operations. Disabled ones stay routed and answer
                    405 through `OperationNotSupportedError`.
        tags: OpenAPI tags. Defaults to the prefix without slashes.
    """

    def __init__(
        self,
        model: Type[E],
        *,
        create_schema: Type[BaseModel],
        read_schema: Type[BaseModel],
        prefix: str,
        service_provider: Callable[..., BaseService] | None = None,
        operations: Iterable[Operation] | None = None,
        tags: list[str] | None = None,
    ):
        self.model = model
        self.create_schema = create_schema
        self.read_schema = read_schema
        self.service_provider = service_provider or provide_service(model)
        self.operations = frozenset(operations) if operations is not None else frozenset(Operation)
        self.router = APIRouter(prefix=prefix, tags=tags or [prefix.strip("/")])
        self._register_routes()

    # -----------------------
    # Conversions
    # -----------------------
    def to_entity(self, payload: BaseModel) -> E:
        """Build a transient entity from a validated body. Any `id` is dropped."""
        return self.model(**payload.model_dump(exclude={"id"}))

    def _render(self, data: Any) -> Any:
        if isinstance(data, list):
            return [self.read_schema.model_validate(item) for item in data]
        return self.read_schema.model_validate(data)

    def respond(self, envelope: APIResponse, status_code: int) -> JSONResponse:
        return JSONResponse(status_code=status_code, content=envelope.map_data(self._render).to_content())

    def ensure_enabled(self, operation: Operation) -> None:
        if operation not in self.operations:
            logger.info(
                "controller.operation_disabled",
                extra={"entity": self.model.__name__, "operation": operation.value},
            )
            raise OperationNotSupportedError(
                f"Operation '{operation.value}' is not supported for {self.model.__name__}"
            )

    def require(self, operation: Operation) -> Callable[[], Awaitable[None]]:
        """
        Route-level dependency guarding `operation`. FastAPI resolves it before
        the body, the path parameters and the service provider, so a disabled
        verb answers 405 even for an invalid body.
        """
        async def _check_operation() -> None:
            self.ensure_enabled(operation)

        return _check_operation

    # -----------------------
    # Routes
    # -----------------------
    def _register_routes(self) -> None:
        create_schema = self.create_schema
        provider = self.service_provider
        entity_name = self.model.__name__
        item_response = APIResponse[self.read_schema]
        list_response = APIResponse[list[self.read_schema]]

        @self.router.post(
            "/",
            status_code=status.HTTP_201_CREATED,
            response_model=item_response,
            dependencies=[Depends(self.require(Operation.CREATE))],
            summary=f"Create {entity_name}",
        )
        async def create(payload: create_schema, service: BaseService = Depends(provider)):
            envelope = await service.create(self.to_entity(payload))
            return self.respond(envelope, status.HTTP_201_CREATED)

        @self.router.get(
            "/{entity_id}",
            response_model=item_response,
            dependencies=[Depends(self.require(Operation.READ))],
            summary=f"Get {entity_name} by id",
        )
        async def get_by_id(entity_id: int, service: BaseService = Depends(provider)):
            envelope = await service.find_by_id(entity_id)
            return self.respond(envelope, status.HTTP_200_OK)

        @self.router.get(
            "/",
            response_model=list_response,
            dependencies=[Depends(self.require(Operation.READ_ALL))],
            summary=f"List {entity_name}",
        )
        async def get_all(service: BaseService = Depends(provider)):
            envelope = await service.find_all()
            return self.respond(envelope, status.HTTP_200_OK)

        @self.router.put(
            "/{entity_id}",
            response_model=item_response,
            dependencies=[Depends(self.require(Operation.UPDATE))],
            summary=f"Update {entity_name}",
        )
        async def update(entity_id: int, payload: create_schema, service: BaseService = Depends(provider)):
            envelope = await service.update(entity_id, self.to_entity(payload))
            return self.respond(envelope, status.HTTP_200_OK)

        @self.router.delete(
            "/{entity_id}",
            status_code=status.HTTP_204_NO_CONTENT,
            response_class=Response,
            dependencies=[Depends(self.require(Operation.DELETE))],
            summary=f"Delete {entity_name}",
        )
        async def delete(entity_id: int, service: BaseService = Depends(provider)):
            envelope = await service.delete(entity_id)
            # The service raises NotFoundError instead of returning None, so the
            # 403 branch is never taken with BaseService.
            if envelope is not None:
                return Response(status_code=status.HTTP_204_NO_CONTENT)
            return Response(status_code=status.HTTP_403_FORBIDDEN)
