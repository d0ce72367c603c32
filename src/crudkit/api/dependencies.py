"""
API dependencies.

Builds request-scoped services: one database session per request, one
repository and one service bound to it.
"""

from typing import Callable, Type

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from crudkit.database.session import get_async_session
from crudkit.repositories.base_repository import BaseRepository
from crudkit.services.base_service import BaseService


def provide_service(
    model: Type,
    service_cls: Type[BaseService] = BaseService,
) -> Callable[..., BaseService]:
    """
    Return a FastAPI dependency that builds `service_cls` for `model`.

    Usage:
        get_widget_service = provide_service(Widget)

        @router.get("/")
        async def list_widgets(service: BaseService = Depends(get_widget_service)):
            ...
    """

    def _get_service(db: AsyncSession = Depends(get_async_session)) -> BaseService:
        return service_cls(BaseRepository(model, db))

    _get_service.__name__ = f"get_{model.__name__.lower()}_service"
    return _get_service
