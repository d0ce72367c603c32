"""
Application factory.

    from crudkit.main import create_app

    widgets = CrudController(Widget, create_schema=WidgetCreate, read_schema=WidgetRead, prefix="/widgets")
    app = create_app(controllers=[widgets])

`create_app` wires the ambient pieces every deployment shares: logging,
request ids, CORS, the exception handlers and the /status routes. Entity
routes come from the controllers passed in.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Iterable

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crudkit.api.v1.crud_controller import CrudController
from crudkit.api.v1.error_handlers import register_exception_handlers
from crudkit.api.v1.status import router as status_router
from crudkit.config import Settings, get_settings
from crudkit.core.logging import RequestIDMiddleware, setup_logging
from crudkit.database.session import create_all, get_engine
from crudkit.utils.logging import get_project_version

logger = logging.getLogger(__name__)


def make_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        if settings.AUTO_CREATE_TABLES:
            await create_all()
            logger.info("app.tables_created")
        logger.info("app.startup", extra={"title": settings.API_TITLE})

        yield

        # Only dispose an engine that was actually created
        if get_engine.cache_info().currsize:
            await get_engine().dispose()
        logger.info("app.shutdown")

    return lifespan


def create_app(settings: Settings | None = None, controllers: Iterable[CrudController] = ()) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.API_TITLE,
        version=get_project_version(),
        lifespan=make_lifespan(settings),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=["*"],
    )
    # Added last so it runs first: the request id is set before CORS and routing
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(status_router)
    for controller in controllers:
        app.include_router(controller.router)
        logger.debug("app.controller_registered", extra={"prefix": controller.router.prefix})

    return app


def run(app: FastAPI | None = None, settings: Settings | None = None) -> None:
    """Serve `app` (or a bare app with only /status) with uvicorn."""
    settings = settings or get_settings()
    app = app or create_app(settings)
    # log_config=None keeps the dictConfig applied by setup_logging
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
