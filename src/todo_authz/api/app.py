"""
todo_authz.api.app

FastAPI app factory.

Responsibilities:
- Build the immutable `AppContext` once and attach it to the app.
- Register routers/middleware.
- Initialize and dispose shared infrastructure (DB engine/session factory).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from todo_authz import __version__
from todo_authz.api.routers.dev_auth import router as dev_auth_router
from todo_authz.api.routers.health import router as health_router
from todo_authz.api.routers.todos import router as todos_router
from todo_authz.api.routers.users import router as users_router
from todo_authz.context import build_context
from todo_authz.db.init_db import init_db
from todo_authz.db.session import create_engine, create_sessionmaker
from todo_authz.observability.logging import configure_logging, get_logger
from todo_authz.observability.middleware import RequestContextMiddleware
from todo_authz.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    # Fails fast (ConfigurationError) before the app can serve anything.
    context = build_context(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, identity_channel=settings.identity_channel)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience; prod schemas are managed outside this service.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Todo Authorization Service",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(todos_router)
    app.include_router(users_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; authorization and query logic live in the core packages.
