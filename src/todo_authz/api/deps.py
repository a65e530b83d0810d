"""
todo_authz.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Expose the immutable `AppContext` built by the app factory.
- Provide request-scoped DB sessions.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from todo_authz.context import AppContext


def app_context(request: Request) -> AppContext:
    # Built once in `todo_authz.api.app.create_app`.
    return request.app.state.context  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Created in the app lifespan (see `create_app`).
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


# --- Module Notes -----------------------------------------------------------
# Handlers never import a global container; everything flows through these dependencies.
