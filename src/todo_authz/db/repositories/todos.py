"""
todo_authz.db.repositories.todos

Repository for `Todo` entities.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from todo_authz.db.executor import Page, execute_plan
from todo_authz.db.models import Todo
from todo_authz.query.criteria import QueryPlan


class TodoRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list(self, plan: QueryPlan) -> Page[Todo]:
        # Callers scope the plan to an owner (`build(..., owner_id=...)`).
        return await execute_plan(self._session, Todo, plan)


# --- Module Notes -----------------------------------------------------------
# Single-todo reads and writes belong to the CRUD handlers, not this repository.
