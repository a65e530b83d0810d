"""
todo_authz.db.repositories.users

Repository for `User` entities.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from todo_authz.db.executor import Page, execute_plan
from todo_authz.db.models import User
from todo_authz.query.criteria import QueryPlan


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: str) -> User | None:
        stmt = select(User).where(User.id == user_id, User.deleted.is_(False))
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def list(self, plan: QueryPlan) -> Page[User]:
        return await execute_plan(self._session, User, plan)
