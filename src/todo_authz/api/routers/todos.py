"""
todo_authz.api.routers.todos

Todo list endpoints.

Responsibilities:
- List the caller's own todos.
- List another user's todos when the permission evaluator allows it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_404_NOT_FOUND

from todo_authz.api.auth import build_plan, ensure_allowed, get_principal
from todo_authz.api.deps import app_context, db_session
from todo_authz.api.routers.users import pagination_payload
from todo_authz.auth.models import Principal, ResourceRef
from todo_authz.auth.permissions import Operation
from todo_authz.context import AppContext
from todo_authz.db.models import Todo
from todo_authz.db.repositories.todos import TodoRepo
from todo_authz.db.repositories.users import UserRepo
from todo_authz.query.criteria import ResourceKind
from todo_authz.query.pagination import PaginationInfo

router = APIRouter(prefix="/v1/users", tags=["todos"])


class TodoResponse(BaseModel):
    id: str
    title: str
    descriptions: str | None
    completed: bool
    userId: str
    createdAt: datetime
    updatedAt: datetime

    @classmethod
    def from_model(cls, todo: Todo) -> TodoResponse:
        return cls(
            id=todo.id,
            title=todo.title,
            descriptions=todo.descriptions,
            completed=todo.completed,
            userId=todo.user_id,
            createdAt=todo.created_at,
            updatedAt=todo.updated_at,
        )


async def _list_for_owner(
    ctx: AppContext, session: AsyncSession, request: Request, owner_id: str
) -> dict[str, Any]:
    plan = build_plan(ctx, ResourceKind.todo, request.query_params, owner_id=owner_id)
    page = await TodoRepo(session).list(plan)
    info = PaginationInfo.for_plan(plan, page.total, empty=ctx.empty_total)
    return {
        "data": [TodoResponse.from_model(t).model_dump(mode="json") for t in page.rows],
        "pagination": pagination_payload(info),
    }


# Registered before `/{user_id}/todos` so "me" is not taken as a user id.
@router.get("/me/todos")
async def list_my_todos(
    request: Request,
    principal: Principal = Depends(get_principal),
    ctx: AppContext = Depends(app_context),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    return await _list_for_owner(ctx, session, request, principal.id)


@router.get("/{user_id}/todos")
async def list_user_todos(
    user_id: str,
    request: Request,
    principal: Principal = Depends(get_principal),
    ctx: AppContext = Depends(app_context),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    ensure_allowed(principal, ResourceRef(owner_id=user_id, id=user_id), Operation.read)

    if await UserRepo(session).get(user_id) is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="User not found")
    return await _list_for_owner(ctx, session, request, user_id)
