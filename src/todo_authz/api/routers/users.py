"""
todo_authz.api.routers.users

User read endpoints.

Responsibilities:
- List users (privileged callers only) with validated filters, sorting, and paging.
- Read a single user (privileged callers, or the user themself).
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
from todo_authz.auth.models import Principal, ResourceRef
from todo_authz.auth.permissions import Operation
from todo_authz.context import AppContext
from todo_authz.db.models import User
from todo_authz.db.repositories.users import UserRepo
from todo_authz.query.criteria import ResourceKind
from todo_authz.query.pagination import PaginationInfo

router = APIRouter(prefix="/v1/users", tags=["users"])


class UserResponse(BaseModel):
    id: str
    username: str
    firstName: str | None
    firstNameRuby: str | None
    lastName: str | None
    lastNameRuby: str | None
    role: int
    createdAt: datetime
    updatedAt: datetime

    @classmethod
    def from_model(cls, user: User) -> UserResponse:
        return cls(
            id=user.id,
            username=user.username,
            firstName=user.first_name,
            firstNameRuby=user.first_name_ruby,
            lastName=user.last_name,
            lastNameRuby=user.last_name_ruby,
            role=user.role,
            createdAt=user.created_at,
            updatedAt=user.updated_at,
        )


def pagination_payload(info: PaginationInfo) -> dict[str, int]:
    return {
        "currentPage": info.current_page,
        "totalPages": info.total_pages,
        "totalItems": info.total_items,
        "itemsPerPage": info.items_per_page,
    }


@router.get("")
async def list_users(
    request: Request,
    principal: Principal = Depends(get_principal),
    ctx: AppContext = Depends(app_context),
    session: AsyncSession = Depends(db_session),
) -> dict[str, Any]:
    # Authorization runs before query validation.
    ensure_allowed(principal, None, Operation.list)
    plan = build_plan(ctx, ResourceKind.user, request.query_params)

    page = await UserRepo(session).list(plan)
    info = PaginationInfo.for_plan(plan, page.total, empty=ctx.empty_total)
    return {
        "data": [UserResponse.from_model(u).model_dump(mode="json") for u in page.rows],
        "pagination": pagination_payload(info),
    }


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(db_session),
) -> UserResponse:
    ensure_allowed(principal, ResourceRef(owner_id=user_id, id=user_id), Operation.read)

    user = await UserRepo(session).get(user_id)
    if user is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="User not found")
    return UserResponse.from_model(user)


# --- Module Notes -----------------------------------------------------------
# User create/update/delete handlers live outside this service.
