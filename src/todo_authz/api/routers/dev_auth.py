from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from starlette.status import HTTP_404_NOT_FOUND

from todo_authz.api.deps import app_context
from todo_authz.auth.models import Principal, Role
from todo_authz.context import AppContext

router = APIRouter(prefix="/v1/dev", tags=["dev"])


class DevTokenRequest(BaseModel):
    id: str = Field(min_length=1, max_length=64)
    username: str = Field(default="", max_length=50)
    role: Role = Role.user


class DevTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


@router.post("/token", response_model=DevTokenResponse)
async def mint_dev_token(
    body: DevTokenRequest,
    ctx: AppContext = Depends(app_context),
) -> DevTokenResponse:
    if ctx.settings.env == "prod":
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")

    token = ctx.tokens.generate_token(
        Principal(id=body.id, username=body.username, role=body.role)
    )
    return DevTokenResponse(access_token=token, expires_in=int(ctx.tokens.ttl.total_seconds()))
