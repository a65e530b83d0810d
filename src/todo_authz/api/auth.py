"""
todo_authz.api.auth

FastAPI glue between HTTP and the auth/query core.

Responsibilities:
- Resolve the caller (`get_principal`) and map auth failures to 401/403.
- Build list query plans and map validation failures to 400.
"""

from __future__ import annotations

from collections.abc import Mapping

import structlog
from fastapi import Depends, HTTPException, Request
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
)

from todo_authz.api.deps import app_context
from todo_authz.auth.models import Principal, ResourceRef
from todo_authz.auth.permissions import Operation, authorize
from todo_authz.context import AppContext
from todo_authz.errors import AuthError, AuthErrorKind
from todo_authz.observability.logging import get_logger
from todo_authz.query.criteria import QueryPlan, ResourceKind
from todo_authz.result import Err

log = get_logger(__name__)


def _http_error(error: AuthError) -> HTTPException:
    if error.kind is AuthErrorKind.forbidden:
        return HTTPException(status_code=HTTP_403_FORBIDDEN, detail=error.detail)
    return HTTPException(
        status_code=HTTP_401_UNAUTHORIZED,
        detail=error.detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_principal(request: Request, ctx: AppContext = Depends(app_context)) -> Principal:
    resolved = ctx.identity.resolve(request.headers)
    if isinstance(resolved, Err):
        log.info("authentication_failed", channel=ctx.identity.channel, reason=resolved.error.detail)
        raise _http_error(resolved.error)

    principal = resolved.value
    # Async dependency: runs in the request task, so the binding reaches later log lines.
    structlog.contextvars.bind_contextvars(principal_id=principal.id, role=principal.role.name)
    return principal


def ensure_allowed(principal: Principal, resource: ResourceRef | None, op: Operation) -> None:
    allowed = authorize(principal, resource, op)
    if isinstance(allowed, Err):
        log.info("access_denied", op=op, reason=allowed.error.detail)
        raise _http_error(allowed.error)


def build_plan(
    ctx: AppContext,
    resource: ResourceKind,
    params: Mapping[str, str],
    *,
    owner_id: str | None = None,
) -> QueryPlan:
    built = ctx.criteria.build(resource, params, owner_id=owner_id)
    if isinstance(built, Err):
        log.info("query_rejected", resource=resource, field=built.error.field)
        raise HTTPException(
            status_code=HTTP_400_BAD_REQUEST,
            detail={"field": built.error.field, "message": built.error.message},
        )
    return built.value


# --- Module Notes -----------------------------------------------------------
# This is the only module that knows the status codes; the core returns typed results.
