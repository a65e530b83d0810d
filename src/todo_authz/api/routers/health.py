"""
todo_authz.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`): DB reachable and the auth context built, reporting
  which identity channel this deployment accepts.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from todo_authz.api.deps import app_context, db_session
from todo_authz.context import AppContext

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    # Liveness: process is up and serving HTTP.
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(
    session: AsyncSession = Depends(db_session),
    ctx: AppContext = Depends(app_context),
) -> dict[str, str]:
    await session.execute(text("SELECT 1"))
    return {
        "status": "ready",
        "identity_channel": ctx.identity.channel.value,
        "bearer_fallback": "enabled" if ctx.settings.allow_bearer_fallback else "disabled",
    }


# --- Module Notes -----------------------------------------------------------
# Readiness exposes the identity channel so a misrouted deployment (gateway headers sent to a
# bearer-only instance) can be spotted from the probe alone.
