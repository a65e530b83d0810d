"""
todo_authz.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (JWT secret) and refuse to start without one.
- Keep list-endpoint defaults explicit and per endpoint.
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration (prefix `TODO_AUTHZ_`), loaded once at process start.
    """

    model_config = SettingsConfigDict(env_prefix="TODO_AUTHZ_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "todo-authz"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "todo-authz"
    jwt_secret: str = Field(repr=False)
    token_ttl_hours: int = Field(default=24, ge=1)

    # Identity: exactly one channel per deployment.
    identity_channel: Literal["bearer", "gateway"] = "bearer"
    allow_bearer_fallback: bool = False

    # List endpoints. The todo and user lists have different defaults upstream;
    # they stay separate settings rather than one shared value.
    todo_default_per_page: int = Field(default=10, ge=1, le=100)
    todo_default_sort_order: Literal["asc", "desc"] = "desc"
    user_default_per_page: int = Field(default=20, ge=1, le=100)
    user_default_sort_order: Literal["asc", "desc"] = "asc"
    # Page count reported for an empty list (0 or 1).
    empty_total_pages: int = Field(default=0, ge=0, le=1)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./todo_authz.db"

    @field_validator("jwt_secret")
    @classmethod
    def _secret_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("jwt_secret must not be empty")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# A missing or blank TODO_AUTHZ_JWT_SECRET fails `Settings()` and therefore aborts
# startup; it is never handled per request.
