"""
tests.conftest

Shared fixtures.

Responsibilities:
- Build test settings (file-backed SQLite per test, fixed signing secret).
- Provide a token service bound to those settings.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta
from pathlib import Path
from typing import Any

import pytest

from todo_authz.auth.models import Principal, Role
from todo_authz.auth.tokens import JwtConfig, TokenService
from todo_authz.settings import Settings

TEST_SECRET = "test-secret-0123456789abcdef0123456789"


def make_settings(tmp_path: Path, **overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "env": "test",
        "jwt_secret": TEST_SECRET,
        "database_url": f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings_factory(tmp_path: Path) -> Callable[..., Settings]:
    def factory(**overrides: Any) -> Settings:
        return make_settings(tmp_path, **overrides)

    return factory


@pytest.fixture
def settings(settings_factory: Callable[..., Settings]) -> Settings:
    return settings_factory()


@pytest.fixture
def jwt_cfg(settings: Settings) -> JwtConfig:
    return JwtConfig(alg=settings.jwt_alg, issuer=settings.jwt_issuer, secret=settings.jwt_secret)


@pytest.fixture
def tokens(jwt_cfg: JwtConfig) -> TokenService:
    return TokenService(jwt_cfg, ttl=timedelta(hours=24))


@pytest.fixture
def alice() -> Principal:
    return Principal(id="u1", username="alice", role=Role.user)


# --- Module Notes -----------------------------------------------------------
# DB-backed tests get their own SQLite file under tmp_path; nothing is shared between tests.
