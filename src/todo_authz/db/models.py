"""
todo_authz.db.models

Persistence schema for users and todos.

Responsibilities:
- Define the `users` and `todos` tables read by the list/read endpoints.
- Carry the soft-delete flag every query filters on.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from todo_authz.auth.models import Role
from todo_authz.db.base import Base


def _utcnow() -> datetime:
    # Naive UTC timestamps.
    return datetime.utcnow()


def _new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    first_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    first_name_ruby: Mapped[str | None] = mapped_column(String(50), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    last_name_ruby: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Stored role code (see auth.models.Role); privilege comparisons go through the rank table.
    role: Mapped[int] = mapped_column(Integer, nullable=False, default=int(Role.user))

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)
    deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class Todo(Base):
    __tablename__ = "todos"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(32), nullable=False)
    descriptions: Mapped[str | None] = mapped_column(String(128), nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)
    deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


# --- Module Notes -----------------------------------------------------------
# Column names here are the storage identifiers referenced by the sort/filter
# allow-lists in `query.criteria`; renaming one means updating both.
