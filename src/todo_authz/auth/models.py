"""
todo_authz.auth.models

Auth domain models.

Responsibilities:
- Define the role set with its persisted codes and an explicit privilege rank table.
- Define the authenticated identity type (`Principal`) and the minimal resource shape
  (`ResourceRef`) consumed by permission checks.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from types import MappingProxyType


class Role(enum.IntEnum):
    # Persisted codes (users.role column, token `role` claim, x-user-role header).
    # These are storage values only; never compare them to decide privilege.
    admin = 1
    manager = 2
    user = 4
    guest = 8

    @classmethod
    def from_code(cls, code: int) -> Role | None:
        try:
            return cls(code)
        except ValueError:
            return None

    @classmethod
    def parse(cls, raw: str) -> Role | None:
        """
        Parse a role code sent as text (header or query string).

        Only plain ASCII digits are accepted.
        """

        if not raw.isascii() or not raw.isdigit():
            return None
        return cls.from_code(int(raw))


# Ascending rank = decreasing privilege.
ROLE_RANK: MappingProxyType[Role, int] = MappingProxyType(
    {
        Role.admin: 0,
        Role.manager: 1,
        Role.user: 2,
        Role.guest: 3,
    }
)


def rank(role: Role) -> int:
    return ROLE_RANK[role]


def is_at_least(role: Role, threshold: Role) -> bool:
    """
    True when `role` carries at least the privilege of `threshold`.
    """

    return rank(role) <= rank(threshold)


def is_privileged(role: Role) -> bool:
    # Admin and Manager.
    return is_at_least(role, Role.manager)


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Resolved caller identity for one request.
    """

    id: str
    username: str
    role: Role

    @property
    def is_privileged(self) -> bool:
        return is_privileged(self.role)


@dataclass(frozen=True, slots=True)
class ResourceRef:
    owner_id: str
    id: str = ""


# --- Module Notes -----------------------------------------------------------
# The rank table is decoupled from the persisted codes so storage values can change
# without touching privilege comparisons.
