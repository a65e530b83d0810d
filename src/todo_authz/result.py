"""
todo_authz.result

Tagged-union result type shared by every core function.

Responsibilities:
- Represent success (`Ok`) and expected failure (`Err`) without raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E

    @property
    def is_ok(self) -> bool:
        return False


Result = Ok[T] | Err[E]


# --- Module Notes -----------------------------------------------------------
# Callers branch with `isinstance(result, Err)`; there is no unwrap-or-raise helper
# because failures in this core are business outcomes, not exceptions.
