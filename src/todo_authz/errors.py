"""
todo_authz.errors

Error taxonomy for authentication, authorization, and list-query validation.

Responsibilities:
- Define the typed error values returned inside `Err`.
- Define the single startup-only exception (`ConfigurationError`).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass


class AuthErrorKind(enum.StrEnum):
    # Caller-facing kinds; transport mapping (401/403) lives in the API layer.
    unauthenticated = "UNAUTHENTICATED"
    forbidden = "FORBIDDEN"
    # Token-level kinds; IdentityResolver folds both into UNAUTHENTICATED.
    invalid = "INVALID"
    expired = "EXPIRED"


@dataclass(frozen=True, slots=True)
class AuthError:
    kind: AuthErrorKind
    detail: str

    @classmethod
    def unauthenticated(cls, detail: str = "Authentication required") -> AuthError:
        return cls(AuthErrorKind.unauthenticated, detail)

    @classmethod
    def forbidden(cls, detail: str = "Access denied") -> AuthError:
        return cls(AuthErrorKind.forbidden, detail)

    @classmethod
    def invalid(cls, detail: str = "Invalid token") -> AuthError:
        return cls(AuthErrorKind.invalid, detail)

    @classmethod
    def expired(cls, detail: str = "Token expired") -> AuthError:
        return cls(AuthErrorKind.expired, detail)


@dataclass(frozen=True, slots=True)
class ValidationError:
    """
    A list-query parameter outside its allowed range, enum, or allow-list.
    """

    field: str
    message: str


class ConfigurationError(Exception):
    """
    Raised at startup only, e.g. when the signing secret is missing.
    """


# --- Module Notes -----------------------------------------------------------
# `ValidationError` shares its name with pydantic's; modules that use
# both import pydantic's under an alias.
