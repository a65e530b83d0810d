"""
todo_authz.auth.permissions

Authorization decisions (PermissionEvaluator).

Responsibilities:
- Decide Allow/Deny for a principal, an optional target resource, and an operation.
- Convert a decision into the shared `Result` shape for callers that gate on it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from todo_authz.auth.models import Principal, ResourceRef, is_privileged
from todo_authz.errors import AuthError
from todo_authz.result import Err, Ok, Result

SELF_ACTION_DENIED = "cannot act on self"
ACCESS_DENIED = "access denied"


class Operation(enum.StrEnum):
    read = "READ"
    list = "LIST"
    update = "UPDATE"
    delete = "DELETE"
    # Destructive admin operations on a user account (e.g. delete-user).
    self_destructive_admin_action = "SELF_DESTRUCTIVE_ADMIN_ACTION"


@dataclass(frozen=True, slots=True)
class Allow:
    @property
    def allowed(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Deny:
    reason: str

    @property
    def allowed(self) -> bool:
        return False


AuthDecision = Allow | Deny


def evaluate(principal: Principal, resource: ResourceRef | None, op: Operation) -> AuthDecision:
    """
    First matching rule wins:
    1. self-destructive admin action on one's own account -> Deny, for any role
    2. privileged role (Admin, Manager) -> Allow
    3. caller owns the resource -> Allow
    4. otherwise -> Deny
    """

    if (
        op is Operation.self_destructive_admin_action
        and resource is not None
        and principal.id == resource.id
    ):
        return Deny(SELF_ACTION_DENIED)

    if is_privileged(principal.role):
        return Allow()

    if resource is not None and principal.id == resource.owner_id:
        return Allow()

    return Deny(ACCESS_DENIED)


def authorize(
    principal: Principal, resource: ResourceRef | None, op: Operation
) -> Result[Principal, AuthError]:
    decision = evaluate(principal, resource, op)
    if isinstance(decision, Deny):
        return Err(AuthError.forbidden(decision.reason))
    return Ok(principal)


# --- Module Notes -----------------------------------------------------------
# Every call is independent; decisions are never cached across requests.
