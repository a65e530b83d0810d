"""
todo_authz.auth.identity

Caller identity resolution (IdentityResolver).

Responsibilities:
- Turn inbound request headers into a `Principal` through exactly one configured channel:
  - gateway: trust `x-user-id` / `x-user-role` injected by an upstream component
  - bearer: verify `Authorization: Bearer <token>` in-process
- Produce the gateway header set for a verified principal (what the upstream injects).
"""

from __future__ import annotations

import enum
from collections.abc import Mapping

from todo_authz.auth.models import Principal, Role
from todo_authz.auth.tokens import TokenService, extract_token_from_header
from todo_authz.errors import AuthError
from todo_authz.result import Err, Ok, Result

AUTHORIZATION_HEADER = "authorization"
USER_ID_HEADER = "x-user-id"
USER_ROLE_HEADER = "x-user-role"
USER_NAME_HEADER = "x-user-name"

GATEWAY_HEADERS = (USER_ID_HEADER, USER_ROLE_HEADER)


class IdentityChannel(enum.StrEnum):
    gateway = "gateway"
    bearer = "bearer"


class IdentityResolver:
    """
    Resolves a `Principal` from request headers.

    Channel selection is fixed per deployment. A gateway deployment only consults the
    bearer token when `allow_bearer_fallback` is set and no identity headers were sent.
    A bearer deployment rejects requests that also carry identity headers.
    """

    def __init__(
        self,
        *,
        tokens: TokenService,
        channel: IdentityChannel = IdentityChannel.bearer,
        allow_bearer_fallback: bool = False,
    ) -> None:
        self._tokens = tokens
        self._channel = channel
        self._allow_bearer_fallback = allow_bearer_fallback

    @property
    def channel(self) -> IdentityChannel:
        return self._channel

    def resolve(self, headers: Mapping[str, str]) -> Result[Principal, AuthError]:
        normalized = {k.lower(): v for k, v in headers.items()}
        has_gateway = any(name in normalized for name in GATEWAY_HEADERS)

        if self._channel is IdentityChannel.bearer:
            if has_gateway:
                return Err(AuthError.unauthenticated("Identity headers are not accepted"))
            return self._from_bearer(normalized)

        if not has_gateway and self._allow_bearer_fallback and AUTHORIZATION_HEADER in normalized:
            return self._from_bearer(normalized)
        return _from_gateway(normalized)

    def _from_bearer(self, headers: Mapping[str, str]) -> Result[Principal, AuthError]:
        token = extract_token_from_header(headers.get(AUTHORIZATION_HEADER))
        if token is None:
            return Err(AuthError.unauthenticated("Missing bearer token"))

        verified = self._tokens.verify_token(token)
        if isinstance(verified, Err):
            return Err(AuthError.unauthenticated(verified.error.detail))
        return verified


def _from_gateway(headers: Mapping[str, str]) -> Result[Principal, AuthError]:
    # Claims were verified upstream; only presence and shape are checked here.
    subject = headers.get(USER_ID_HEADER)
    role_raw = headers.get(USER_ROLE_HEADER)
    if not subject or role_raw is None:
        return Err(AuthError.unauthenticated())

    role = Role.parse(role_raw)
    if role is None:
        return Err(AuthError.unauthenticated("Invalid role header"))

    return Ok(Principal(id=subject, username=headers.get(USER_NAME_HEADER, ""), role=role))


def identity_headers(principal: Principal) -> dict[str, str]:
    """
    Headers an upstream gateway forwards after verifying the caller's token.
    """

    return {
        USER_ID_HEADER: principal.id,
        USER_ROLE_HEADER: str(int(principal.role)),
        USER_NAME_HEADER: principal.username,
    }


# --- Module Notes -----------------------------------------------------------
# Who may set x-user-* headers is decided by network topology or the upstream proxy;
# nothing in this module can tell a forged header from a forwarded one.
