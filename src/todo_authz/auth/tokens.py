"""
todo_authz.auth.tokens

JWT issuing and verification (TokenService).

Responsibilities:
- Issue HMAC-signed identity tokens carrying only subject id, username, and role.
- Verify tokens into a `Principal`, returning typed errors instead of raising.
- Extract the raw token from an `Authorization: Bearer <token>` header.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import PyJWTError

from todo_authz.auth.models import Principal, Role
from todo_authz.errors import AuthError, ConfigurationError
from todo_authz.observability.logging import get_logger
from todo_authz.result import Err, Ok, Result

log = get_logger(__name__)

BEARER_PREFIX = "Bearer "
DEFAULT_TTL = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class JwtConfig:
    # Algorithm and issuer are enforced during decoding.
    alg: str
    issuer: str
    secret: str


class TokenService:
    def __init__(
        self,
        cfg: JwtConfig,
        *,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not cfg.secret or not cfg.secret.strip():
            raise ConfigurationError("JWT signing secret must be set")
        self._cfg = cfg
        self._ttl = ttl
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def generate_token(self, principal: Principal, *, issued_at: datetime | None = None) -> str:
        now = issued_at or self._clock()
        # Identity claims only; nothing else about the user ever goes into the payload.
        payload: dict[str, Any] = {
            "iss": self._cfg.issuer,
            "sub": principal.id,
            "username": principal.username,
            "role": int(principal.role),
            "iat": int(now.timestamp()),
            "exp": int((now + self._ttl).timestamp()),
        }
        return jwt.encode(payload, self._cfg.secret, algorithm=self._cfg.alg)

    def verify_token(self, token: str) -> Result[Principal, AuthError]:
        if not isinstance(token, str) or not token:
            return Err(AuthError.invalid("Malformed token"))

        try:
            payload = jwt.decode(
                token,
                self._cfg.secret,
                algorithms=[self._cfg.alg],
                issuer=self._cfg.issuer,
                # Expiry is checked below: a token is still valid at exactly `exp`.
                options={"require": ["exp", "iat", "iss", "sub"], "verify_exp": False},
            )
        except PyJWTError as e:
            log.info("token_rejected", reason="invalid", error=type(e).__name__)
            return Err(AuthError.invalid(f"Invalid token: {e}"))
        except ValueError as e:
            # Text that cannot be UTF-8 encoded (lone surrogates) never reaches PyJWT's parser.
            log.info("token_rejected", reason="invalid", error=type(e).__name__)
            return Err(AuthError.invalid("Malformed token"))

        expires_at = payload["exp"]
        if not isinstance(expires_at, int | float) or isinstance(expires_at, bool):
            return Err(AuthError.invalid("Invalid token expiry"))
        if self._clock().timestamp() > expires_at:
            log.info("token_rejected", reason="expired")
            return Err(AuthError.expired())

        return _principal_from_claims(payload)


def _principal_from_claims(payload: dict[str, Any]) -> Result[Principal, AuthError]:
    subject = payload.get("sub")
    username = payload.get("username")
    role_code = payload.get("role")

    if not isinstance(subject, str) or not subject:
        return Err(AuthError.invalid("Invalid token subject"))
    if not isinstance(username, str):
        return Err(AuthError.invalid("Invalid token username"))
    # bool is an int subclass; a `true` role claim is not a role code.
    if not isinstance(role_code, int) or isinstance(role_code, bool):
        return Err(AuthError.invalid("Invalid token role"))
    role = Role.from_code(role_code)
    if role is None:
        return Err(AuthError.invalid("Invalid token role"))

    return Ok(Principal(id=subject, username=username, role=role))


def extract_token_from_header(header: str | None) -> str | None:
    """
    Return the token following the exact, case-sensitive `Bearer ` prefix.

    Only the single delimiter space is consumed; any further whitespace is kept
    verbatim in the returned token.
    """

    if not header or not header.startswith(BEARER_PREFIX):
        return None
    token = header[len(BEARER_PREFIX) :]
    return token or None


# --- Module Notes -----------------------------------------------------------
# The signing secret is read once at startup (see `todo_authz.context.build_context`)
# and never rotated at runtime.
