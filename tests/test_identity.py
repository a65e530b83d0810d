"""
tests.test_identity

Identity resolution through the bearer and gateway channels.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from todo_authz.auth.identity import IdentityChannel, IdentityResolver, identity_headers
from todo_authz.auth.models import Principal, Role
from todo_authz.auth.tokens import TokenService
from todo_authz.errors import AuthErrorKind
from todo_authz.result import Err, Ok


@pytest.fixture
def bearer(tokens: TokenService) -> IdentityResolver:
    return IdentityResolver(tokens=tokens, channel=IdentityChannel.bearer)


@pytest.fixture
def gateway(tokens: TokenService) -> IdentityResolver:
    return IdentityResolver(tokens=tokens, channel=IdentityChannel.gateway)


def _assert_unauthenticated(result: object) -> None:
    assert isinstance(result, Err)
    assert result.error.kind is AuthErrorKind.unauthenticated


def test_bearer_channel_resolves_valid_token(
    bearer: IdentityResolver, tokens: TokenService, alice: Principal
) -> None:
    result = bearer.resolve({"authorization": f"Bearer {tokens.generate_token(alice)}"})

    assert isinstance(result, Ok)
    assert result.value == alice


def test_bearer_channel_header_names_are_case_insensitive(
    bearer: IdentityResolver, tokens: TokenService, alice: Principal
) -> None:
    result = bearer.resolve({"Authorization": f"Bearer {tokens.generate_token(alice)}"})

    assert isinstance(result, Ok)


@pytest.mark.parametrize("value", [None, "", "Bearer", "bearer abc", "Basic abc"])
def test_bearer_channel_without_usable_header(bearer: IdentityResolver, value: str | None) -> None:
    headers = {} if value is None else {"authorization": value}

    _assert_unauthenticated(bearer.resolve(headers))


def test_bearer_channel_folds_expired_into_unauthenticated(
    bearer: IdentityResolver, tokens: TokenService, alice: Principal
) -> None:
    token = tokens.generate_token(alice, issued_at=datetime.now(tz=UTC) - timedelta(hours=25))

    result = bearer.resolve({"authorization": f"Bearer {token}"})

    _assert_unauthenticated(result)
    assert result.error.detail == "Token expired"


def test_bearer_channel_rejects_identity_headers(
    bearer: IdentityResolver, tokens: TokenService, alice: Principal
) -> None:
    headers = {"authorization": f"Bearer {tokens.generate_token(alice)}", "x-user-id": "admin-1"}

    _assert_unauthenticated(bearer.resolve(headers))


def test_bearer_channel_does_not_trust_identity_headers_alone(bearer: IdentityResolver) -> None:
    _assert_unauthenticated(bearer.resolve({"x-user-id": "admin-1", "x-user-role": "1"}))


def test_gateway_channel_trusts_identity_headers(gateway: IdentityResolver) -> None:
    result = gateway.resolve({"X-User-Id": "m1", "X-User-Role": "2", "X-User-Name": "mia"})

    assert isinstance(result, Ok)
    assert result.value == Principal(id="m1", username="mia", role=Role.manager)


def test_gateway_channel_username_defaults_to_empty(gateway: IdentityResolver) -> None:
    result = gateway.resolve({"x-user-id": "u1", "x-user-role": "4"})

    assert isinstance(result, Ok)
    assert result.value.username == ""


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"x-user-id": "u1"},
        {"x-user-role": "4"},
        {"x-user-id": "", "x-user-role": "4"},
        {"x-user-id": "u1", "x-user-role": "abc"},
        {"x-user-id": "u1", "x-user-role": "3"},
        {"x-user-id": "u1", "x-user-role": ""},
        {"x-user-id": "u1", "x-user-role": " 4 "},
        {"x-user-id": "u1", "x-user-role": "+4"},
        {"x-user-id": "u1", "x-user-role": "\u0664"},
    ],
)
def test_gateway_channel_rejects_incomplete_headers(
    gateway: IdentityResolver, headers: dict[str, str]
) -> None:
    _assert_unauthenticated(gateway.resolve(headers))


def test_gateway_channel_ignores_bearer_without_fallback(
    gateway: IdentityResolver, tokens: TokenService, alice: Principal
) -> None:
    _assert_unauthenticated(gateway.resolve({"authorization": f"Bearer {tokens.generate_token(alice)}"}))


def test_gateway_channel_falls_back_to_bearer_only_when_flagged(
    tokens: TokenService, alice: Principal
) -> None:
    resolver = IdentityResolver(
        tokens=tokens, channel=IdentityChannel.gateway, allow_bearer_fallback=True
    )

    result = resolver.resolve({"authorization": f"Bearer {tokens.generate_token(alice)}"})

    assert isinstance(result, Ok)
    assert result.value == alice


def test_gateway_headers_win_over_forwarded_bearer(tokens: TokenService, alice: Principal) -> None:
    resolver = IdentityResolver(
        tokens=tokens, channel=IdentityChannel.gateway, allow_bearer_fallback=True
    )
    headers = {
        "authorization": f"Bearer {tokens.generate_token(alice)}",
        "x-user-id": "u1",
        "x-user-role": "4",
    }

    result = resolver.resolve(headers)

    assert isinstance(result, Ok)
    assert result.value.id == "u1"


def test_identity_headers_feed_the_gateway_channel(gateway: IdentityResolver) -> None:
    principal = Principal(id="a1", username="root", role=Role.admin)

    result = gateway.resolve(identity_headers(principal))

    assert isinstance(result, Ok)
    assert result.value == principal
