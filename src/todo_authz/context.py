"""
todo_authz.context

Application dependency context.

Responsibilities:
- Build the immutable set of core services once at startup from `Settings`.
- Hand the same instance to every request (via `app.state`, see `api.deps`).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from todo_authz.auth.identity import IdentityChannel, IdentityResolver
from todo_authz.auth.tokens import JwtConfig, TokenService
from todo_authz.query.criteria import (
    QueryCriteriaBuilder,
    ResourceKind,
    SortDirection,
    todo_endpoint,
    user_endpoint,
)
from todo_authz.query.pagination import EmptyTotalPolicy
from todo_authz.settings import Settings


@dataclass(frozen=True, slots=True)
class AppContext:
    settings: Settings
    tokens: TokenService
    identity: IdentityResolver
    criteria: QueryCriteriaBuilder
    empty_total: EmptyTotalPolicy


def build_context(settings: Settings) -> AppContext:
    # Raises ConfigurationError on a blank secret or out-of-range list defaults.
    tokens = TokenService(
        JwtConfig(alg=settings.jwt_alg, issuer=settings.jwt_issuer, secret=settings.jwt_secret),
        ttl=timedelta(hours=settings.token_ttl_hours),
    )
    identity = IdentityResolver(
        tokens=tokens,
        channel=IdentityChannel(settings.identity_channel),
        allow_bearer_fallback=settings.allow_bearer_fallback,
    )
    criteria = QueryCriteriaBuilder(
        {
            ResourceKind.todo: todo_endpoint(
                default_per_page=settings.todo_default_per_page,
                default_sort_order=SortDirection(settings.todo_default_sort_order),
            ),
            ResourceKind.user: user_endpoint(
                default_per_page=settings.user_default_per_page,
                default_sort_order=SortDirection(settings.user_default_sort_order),
            ),
        }
    )
    return AppContext(
        settings=settings,
        tokens=tokens,
        identity=identity,
        criteria=criteria,
        empty_total=EmptyTotalPolicy(settings.empty_total_pages),
    )


# --- Module Notes -----------------------------------------------------------
# There is no module-level instance; handlers receive the context as a dependency.
