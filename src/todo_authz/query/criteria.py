"""
todo_authz.query.criteria

List-query criteria (QueryCriteriaBuilder).

Responsibilities:
- Validate untrusted list-query parameters (pagination, filters, sorting) per endpoint.
- Resolve sort keys and filter fields through fixed allow-lists only.
- Emit an immutable, deterministic `QueryPlan`; rendering SQL is the executor's job.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from todo_authz.auth.models import Role
from todo_authz.errors import ConfigurationError, ValidationError
from todo_authz.result import Err, Ok, Result

MAX_PER_PAGE = 100
# Largest page whose offset still fits a signed 64-bit integer at any page size.
MAX_PAGE = (2**63 - 1) // MAX_PER_PAGE


class ResourceKind(enum.StrEnum):
    todo = "TODO"
    user = "USER"


class SortDirection(enum.StrEnum):
    asc = "asc"
    desc = "desc"


class PredicateOp(enum.StrEnum):
    eq = "EQ"
    # Case-insensitive substring match; the value is the raw text, never a pattern.
    icontains = "ICONTAINS"


class FilterKind(enum.StrEnum):
    equals = "EQUALS"
    contains = "CONTAINS"
    role = "ROLE"
    choice = "CHOICE"


@dataclass(frozen=True, slots=True)
class Predicate:
    column: str
    op: PredicateOp
    value: Any


@dataclass(frozen=True, slots=True)
class OrderBy:
    column: str
    direction: SortDirection


@dataclass(frozen=True, slots=True)
class QueryPlan:
    """
    Validated list query, combined with AND only.
    """

    where_clauses: tuple[Predicate, ...]
    order_by: OrderBy
    limit: int
    offset: int

    @property
    def params(self) -> tuple[Any, ...]:
        return tuple(p.value for p in self.where_clauses)

    @property
    def page(self) -> int:
        return self.offset // self.limit + 1


class PageSpec(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page: int = Field(default=1, ge=1, le=MAX_PAGE)
    per_page: int = Field(alias="perPage", ge=1, le=MAX_PER_PAGE)

    @property
    def limit(self) -> int:
        return self.per_page

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


class SortSpec(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sort_by: str = Field(alias="sortBy")
    sort_order: SortDirection = Field(alias="sortOrder")


@dataclass(frozen=True, slots=True)
class FilterField:
    param: str
    column: str
    kind: FilterKind
    # CHOICE only: raw value -> predicate value (None means "no predicate").
    choices: Mapping[str, Any] = field(default_factory=dict)
    default: str | None = None


@dataclass(frozen=True, slots=True)
class FilterCriteria:
    predicates: tuple[Predicate, ...]


@dataclass(frozen=True, slots=True)
class ListEndpoint:
    """
    Per-endpoint allow-lists and defaults.

    Defaults differ between endpoints (page size, sort order) and are kept per endpoint.
    """

    kind: ResourceKind
    sort_columns: Mapping[str, str]
    default_sort_by: str
    default_sort_order: SortDirection
    default_per_page: int
    filters: tuple[FilterField, ...] = ()
    owner_column: str | None = None

    def __post_init__(self) -> None:
        if not 1 <= self.default_per_page <= MAX_PER_PAGE:
            raise ConfigurationError(
                f"{self.kind}: default_per_page must be within 1..{MAX_PER_PAGE}"
            )
        if self.default_sort_by not in self.sort_columns:
            raise ConfigurationError(f"{self.kind}: default sort key is not sortable")


def todo_endpoint(
    *, default_per_page: int = 10, default_sort_order: SortDirection = SortDirection.desc
) -> ListEndpoint:
    return ListEndpoint(
        kind=ResourceKind.todo,
        sort_columns=MappingProxyType(
            {
                "createdAt": "created_at",
                "updatedAt": "updated_at",
                "title": "title",
            }
        ),
        default_sort_by="createdAt",
        default_sort_order=default_sort_order,
        default_per_page=default_per_page,
        filters=(
            FilterField(
                param="completedFilter",
                column="completed",
                kind=FilterKind.choice,
                choices=MappingProxyType({"all": None, "completed": True, "incomplete": False}),
                default="all",
            ),
        ),
        owner_column="user_id",
    )


def user_endpoint(
    *, default_per_page: int = 20, default_sort_order: SortDirection = SortDirection.asc
) -> ListEndpoint:
    return ListEndpoint(
        kind=ResourceKind.user,
        sort_columns=MappingProxyType(
            {
                "id": "id",
                "username": "username",
                "firstName": "first_name",
                "firstNameRuby": "first_name_ruby",
                "lastName": "last_name",
                "lastNameRuby": "last_name_ruby",
                "role": "role",
                "createdAt": "created_at",
            }
        ),
        default_sort_by="createdAt",
        default_sort_order=default_sort_order,
        default_per_page=default_per_page,
        filters=(
            FilterField(param="id", column="id", kind=FilterKind.equals),
            FilterField(param="username", column="username", kind=FilterKind.contains),
            FilterField(param="firstName", column="first_name", kind=FilterKind.contains),
            FilterField(param="firstNameRuby", column="first_name_ruby", kind=FilterKind.contains),
            FilterField(param="lastName", column="last_name", kind=FilterKind.contains),
            FilterField(param="lastNameRuby", column="last_name_ruby", kind=FilterKind.contains),
            FilterField(param="role", column="role", kind=FilterKind.role),
        ),
    )


def _present(raw: Mapping[str, str | None], name: str) -> str | None:
    # Absent and empty are the same thing for every list parameter.
    value = raw.get(name)
    if value is None or value == "":
        return None
    return value


def _first_error(e: PydanticValidationError) -> ValidationError:
    err = e.errors()[0]
    loc = err.get("loc") or ("query",)
    return ValidationError(field=str(loc[0]), message=err["msg"])


class QueryCriteriaBuilder:
    def __init__(self, endpoints: Mapping[ResourceKind, ListEndpoint]) -> None:
        self._endpoints = MappingProxyType(dict(endpoints))

    def endpoint(self, resource: ResourceKind) -> ListEndpoint:
        return self._endpoints[resource]

    def build(
        self,
        resource: ResourceKind,
        raw_params: Mapping[str, str | None],
        *,
        owner_id: str | None = None,
    ) -> Result[QueryPlan, ValidationError]:
        endpoint = self._endpoints.get(resource)
        if endpoint is None:
            return Err(ValidationError(field="resource", message=f"Unknown resource: {resource}"))

        page = self.page_spec(endpoint, raw_params)
        if isinstance(page, Err):
            return page
        sort = self.sort_spec(endpoint, raw_params)
        if isinstance(sort, Err):
            return sort
        criteria = self.filter_criteria(endpoint, raw_params, owner_id=owner_id)
        if isinstance(criteria, Err):
            return criteria

        return Ok(
            QueryPlan(
                where_clauses=criteria.value.predicates,
                order_by=OrderBy(
                    column=endpoint.sort_columns[sort.value.sort_by],
                    direction=sort.value.sort_order,
                ),
                limit=page.value.limit,
                offset=page.value.offset,
            )
        )

    def page_spec(
        self, endpoint: ListEndpoint, raw: Mapping[str, str | None]
    ) -> Result[PageSpec, ValidationError]:
        data: dict[str, Any] = {"perPage": endpoint.default_per_page}
        if (page := _present(raw, "page")) is not None:
            data["page"] = page
        if (per_page := _present(raw, "perPage")) is not None:
            data["perPage"] = per_page
        try:
            return Ok(PageSpec.model_validate(data))
        except PydanticValidationError as e:
            return Err(_first_error(e))

    def sort_spec(
        self, endpoint: ListEndpoint, raw: Mapping[str, str | None]
    ) -> Result[SortSpec, ValidationError]:
        sort_by = _present(raw, "sortBy") or endpoint.default_sort_by
        if sort_by not in endpoint.sort_columns:
            return Err(ValidationError(field="sortBy", message=f"Unsupported sort key: {sort_by!r}"))
        try:
            return Ok(
                SortSpec.model_validate(
                    {
                        "sortBy": sort_by,
                        "sortOrder": _present(raw, "sortOrder") or endpoint.default_sort_order,
                    }
                )
            )
        except PydanticValidationError as e:
            return Err(_first_error(e))

    def filter_criteria(
        self,
        endpoint: ListEndpoint,
        raw: Mapping[str, str | None],
        *,
        owner_id: str | None = None,
    ) -> Result[FilterCriteria, ValidationError]:
        predicates: list[Predicate] = []
        if owner_id is not None:
            if endpoint.owner_column is None:
                return Err(ValidationError(field="owner", message="Resource has no owner column"))
            predicates.append(Predicate(endpoint.owner_column, PredicateOp.eq, owner_id))

        # Declaration order, not request order, keeps plans stable for prepared statements.
        for f in endpoint.filters:
            value = _present(raw, f.param) or f.default
            if value is None:
                continue
            predicate = _predicate_for(f, value)
            if isinstance(predicate, Err):
                return predicate
            if predicate.value is not None:
                predicates.append(predicate.value)

        return Ok(FilterCriteria(predicates=tuple(predicates)))


def _predicate_for(f: FilterField, value: str) -> Result[Predicate | None, ValidationError]:
    if f.kind is FilterKind.contains:
        return Ok(Predicate(f.column, PredicateOp.icontains, value))
    if f.kind is FilterKind.equals:
        return Ok(Predicate(f.column, PredicateOp.eq, value))
    if f.kind is FilterKind.role:
        role = Role.parse(value)
        if role is None:
            return Err(ValidationError(field=f.param, message=f"Unknown role: {value!r}"))
        return Ok(Predicate(f.column, PredicateOp.eq, int(role)))

    if value not in f.choices:
        allowed = ", ".join(f.choices)
        return Err(ValidationError(field=f.param, message=f"Expected one of: {allowed}"))
    mapped = f.choices[value]
    if mapped is None:
        return Ok(None)
    return Ok(Predicate(f.column, PredicateOp.eq, mapped))


# --- Module Notes -----------------------------------------------------------
# Column identifiers in a plan always come from the allow-lists above, never from
# request input; request values only ever travel as predicate values.
