"""
tests.test_criteria

List-query parameter validation and QueryPlan construction.
"""

from __future__ import annotations

import dataclasses

import pytest

from todo_authz.errors import ConfigurationError
from todo_authz.query.criteria import (
    MAX_PAGE,
    ListEndpoint,
    OrderBy,
    Predicate,
    PredicateOp,
    QueryCriteriaBuilder,
    QueryPlan,
    ResourceKind,
    SortDirection,
    todo_endpoint,
    user_endpoint,
)
from todo_authz.result import Err, Ok


@pytest.fixture
def builder() -> QueryCriteriaBuilder:
    return QueryCriteriaBuilder(
        {ResourceKind.todo: todo_endpoint(), ResourceKind.user: user_endpoint()}
    )


def _ok(result: object) -> QueryPlan:
    assert isinstance(result, Ok), result
    return result.value


def _err_field(result: object) -> str:
    assert isinstance(result, Err), result
    return result.error.field


def test_end_to_end_todo_plan(builder: QueryCriteriaBuilder) -> None:
    plan = _ok(
        builder.build(
            ResourceKind.todo,
            {
                "page": "2",
                "perPage": "20",
                "completedFilter": "incomplete",
                "sortBy": "title",
                "sortOrder": "asc",
            },
        )
    )

    assert plan == QueryPlan(
        where_clauses=(Predicate("completed", PredicateOp.eq, False),),
        order_by=OrderBy(column="title", direction=SortDirection.asc),
        limit=20,
        offset=20,
    )
    assert plan.params == (False,)
    assert plan.page == 2


def test_todo_defaults(builder: QueryCriteriaBuilder) -> None:
    plan = _ok(builder.build(ResourceKind.todo, {}))

    assert plan.where_clauses == ()
    assert plan.order_by == OrderBy(column="created_at", direction=SortDirection.desc)
    assert (plan.limit, plan.offset) == (10, 0)


def test_user_defaults_differ_from_todo_defaults(builder: QueryCriteriaBuilder) -> None:
    plan = _ok(builder.build(ResourceKind.user, {}))

    assert plan.order_by == OrderBy(column="created_at", direction=SortDirection.asc)
    assert (plan.limit, plan.offset) == (20, 0)


def test_defaults_are_configurable_per_endpoint() -> None:
    builder = QueryCriteriaBuilder(
        {ResourceKind.todo: todo_endpoint(default_per_page=25, default_sort_order=SortDirection.asc)}
    )

    plan = _ok(builder.build(ResourceKind.todo, {}))

    assert plan.limit == 25
    assert plan.order_by.direction is SortDirection.asc


@pytest.mark.parametrize(
    ("params", "field"),
    [
        ({"page": "0"}, "page"),
        ({"page": "-3"}, "page"),
        ({"page": "abc"}, "page"),
        ({"page": "99999999999999999999"}, "page"),
        ({"perPage": "0"}, "perPage"),
        ({"perPage": "101"}, "perPage"),
        ({"perPage": "ten"}, "perPage"),
        ({"sortBy": "dropTable"}, "sortBy"),
        ({"sortBy": "user_id"}, "sortBy"),
        ({"sortOrder": "ASC"}, "sortOrder"),
        ({"sortOrder": "up"}, "sortOrder"),
        ({"completedFilter": "done"}, "completedFilter"),
    ],
)
def test_todo_rejections(builder: QueryCriteriaBuilder, params: dict[str, str], field: str) -> None:
    assert _err_field(builder.build(ResourceKind.todo, params)) == field


def test_largest_page_offset_fits_sixty_four_bits(builder: QueryCriteriaBuilder) -> None:
    plan = _ok(builder.build(ResourceKind.todo, {"page": str(MAX_PAGE), "perPage": "100"}))

    assert plan.offset <= 2**63 - 1
    assert _err_field(builder.build(ResourceKind.todo, {"page": str(MAX_PAGE + 1)})) == "page"


@pytest.mark.parametrize("per_page", ["1", "100"])
def test_per_page_bounds_are_inclusive(builder: QueryCriteriaBuilder, per_page: str) -> None:
    assert _ok(builder.build(ResourceKind.todo, {"perPage": per_page})).limit == int(per_page)


def test_unknown_user_sort_key_is_rejected_not_passed_through(
    builder: QueryCriteriaBuilder,
) -> None:
    assert _err_field(builder.build(ResourceKind.user, {"sortBy": "dropTable"})) == "sortBy"


def test_storage_column_names_are_not_sort_keys(builder: QueryCriteriaBuilder) -> None:
    assert _err_field(builder.build(ResourceKind.user, {"sortBy": "first_name"})) == "sortBy"


def test_request_sort_names_map_to_storage_columns(builder: QueryCriteriaBuilder) -> None:
    plan = _ok(builder.build(ResourceKind.user, {"sortBy": "lastNameRuby", "sortOrder": "desc"}))

    assert plan.order_by == OrderBy(column="last_name_ruby", direction=SortDirection.desc)


def test_empty_and_missing_params_fall_back_to_defaults(builder: QueryCriteriaBuilder) -> None:
    plan = _ok(
        builder.build(
            ResourceKind.user,
            {"page": "", "perPage": None, "sortBy": "", "username": "", "role": None},
        )
    )

    assert plan == _ok(builder.build(ResourceKind.user, {}))


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("all", ()),
        ("completed", (Predicate("completed", PredicateOp.eq, True),)),
        ("incomplete", (Predicate("completed", PredicateOp.eq, False),)),
    ],
)
def test_completed_filter(builder: QueryCriteriaBuilder, value: str, expected: tuple) -> None:
    plan = _ok(builder.build(ResourceKind.todo, {"completedFilter": value}))

    assert plan.where_clauses == expected


def test_user_filters_follow_declaration_order(builder: QueryCriteriaBuilder) -> None:
    params = {"role": "4", "lastName": "Sato", "username": "ali", "id": "u1"}

    plan = _ok(builder.build(ResourceKind.user, params))
    reversed_plan = _ok(builder.build(ResourceKind.user, dict(reversed(params.items()))))

    assert plan.where_clauses == (
        Predicate("id", PredicateOp.eq, "u1"),
        Predicate("username", PredicateOp.icontains, "ali"),
        Predicate("last_name", PredicateOp.icontains, "Sato"),
        Predicate("role", PredicateOp.eq, 4),
    )
    assert plan == reversed_plan
    assert plan.params == ("u1", "ali", "Sato", 4)


def test_text_filter_values_are_kept_verbatim(builder: QueryCriteriaBuilder) -> None:
    plan = _ok(builder.build(ResourceKind.user, {"firstName": "50%_'; DROP TABLE users;--"}))

    assert plan.where_clauses == (
        Predicate("first_name", PredicateOp.icontains, "50%_'; DROP TABLE users;--"),
    )


@pytest.mark.parametrize("role", ["3", "0", "admin", "1.5", " 4 ", "+4", "-1", "\u0664", "4_0"])
def test_unknown_role_filter_is_rejected(builder: QueryCriteriaBuilder, role: str) -> None:
    assert _err_field(builder.build(ResourceKind.user, {"role": role})) == "role"


def test_unrelated_params_are_ignored(builder: QueryCriteriaBuilder) -> None:
    plan = _ok(builder.build(ResourceKind.todo, {"username": "x", "debug": "1"}))

    assert plan.where_clauses == ()


def test_owner_scope_comes_first(builder: QueryCriteriaBuilder) -> None:
    plan = _ok(builder.build(ResourceKind.todo, {"completedFilter": "completed"}, owner_id="u1"))

    assert plan.where_clauses == (
        Predicate("user_id", PredicateOp.eq, "u1"),
        Predicate("completed", PredicateOp.eq, True),
    )


def test_owner_scope_requires_owner_column(builder: QueryCriteriaBuilder) -> None:
    assert _err_field(builder.build(ResourceKind.user, {}, owner_id="u1")) == "owner"


def test_unregistered_resource_is_rejected() -> None:
    builder = QueryCriteriaBuilder({ResourceKind.todo: todo_endpoint()})

    assert _err_field(builder.build(ResourceKind.user, {})) == "resource"


def test_identical_inputs_build_identical_plans(builder: QueryCriteriaBuilder) -> None:
    params = {"page": "3", "username": "a", "role": "2", "sortBy": "role"}

    assert builder.build(ResourceKind.user, params) == builder.build(ResourceKind.user, dict(params))


def test_plan_is_immutable(builder: QueryCriteriaBuilder) -> None:
    plan = _ok(builder.build(ResourceKind.todo, {}))

    with pytest.raises(dataclasses.FrozenInstanceError):
        plan.limit = 1000  # type: ignore[misc]


@pytest.mark.parametrize("per_page", [0, 101])
def test_out_of_range_endpoint_default_is_a_configuration_error(per_page: int) -> None:
    with pytest.raises(ConfigurationError):
        todo_endpoint(default_per_page=per_page)


def test_default_sort_key_must_be_sortable() -> None:
    base = todo_endpoint()

    with pytest.raises(ConfigurationError):
        ListEndpoint(
            kind=base.kind,
            sort_columns=base.sort_columns,
            default_sort_by="priority",
            default_sort_order=base.default_sort_order,
            default_per_page=base.default_per_page,
        )
