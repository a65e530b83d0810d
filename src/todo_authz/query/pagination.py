"""
todo_authz.query.pagination

Pagination math for list responses.

Responsibilities:
- Compute the page count for a total, with an explicit policy for empty results.
- Build the pagination metadata returned next to a page of rows.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from todo_authz.query.criteria import QueryPlan


class EmptyTotalPolicy(enum.IntEnum):
    # Page count reported when a list has no rows at all.
    zero = 0
    one = 1


def total_pages(total: int, per_page: int, *, empty: EmptyTotalPolicy = EmptyTotalPolicy.zero) -> int:
    if per_page < 1:
        raise ValueError("per_page must be >= 1")
    if total < 0:
        raise ValueError("total must be >= 0")
    if total == 0:
        return int(empty)
    return -(-total // per_page)


@dataclass(frozen=True, slots=True)
class PaginationInfo:
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int

    @classmethod
    def for_plan(
        cls, plan: QueryPlan, total: int, *, empty: EmptyTotalPolicy = EmptyTotalPolicy.zero
    ) -> PaginationInfo:
        return cls(
            current_page=plan.page,
            total_pages=total_pages(total, plan.limit, empty=empty),
            total_items=total,
            items_per_page=plan.limit,
        )


# --- Module Notes -----------------------------------------------------------
# Which empty-result policy applies is a deployment setting (`Settings.empty_total_pages`).
