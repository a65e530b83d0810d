"""
todo_authz.db.executor

Repository executor for `QueryPlan`s.

Responsibilities:
- Render a plan into SQLAlchemy Core statements with bound parameters only.
- Return one page of rows plus the unpaged total.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from todo_authz.db.base import Base
from todo_authz.query.criteria import PredicateOp, QueryPlan, SortDirection

M = TypeVar("M", bound=Base)


@dataclass(frozen=True, slots=True)
class Page(Generic[M]):
    rows: list[M]
    total: int


def _conditions(model: type[M], plan: QueryPlan) -> list[ColumnElement[bool]]:
    table = model.__table__
    # Soft-deleted rows never show up in list results.
    conditions: list[ColumnElement[bool]] = [table.c.deleted.is_(False)]
    for predicate in plan.where_clauses:
        column = table.c[predicate.column]
        if predicate.op is PredicateOp.icontains:
            conditions.append(column.icontains(predicate.value, autoescape=True))
        else:
            conditions.append(column == predicate.value)
    return conditions


def render(model: type[M], plan: QueryPlan) -> tuple[Select, Select]:
    """
    Build the (page, count) statements for `plan`.
    """

    table = model.__table__
    conditions = _conditions(model, plan)

    sort_column = table.c[plan.order_by.column]
    ordering = sort_column.asc() if plan.order_by.direction is SortDirection.asc else sort_column.desc()

    page_stmt = (
        select(model)
        .where(*conditions)
        # Primary key tiebreak keeps pages stable when sort values repeat.
        .order_by(ordering, table.c.id.asc())
        .limit(plan.limit)
        .offset(plan.offset)
    )
    count_stmt = select(func.count()).select_from(table).where(*conditions)
    return page_stmt, count_stmt


async def execute_plan(session: AsyncSession, model: type[M], plan: QueryPlan) -> Page[M]:
    page_stmt, count_stmt = render(model, plan)
    total = (await session.execute(count_stmt)).scalar_one()
    rows = list((await session.execute(page_stmt)).scalars().all())
    return Page(rows=rows, total=int(total))


# --- Module Notes -----------------------------------------------------------
# This is the only place a plan turns into SQL. Column lookups go through
# `Table.c[...]`, so an identifier that is not a real column fails loudly.
