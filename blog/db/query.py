"""Fluent query building and execution on top of SQLAlchemy ``select``.

``QueryBuilder`` mirrors the criteria-style builders of classic ORMs: call
``create`` with an entity, chain predicates, joins, ordering and bound
parameters, then ``build`` an immutable :class:`Query`. ``QueryService``
runs a built query against an ``AsyncSession`` and wraps the rows in a
:class:`~blog.db.results.ResultCollection`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, Mapping

from sqlalchemy import Select, and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from blog.db.results import ResultCollection

DEFAULT_MAX_RESULTS = 30

Conjunction = Literal["and", "or"]


@dataclass(frozen=True)
class Query:
    statement: Select
    parameters: Mapping[str, Any] = field(default_factory=dict)


class QueryBuilder:
    """Stateful builder; ``create`` starts a new query and discards the previous one."""

    def __init__(self, default_max_results: int = DEFAULT_MAX_RESULTS) -> None:
        self.default_max_results = default_max_results
        self._entity: type | None = None
        self._reset()

    def _reset(self) -> None:
        self._criteria: list[tuple[Conjunction, ColumnElement[bool]]] = []
        self._joins: list[tuple[Any, bool]] = []
        self._options: list[Any] = []
        self._order_by: list[Any] = []
        self._parameters: dict[str, Any] = {}
        self._max_results: int | None = None

    def create(self, entity: type) -> "QueryBuilder":
        self._entity = entity
        self._reset()
        return self

    def where(self, *criteria: ColumnElement[bool]) -> "QueryBuilder":
        for criterion in criteria:
            self._criteria.append(("and", criterion))
        return self

    and_where = where

    def or_where(self, *criteria: ColumnElement[bool]) -> "QueryBuilder":
        for criterion in criteria:
            self._criteria.append(("or", criterion))
        return self

    def join(self, target: Any) -> "QueryBuilder":
        self._joins.append((target, False))
        return self

    def left_join(self, target: Any) -> "QueryBuilder":
        self._joins.append((target, True))
        return self

    def options(self, *options: Any) -> "QueryBuilder":
        self._options.extend(options)
        return self

    def order_by(self, *clauses: Any) -> "QueryBuilder":
        self._order_by.extend(clauses)
        return self

    def set_parameter(self, name: str, value: Any) -> "QueryBuilder":
        self._parameters[name] = value
        return self

    def set_parameters(self, parameters: Mapping[str, Any]) -> "QueryBuilder":
        self._parameters.update(parameters)
        return self

    def set_max_results(self, max_results: int) -> "QueryBuilder":
        if max_results < 1:
            raise ValueError("max_results must be a positive integer.")
        self._max_results = max_results
        return self

    def build(self) -> Query:
        if self._entity is None:
            raise RuntimeError("QueryBuilder.create() must be called before build().")

        stmt = select(self._entity)
        for target, outer in self._joins:
            stmt = stmt.outerjoin(target) if outer else stmt.join(target)

        condition = self._fold_criteria()
        if condition is not None:
            stmt = stmt.where(condition)
        if self._options:
            stmt = stmt.options(*self._options)
        if self._order_by:
            stmt = stmt.order_by(*self._order_by)
        if self._max_results is not None:
            stmt = stmt.limit(self._max_results)

        return Query(statement=stmt, parameters=MappingProxyType(dict(self._parameters)))

    def _fold_criteria(self) -> ColumnElement[bool] | None:
        # Left fold: each predicate combines with everything added before it.
        condition: ColumnElement[bool] | None = None
        for conjunction, criterion in self._criteria:
            if condition is None:
                condition = criterion
            elif conjunction == "or":
                condition = or_(condition, criterion)
            else:
                condition = and_(condition, criterion)
        return condition


class QueryService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def query(self, query: Query) -> ResultCollection:
        result = await self.session.execute(query.statement, dict(query.parameters) or None)
        return ResultCollection(result.scalars().unique().all())


__all__ = ["DEFAULT_MAX_RESULTS", "Query", "QueryBuilder", "QueryService"]
