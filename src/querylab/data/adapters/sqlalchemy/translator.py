# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Translate predicates and sorts into SQLAlchemy expressions.

Plain field names resolve to mapped columns of the entity. A dotted name
(``team.name``) walks a relationship: many-to-one hops become
``relationship.has(...)`` and one-to-many hops ``relationship.any(...)``,
both rendered as correlated EXISTS subqueries. A null check on a many-to-one
relationship itself tests whether a related row exists.

Null placement in ORDER BY is always explicit, through a leading
``CASE WHEN column IS NULL`` key, so the result does not depend on the
database's default.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import ColumnElement, and_, case, inspect, not_, or_, true
from sqlalchemy.orm import Mapper

from querylab.data.pageable import NullHandling, Order, Sort
from querylab.data.predicate import (
    Comparison,
    Conjunction,
    Disjunction,
    MatchAll,
    Negation,
    Operator,
    Predicate,
)
from querylab.kernel.exceptions import StorageException


class PredicateTranslator:
    """Builds WHERE and ORDER BY clauses for one mapped entity class."""

    def __init__(self, entity: type[Any]) -> None:
        self.entity = entity
        self._mapper: Mapper[Any] = inspect(entity)

    # ------------------------------------------------------------------
    # WHERE
    # ------------------------------------------------------------------

    def where(self, predicate: Predicate) -> ColumnElement[bool] | None:
        """WHERE clause for *predicate*; ``None`` for :data:`MATCH_ALL`."""
        if isinstance(predicate, MatchAll):
            return None
        return self.to_clause(predicate)

    def to_clause(self, predicate: Predicate) -> ColumnElement[bool]:
        if isinstance(predicate, MatchAll):
            return true()
        if isinstance(predicate, Conjunction):
            return and_(*(self.to_clause(part) for part in predicate.parts))
        if isinstance(predicate, Disjunction):
            return or_(*(self.to_clause(part) for part in predicate.parts))
        if isinstance(predicate, Negation):
            return not_(self.to_clause(predicate.inner))
        if isinstance(predicate, Comparison):
            return self._comparison(self._mapper, predicate.field.split("."), predicate)
        raise StorageException(f"Cannot translate predicate of type {type(predicate).__name__}")

    def _comparison(self, mapper: Mapper[Any], path: list[str], predicate: Comparison) -> ColumnElement[bool]:
        head, rest = path[0], path[1:]
        relationship = mapper.relationships.get(head)
        if not rest:
            if relationship is not None and not relationship.uselist and predicate.operator.arity == 0:
                linked = getattr(mapper.class_, head).has()
                return ~linked if predicate.operator is Operator.IS_NULL else linked
            return _apply(self._column(mapper, head, predicate.field), predicate)

        if relationship is None:
            raise StorageException(
                f"'{head}' is not a relationship of {mapper.class_.__name__}",
                context={"entity": mapper.class_.__name__, "field": predicate.field},
            )
        attribute = getattr(mapper.class_, head)
        inner = self._comparison(relationship.mapper, rest, predicate)
        exists = attribute.any(inner) if relationship.uselist else attribute.has(inner)
        if predicate.operator is Operator.IS_NULL and not relationship.uselist:
            # A missing related row reads as a null field.
            return or_(~attribute.has(), exists)
        return exists

    @staticmethod
    def _column(mapper: Mapper[Any], name: str, field: str) -> Any:
        if name not in mapper.column_attrs:
            raise StorageException(
                f"'{name}' is not a mapped column of {mapper.class_.__name__}",
                context={"entity": mapper.class_.__name__, "field": field},
            )
        return getattr(mapper.class_, name)

    # ------------------------------------------------------------------
    # ORDER BY
    # ------------------------------------------------------------------

    def order_by(self, sort: Sort | None) -> list[Any]:
        """ORDER BY keys for *sort*, then the primary key as a tiebreaker."""
        clauses: list[Any] = []
        for order in sort or ():
            clauses.extend(self._order(order))
        clauses.extend(self._mapper.primary_key)
        return clauses

    def _order(self, order: Order) -> list[Any]:
        if "." in order.property:
            raise StorageException(
                f"Sorting by related field '{order.property}' is not supported",
                context={"entity": self._mapper.class_.__name__, "field": order.property},
            )
        column = self._column(self._mapper, order.property, order.property)
        nulls_first = order.null_handling is NullHandling.NULLS_FIRST
        null_key = case((column.is_(None), 0 if nulls_first else 1), else_=1 if nulls_first else 0)
        return [null_key, column.asc() if order.is_ascending else column.desc()]


def _apply(column: Any, predicate: Comparison) -> ColumnElement[bool]:
    op, operands = predicate.operator, predicate.operands
    if op is Operator.EQ:
        return column == operands[0]
    if op is Operator.NE:
        return column != operands[0]
    if op is Operator.GT:
        return column > operands[0]
    if op is Operator.GOE:
        return column >= operands[0]
    if op is Operator.LT:
        return column < operands[0]
    if op is Operator.LOE:
        return column <= operands[0]
    if op is Operator.BETWEEN:
        return column.between(operands[0], operands[1])
    if op is Operator.IN:
        return column.in_(operands[0])
    if op is Operator.NOT_IN:
        return column.not_in(operands[0])
    if op is Operator.LIKE:
        return column.like(operands[0], escape="\\")
    if op is Operator.CONTAINS:
        return column.contains(operands[0], autoescape=True)
    if op is Operator.STARTS_WITH:
        return column.startswith(operands[0], autoescape=True)
    if op is Operator.IS_NULL:
        return column.is_(None)
    if op is Operator.IS_NOT_NULL:
        return column.is_not(None)
    raise StorageException(f"Unknown operator: {op}")
