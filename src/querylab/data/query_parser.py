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
"""Derived query method names, Spring Data style.

Parses names like ``find_by_status_and_role_order_by_name_desc`` into a
:class:`ParsedQuery` that builds a :class:`~querylab.data.predicate.Predicate`
from positional arguments.

Grammar
-------
**Prefixes:** ``find_by``, ``count_by``, ``exists_by``, ``delete_by``

**Connectors:** ``_and_``, ``_or_`` (AND binds tighter than OR)

**Operators (suffix on field name):**
    - *(none)* = equals (default)
    - ``_greater_than`` = ``>``
    - ``_less_than`` = ``<``
    - ``_greater_than_equal`` = ``>=``
    - ``_less_than_equal`` = ``<=``
    - ``_between`` = BETWEEN (takes 2 args)
    - ``_like`` = LIKE
    - ``_containing`` = contains substring
    - ``_starting_with`` = starts with prefix
    - ``_in`` / ``_not_in`` = IN / NOT IN (takes a collection arg)
    - ``_not`` = ``!=``
    - ``_is_null`` / ``_is_not_null`` = IS [NOT] NULL (no arg)

**Ordering suffix:** ``_order_by_{field}_{asc|desc}`` (can chain multiple)

Arguments may be wrapped in :class:`~querylab.data.optional.Present`; an
:data:`~querylab.data.optional.ABSENT` argument drops its condition.

Example::

    parsed = QueryMethodParser().parse("find_by_status_and_role_order_by_name_desc")
    predicate = parsed.to_predicate("active", "admin")
    parsed.sort  # Sort((Order("name", DESC),))
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from querylab.data.pageable import Direction, Order, Sort
from querylab.data.path import Path
from querylab.data.predicate import Operator, Predicate, and_all, or_any
from querylab.kernel.exceptions import InvalidArgumentException

# Operator suffixes ordered longest-first to prevent partial matches.
# E.g., ``_greater_than_equal`` must be checked before ``_greater_than``.
OPERATORS: dict[str, Operator] = {
    "_greater_than_equal": Operator.GOE,
    "_less_than_equal": Operator.LOE,
    "_greater_than": Operator.GT,
    "_less_than": Operator.LT,
    "_is_not_null": Operator.IS_NOT_NULL,
    "_is_null": Operator.IS_NULL,
    "_starting_with": Operator.STARTS_WITH,
    "_containing": Operator.CONTAINS,
    "_between": Operator.BETWEEN,
    "_not_in": Operator.NOT_IN,
    "_not": Operator.NE,
    "_like": Operator.LIKE,
    "_in": Operator.IN,
}

PREFIXES = ("find_by", "count_by", "exists_by", "delete_by")


@dataclass(frozen=True)
class FieldPredicate:
    """A single field predicate parsed from a method name."""

    field_name: str
    operator: Operator = Operator.EQ

    def build(self, args: tuple[Any, ...]) -> Predicate | None:
        path = Path(self.field_name)
        if self.operator is Operator.IS_NULL:
            return path.is_null()
        if self.operator is Operator.IS_NOT_NULL:
            return path.is_not_null()
        if self.operator is Operator.BETWEEN:
            return path.between(*args)
        return path.compare(self.operator, args[0])


@dataclass(frozen=True)
class ParsedQuery:
    """Result of parsing a query method name."""

    prefix: str
    predicates: tuple[FieldPredicate, ...] = ()
    connectors: tuple[str, ...] = ()  # "and" / "or" between predicates
    order_clauses: tuple[Order, ...] = field(default=())

    @property
    def sort(self) -> Sort:
        return Sort(self.order_clauses)

    @property
    def arity(self) -> int:
        """Number of positional arguments :meth:`to_predicate` expects."""
        return sum(p.operator.arity for p in self.predicates)

    def to_predicate(self, *args: Any) -> Predicate:
        """Bind *args* to the parsed conditions, in declaration order."""
        if len(args) != self.arity:
            raise InvalidArgumentException(
                f"'{self.prefix}' query over {[p.field_name for p in self.predicates]} "
                f"expects {self.arity} argument(s), got {len(args)}",
                argument="args",
                value=args,
            )
        groups: list[list[Predicate | None]] = [[]]
        position = 0
        for index, predicate in enumerate(self.predicates):
            if index and self.connectors[index - 1] == "or":
                groups.append([])
            taken = predicate.operator.arity
            groups[-1].append(predicate.build(args[position : position + taken]))
            position += taken
        # A group whose conditions are all absent drops out of the OR.
        present = [group for group in groups if any(part is not None for part in group)]
        return or_any(*(and_all(*group) for group in present))


class QueryMethodParser:
    """Parse method names into structured query descriptions.

    Examples::

        parse("find_by_email")                         -> find where email = ?
        parse("find_by_status_and_role")               -> find where status = ? AND role = ?
        parse("find_by_age_greater_than")              -> find where age > ?
        parse("find_by_name_order_by_created_at_desc") -> find where name = ? ORDER BY created_at DESC
        parse("count_by_active")                       -> count where active = ?
        parse("exists_by_email")                       -> exists where email = ?
    """

    def parse(self, method_name: str) -> ParsedQuery:
        """Parse a method name into a :class:`ParsedQuery`."""
        # 1. Extract prefix
        prefix = next((p for p in PREFIXES if method_name.startswith(p + "_")), None)
        if prefix is None:
            raise InvalidArgumentException(
                f"Method name must start with one of {PREFIXES}: {method_name}",
                argument="method_name",
                value=method_name,
            )
        body = method_name[len(prefix) + 1 :]

        # 2. Split off order_by suffix
        order_clauses: tuple[Order, ...] = ()
        order_match = re.search(r"(?:^|_)order_by_(.+)$", body)
        if order_match:
            order_clauses = self._parse_order(order_match.group(1))
            body = body[: order_match.start()]

        # 3. Split body by _and_ / _or_ connectors and parse each predicate
        predicates, connectors = self._parse_predicates(body)
        if not predicates:
            raise InvalidArgumentException(
                f"Method name declares no condition: {method_name}",
                argument="method_name",
                value=method_name,
            )
        return ParsedQuery(prefix, predicates, connectors, order_clauses)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_order(order_body: str) -> tuple[Order, ...]:
        """Parse ``field_asc_field2_desc`` into orders."""
        clauses: list[Order] = []
        parts = order_body.split("_")
        i = 0
        while i < len(parts):
            field_parts: list[str] = []
            while i < len(parts) and parts[i] not in ("asc", "desc"):
                field_parts.append(parts[i])
                i += 1
            direction = Direction.ASC
            if i < len(parts):
                direction = Direction(parts[i])
                i += 1
            if field_parts:
                clauses.append(Order("_".join(field_parts), direction))
        return tuple(clauses)

    @staticmethod
    def _parse_predicates(body: str) -> tuple[tuple[FieldPredicate, ...], tuple[str, ...]]:
        """Split the predicate body by ``_and_`` / ``_or_`` and parse each segment."""
        if not body:
            return (), ()

        predicates: list[FieldPredicate] = []
        connectors: list[str] = []
        for part in re.split(r"(_and_|_or_)", body):
            if part == "_and_":
                connectors.append("and")
            elif part == "_or_":
                connectors.append("or")
            else:
                predicates.append(QueryMethodParser._parse_single_predicate(part))
        return tuple(predicates), tuple(connectors)

    @staticmethod
    def _parse_single_predicate(segment: str) -> FieldPredicate:
        """Parse a single ``field[_operator]`` segment like ``age_greater_than``."""
        for suffix, op in OPERATORS.items():
            if segment.endswith(suffix) and len(segment) > len(suffix):
                return FieldPredicate(segment[: -len(suffix)], op)
        # No operator suffix means equals.
        return FieldPredicate(segment)
