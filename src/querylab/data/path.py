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
"""Field paths: a hand-written metamodel for building predicates and orders.

Declare the paths of an entity once and reuse them::

    class QMember:
        username = Path("username")
        age = Path("age")
        team_name = Path("team").get("name")

    QMember.username.eq("member1") & QMember.age.between(10, 30)

Every value-taking method also accepts :class:`~querylab.data.optional.Present`
or :data:`~querylab.data.optional.ABSENT`. An absent value yields ``None``
(no condition), which :func:`~querylab.data.predicate.and_all`, ``Query.where``
and :class:`~querylab.data.builder.PredicateBuilder` skip::

    query.where(QMember.username.eq(of_nullable(username)), QMember.age.goe(of_nullable(min_age)))
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from querylab.data.optional import Present, Absent
from querylab.data.pageable import Order
from querylab.data.predicate import Comparison, Operator, Predicate


class Path:
    """Reference to a (possibly dotted) record field."""

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def get(self, child: str) -> Path:
        """Navigate to a field of the related record: ``Path("team").get("name")``."""
        return Path(f"{self._name}.{child}")

    def __truediv__(self, child: str) -> Path:
        return self.get(child)

    # ------------------------------------------------------------------
    # Comparisons
    # ------------------------------------------------------------------

    def compare(self, operator: Operator, value: Any) -> Predicate | None:
        """Comparison against *value*; ``None`` when *value* is absent."""
        if isinstance(value, Absent):
            return None
        if isinstance(value, Present):
            value = value.value
        return Comparison(self._name, operator, (value,))

    def eq(self, value: Any) -> Predicate | None:
        return self.compare(Operator.EQ, value)

    def ne(self, value: Any) -> Predicate | None:
        return self.compare(Operator.NE, value)

    def gt(self, value: Any) -> Predicate | None:
        return self.compare(Operator.GT, value)

    def goe(self, value: Any) -> Predicate | None:
        """Greater than or equal."""
        return self.compare(Operator.GOE, value)

    def lt(self, value: Any) -> Predicate | None:
        return self.compare(Operator.LT, value)

    def loe(self, value: Any) -> Predicate | None:
        """Less than or equal."""
        return self.compare(Operator.LOE, value)

    def between(self, low: Any, high: Any) -> Predicate | None:
        """Inclusive range; an absent bound leaves that side open."""
        if isinstance(low, Present):
            low = low.value
        if isinstance(high, Present):
            high = high.value
        low_absent, high_absent = isinstance(low, Absent), isinstance(high, Absent)
        if low_absent and high_absent:
            return None
        if high_absent:
            return Comparison(self._name, Operator.GOE, (low,))
        if low_absent:
            return Comparison(self._name, Operator.LOE, (high,))
        return Comparison(self._name, Operator.BETWEEN, (low, high))

    def in_(self, values: Iterable[Any] | Present[Iterable[Any]] | Absent) -> Predicate | None:
        return self.compare(Operator.IN, values)

    def not_in(self, values: Iterable[Any] | Present[Iterable[Any]] | Absent) -> Predicate | None:
        return self.compare(Operator.NOT_IN, values)

    def like(self, pattern: Any) -> Predicate | None:
        """SQL LIKE with ``%`` and ``_`` wildcards."""
        return self.compare(Operator.LIKE, pattern)

    def contains(self, value: Any) -> Predicate | None:
        return self.compare(Operator.CONTAINS, value)

    def starts_with(self, prefix: Any) -> Predicate | None:
        return self.compare(Operator.STARTS_WITH, prefix)

    def is_null(self) -> Predicate:
        return Comparison(self._name, Operator.IS_NULL)

    def is_not_null(self) -> Predicate:
        return Comparison(self._name, Operator.IS_NOT_NULL)

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def asc(self) -> Order:
        return Order.asc(self._name)

    def desc(self) -> Order:
        return Order.desc(self._name)

    def __repr__(self) -> str:
        return f"Path({self._name!r})"
