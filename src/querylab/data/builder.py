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
"""Dynamic predicate building from optional filter inputs.

Two styles are supported:

* declarative: a sequence of :class:`FilterCondition` descriptors handed
  to :func:`build_predicate`;
* fluent: a :class:`PredicateBuilder` accumulating predicates with
  ``and_`` / ``or_`` (the counterpart of Querydsl's ``BooleanBuilder``).

In both, an absent value contributes nothing; it is never read as
"equals null".
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from querylab.data.optional import ABSENT, Maybe, Present, Absent, is_maybe
from querylab.data.path import Path
from querylab.data.predicate import MATCH_ALL, Comparison, Operator, Predicate, and_all, negate, or_any
from querylab.kernel.exceptions import InvalidArgumentException

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterCondition:
    """One candidate filter: ``field <operator> value`` when value is present.

    ``value`` must be :class:`Present` or :data:`ABSENT`. For ``BETWEEN`` the
    present value is a ``(low, high)`` pair whose bounds may themselves be
    ``ABSENT``. ``IS_NULL`` / ``IS_NOT_NULL`` ignore ``value``.
    """

    field: str
    operator: Operator
    value: Maybe[Any] = ABSENT

    def __post_init__(self) -> None:
        if not isinstance(self.operator, Operator):
            try:
                object.__setattr__(self, "operator", Operator(self.operator))
            except ValueError:
                raise InvalidArgumentException(
                    f"Unknown operator: {self.operator!r}", argument="operator", value=self.operator
                ) from None
        if self.operator.arity and not is_maybe(self.value):
            raise InvalidArgumentException(
                f"Filter value for '{self.field}' must be Present(...) or ABSENT, got {type(self.value).__name__}",
                argument=self.field,
                value=self.value,
            )

    @classmethod
    def of(cls, field: str, operator: Operator | str, value: Any) -> FilterCondition:
        """Shortcut for a condition whose value is known to be present."""
        return cls(field, operator, value if is_maybe(value) else Present(value))  # type: ignore[arg-type]

    @property
    def is_absent(self) -> bool:
        return self.operator.arity > 0 and isinstance(self.value, Absent)

    def to_predicate(self) -> Predicate | None:
        """The comparison for this condition, or ``None`` when absent."""
        if self.operator.arity == 0:
            return Comparison(self.field, self.operator)
        if self.operator is Operator.BETWEEN:
            return self._between()
        path = Path(self.field)
        return path.compare(self.operator, self.value)

    def _between(self) -> Predicate | None:
        if isinstance(self.value, Absent):
            return None
        bounds = self.value.value
        if not isinstance(bounds, tuple) or len(bounds) != 2:
            raise InvalidArgumentException(
                f"BETWEEN filter on '{self.field}' expects a (low, high) pair",
                argument=self.field,
                value=bounds,
            )
        return Path(self.field).between(*bounds)


def build_predicate(filters: Iterable[FilterCondition]) -> Predicate:
    """AND together every present condition, preserving input order.

    Absent conditions are dropped. When none is present the result is
    :data:`~querylab.data.predicate.MATCH_ALL`.
    """
    conditions = list(filters)
    predicate = and_all(*(condition.to_predicate() for condition in conditions))
    if predicate is MATCH_ALL:
        logger.debug("No filter present among %d condition(s); matching all records", len(conditions))
    return predicate


class PredicateBuilder:
    """Mutable accumulator of predicates.

    Usage::

        builder = PredicateBuilder()
        if username is not None:
            builder.and_(member.username.eq(username))
        builder.and_(member.age.goe(of_nullable(min_age)))  # skipped when absent
        query.where(builder.build())

    A builder is meant to be local to one query construction; share the
    built :class:`Predicate` instead.
    """

    __slots__ = ("_value",)

    def __init__(self, initial: Predicate | None = None) -> None:
        self._value: Predicate | None = initial

    @property
    def value(self) -> Predicate | None:
        """The accumulated predicate, or ``None`` when nothing was added."""
        return self._value

    def has_value(self) -> bool:
        return self._value is not None

    def and_(self, right: Predicate | None) -> PredicateBuilder:
        if right is not None:
            self._value = right if self._value is None else and_all(self._value, right)
        return self

    def or_(self, right: Predicate | None) -> PredicateBuilder:
        if right is not None:
            self._value = right if self._value is None else or_any(self._value, right)
        return self

    def and_not(self, right: Predicate | None) -> PredicateBuilder:
        return self.and_(None if right is None else negate(right))

    def or_not(self, right: Predicate | None) -> PredicateBuilder:
        return self.or_(None if right is None else negate(right))

    def and_any_of(self, *predicates: Predicate | None) -> PredicateBuilder:
        """AND with the OR of *predicates* (``None`` entries skipped)."""
        if any(p is not None for p in predicates):
            self.and_(or_any(*predicates))
        return self

    def or_all_of(self, *predicates: Predicate | None) -> PredicateBuilder:
        """OR with the AND of *predicates* (``None`` entries skipped)."""
        if any(p is not None for p in predicates):
            self.or_(and_all(*predicates))
        return self

    def and_filter(self, condition: FilterCondition) -> PredicateBuilder:
        return self.and_(condition.to_predicate())

    def not_(self) -> PredicateBuilder:
        if self._value is not None:
            self._value = negate(self._value)
        return self

    def build(self) -> Predicate:
        """The accumulated predicate; :data:`MATCH_ALL` when empty."""
        return MATCH_ALL if self._value is None else self._value

    def __repr__(self) -> str:
        return f"PredicateBuilder({self._value})"
