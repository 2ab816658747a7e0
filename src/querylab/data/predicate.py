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
"""Composable predicates as plain data, with an in-memory evaluator.

A predicate is a small immutable tree:

* :class:`Comparison`: one field compared against literal operands
* :class:`Conjunction` / :class:`Disjunction`: flattened AND / OR
* :class:`Negation`: NOT
* :data:`MATCH_ALL`: the empty predicate

Trees combine with ``&``, ``|`` and ``~``. ``None`` operands are ignored by
:meth:`Predicate.and_` / :meth:`Predicate.or_` and by :func:`and_all` /
:func:`or_any`, so optional conditions can be passed straight through::

    spec = and_all(username_eq(cond), Path("age").goe(18))

Evaluation follows SQL three-valued logic: comparing a ``None`` field yields
*unknown*; AND, OR and NOT propagate unknown as SQL does, and a record
matches only when the whole predicate is *true*. A dotted field that passes
through a collection (``members.age``) holds when any element satisfies the
rest of the comparison, and is false for an empty collection. Storage adapters translate
the same tree into their own query language and must agree with
:meth:`Predicate.evaluate`.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, TypeVar

from querylab.data.accessor import is_collection, read_attribute
from querylab.kernel.exceptions import InvalidArgumentException

R = TypeVar("R")


class Operator(str, Enum):
    """Comparison operators a :class:`Comparison` can apply."""

    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GOE = "goe"
    LT = "lt"
    LOE = "loe"
    BETWEEN = "between"
    IN = "in"
    NOT_IN = "not_in"
    LIKE = "like"
    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"

    @property
    def arity(self) -> int:
        """Number of operands the operator takes."""
        if self in (Operator.IS_NULL, Operator.IS_NOT_NULL):
            return 0
        if self is Operator.BETWEEN:
            return 2
        return 1


_SYMBOLS: dict[Operator, str] = {
    Operator.EQ: "=",
    Operator.NE: "<>",
    Operator.GT: ">",
    Operator.GOE: ">=",
    Operator.LT: "<",
    Operator.LOE: "<=",
    Operator.IN: "IN",
    Operator.NOT_IN: "NOT IN",
    Operator.LIKE: "LIKE",
    Operator.CONTAINS: "CONTAINS",
    Operator.STARTS_WITH: "STARTS WITH",
}


# =============================================================================
# Three-valued connectives
# =============================================================================


def _and3(values: Iterable[bool | None]) -> bool | None:
    result: bool | None = True
    for value in values:
        if value is False:
            return False
        if value is None:
            result = None
    return result


def _or3(values: Iterable[bool | None]) -> bool | None:
    result: bool | None = False
    for value in values:
        if value is True:
            return True
        if value is None:
            result = None
    return result


@lru_cache(maxsize=256)
def _like_regex(pattern: str) -> re.Pattern[str]:
    """Compile a SQL LIKE pattern (``%`` / ``_`` wildcards, ``\\`` escape)."""
    out: list[str] = []
    escaped = False
    for ch in pattern:
        if escaped:
            out.append(re.escape(ch))
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == "%":
            out.append(".*")
        elif ch == "_":
            out.append(".")
        else:
            out.append(re.escape(ch))
    return re.compile("".join(out), re.DOTALL)


# =============================================================================
# Predicate tree
# =============================================================================


class Predicate(ABC):
    """Base of every predicate node."""

    __slots__ = ()

    @abstractmethod
    def evaluate(self, record: Any) -> bool | None:
        """Return ``True``, ``False`` or ``None`` (unknown) for *record*."""

    def matches(self, record: Any) -> bool:
        return self.evaluate(record) is True

    def filter(self, records: Iterable[R]) -> list[R]:
        """Return the records this predicate matches, in input order."""
        return [record for record in records if self.matches(record)]

    # ------------------------------------------------------------------
    # Combinators
    # ------------------------------------------------------------------

    def and_(self, other: Predicate | None) -> Predicate:
        return and_all(self, other)

    def or_(self, other: Predicate | None) -> Predicate:
        return or_any(self, other)

    def not_(self) -> Predicate:
        return negate(self)

    def __and__(self, other: Predicate) -> Predicate:
        return and_all(self, other)

    def __or__(self, other: Predicate) -> Predicate:
        return or_any(self, other)

    def __invert__(self) -> Predicate:
        return negate(self)


@dataclass(frozen=True, slots=True)
class MatchAll(Predicate):
    """The empty predicate: every record matches."""

    def evaluate(self, record: Any) -> bool | None:
        return True

    def __str__(self) -> str:
        return "TRUE"


MATCH_ALL = MatchAll()


@dataclass(frozen=True, slots=True)
class Comparison(Predicate):
    """``field <operator> operands``.

    ``IN`` / ``NOT_IN`` take a single operand holding the candidate values;
    ``BETWEEN`` takes ``(low, high)`` (both inclusive); ``IS_NULL`` and
    ``IS_NOT_NULL`` take none. Operands may not be ``None``: compare with
    ``IS_NULL`` instead.
    """

    field: str
    operator: Operator
    operands: tuple[Any, ...] = ()

    def __post_init__(self) -> None:
        if not self.field:
            raise InvalidArgumentException("Comparison field name must not be empty", argument="field")
        if not isinstance(self.operator, Operator):
            object.__setattr__(self, "operator", _coerce_operator(self.operator))
        if len(self.operands) != self.operator.arity:
            raise InvalidArgumentException(
                f"Operator '{self.operator.value}' takes {self.operator.arity} operand(s), "
                f"got {len(self.operands)}",
                argument=self.field,
                value=self.operands,
            )
        if any(operand is None for operand in self.operands):
            raise InvalidArgumentException(
                f"'{self.field}' cannot be compared with None; use is_null() / is_not_null()",
                argument=self.field,
            )
        if self.operator in (Operator.IN, Operator.NOT_IN):
            values = self.operands[0]
            if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
                raise InvalidArgumentException(
                    f"Operator '{self.operator.value}' expects a collection of values",
                    argument=self.field,
                    value=values,
                )
            object.__setattr__(self, "operands", (tuple(values),))
        if self.operator in (Operator.LIKE, Operator.CONTAINS, Operator.STARTS_WITH) and not isinstance(
            self.operands[0], str
        ):
            raise InvalidArgumentException(
                f"Operator '{self.operator.value}' expects a string operand",
                argument=self.field,
                value=self.operands[0],
            )

    def evaluate(self, record: Any) -> bool | None:
        return self._evaluate_along(record, self.field.split("."))

    def _evaluate_along(self, record: Any, parts: list[str]) -> bool | None:
        value = record
        for index, part in enumerate(parts):
            if value is None:
                break
            if index and is_collection(value):
                # To-many hop: true when some related record satisfies the rest, like EXISTS.
                return any(self._evaluate_along(element, parts[index:]) for element in value)
            value = read_attribute(value, part)
        return self._test(value)

    def _test(self, value: Any) -> bool | None:
        op = self.operator
        if op is Operator.IS_NULL:
            return value is None
        if op is Operator.IS_NOT_NULL:
            return value is not None
        if value is None:
            return None
        try:
            return self._compare(op, value)
        except (TypeError, AttributeError) as exc:
            raise InvalidArgumentException(
                f"Cannot apply '{op.value}' to field '{self.field}' of type {type(value).__name__}",
                argument=self.field,
                value=self.operands,
            ) from exc

    def _compare(self, op: Operator, value: Any) -> bool:
        operands = self.operands
        if op is Operator.EQ:
            return bool(value == operands[0])
        if op is Operator.NE:
            return bool(value != operands[0])
        if op is Operator.GT:
            return bool(value > operands[0])
        if op is Operator.GOE:
            return bool(value >= operands[0])
        if op is Operator.LT:
            return bool(value < operands[0])
        if op is Operator.LOE:
            return bool(value <= operands[0])
        if op is Operator.BETWEEN:
            return bool(operands[0] <= value <= operands[1])
        if op is Operator.IN:
            return value in operands[0]
        if op is Operator.NOT_IN:
            return value not in operands[0]
        if op is Operator.LIKE:
            return _like_regex(operands[0]).fullmatch(value) is not None
        if op is Operator.CONTAINS:
            return operands[0] in value
        if op is Operator.STARTS_WITH:
            return bool(value.startswith(operands[0]))
        raise InvalidArgumentException(f"Unknown operator: {op}")

    def __str__(self) -> str:
        op = self.operator
        if op is Operator.IS_NULL:
            return f"{self.field} IS NULL"
        if op is Operator.IS_NOT_NULL:
            return f"{self.field} IS NOT NULL"
        if op is Operator.BETWEEN:
            return f"{self.field} BETWEEN {self.operands[0]!r} AND {self.operands[1]!r}"
        return f"{self.field} {_SYMBOLS[op]} {self.operands[0]!r}"


@dataclass(frozen=True, slots=True)
class Conjunction(Predicate):
    """Logical AND of two or more predicates."""

    parts: tuple[Predicate, ...]

    def evaluate(self, record: Any) -> bool | None:
        return _and3(part.evaluate(record) for part in self.parts)

    def __str__(self) -> str:
        return " AND ".join(_wrap(part, Disjunction) for part in self.parts)


@dataclass(frozen=True, slots=True)
class Disjunction(Predicate):
    """Logical OR of two or more predicates."""

    parts: tuple[Predicate, ...]

    def evaluate(self, record: Any) -> bool | None:
        return _or3(part.evaluate(record) for part in self.parts)

    def __str__(self) -> str:
        return " OR ".join(_wrap(part, Conjunction) for part in self.parts)


@dataclass(frozen=True, slots=True)
class Negation(Predicate):
    """Logical NOT."""

    inner: Predicate

    def evaluate(self, record: Any) -> bool | None:
        result = self.inner.evaluate(record)
        return None if result is None else not result

    def __str__(self) -> str:
        return f"NOT ({self.inner})"


def _wrap(part: Predicate, needs_parens: type[Predicate]) -> str:
    return f"({part})" if isinstance(part, needs_parens) else str(part)


def _coerce_operator(value: Any) -> Operator:
    try:
        return Operator(value)
    except ValueError:
        raise InvalidArgumentException(f"Unknown operator: {value!r}", argument="operator", value=value) from None


# =============================================================================
# Combinator functions
# =============================================================================


def and_all(*predicates: Predicate | None) -> Predicate:
    """AND the given predicates, skipping ``None`` and :data:`MATCH_ALL`.

    Nested conjunctions are flattened so that ``(a & b) & c`` and
    ``a & (b & c)`` produce the same tree. With nothing left the result is
    :data:`MATCH_ALL`.
    """
    parts: list[Predicate] = []
    for predicate in predicates:
        if predicate is None or isinstance(predicate, MatchAll):
            continue
        if isinstance(predicate, Conjunction):
            parts.extend(predicate.parts)
        else:
            parts.append(predicate)
    if not parts:
        return MATCH_ALL
    if len(parts) == 1:
        return parts[0]
    return Conjunction(tuple(parts))


def or_any(*predicates: Predicate | None) -> Predicate:
    """OR the given predicates, skipping ``None``.

    :data:`MATCH_ALL` absorbs the disjunction. With nothing left the result
    is :data:`MATCH_ALL` (an empty filter does not restrict the query).
    """
    parts: list[Predicate] = []
    for predicate in predicates:
        if predicate is None:
            continue
        if isinstance(predicate, MatchAll):
            return MATCH_ALL
        if isinstance(predicate, Disjunction):
            parts.extend(predicate.parts)
        else:
            parts.append(predicate)
    if not parts:
        return MATCH_ALL
    if len(parts) == 1:
        return parts[0]
    return Disjunction(tuple(parts))


def negate(predicate: Predicate) -> Predicate:
    """NOT *predicate*; double negation collapses."""
    if isinstance(predicate, Negation):
        return predicate.inner
    return Negation(predicate)
