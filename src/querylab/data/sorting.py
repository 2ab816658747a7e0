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
"""Null-aware in-memory ordering and windowing.

Records are sorted by each :class:`~querylab.data.pageable.Order` in turn;
records whose sort value is ``None`` are placed first or last as the order
requests, independently of the direction. Sorting is stable, so records
that tie on every order keep their input order.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from querylab.data.accessor import read_field
from querylab.data.pageable import NullHandling, Order, Sort
from querylab.kernel.exceptions import InvalidArgumentException

R = TypeVar("R")


def sort_records(records: Iterable[R], sort: Sort | Sequence[Order] | None) -> list[R]:
    """Return *records* ordered by *sort* (input order when unsorted)."""
    result = list(records)
    orders = tuple(sort.orders if isinstance(sort, Sort) else sort or ())
    # Stable sorts applied from the least to the most significant order.
    for order in reversed(orders):
        result = _sort_once(result, order)
    return result


def _sort_once(records: list[R], order: Order) -> list[R]:
    present: list[tuple[Any, R]] = []
    nulls: list[R] = []
    for record in records:
        value = read_field(record, order.property)
        if value is None:
            nulls.append(record)
        else:
            present.append((value, record))
    try:
        present.sort(key=lambda pair: pair[0], reverse=not order.is_ascending)
    except TypeError as exc:
        raise InvalidArgumentException(
            f"Values of '{order.property}' are not mutually comparable",
            argument="sort",
            value=order.property,
        ) from exc
    ordered = [record for _, record in present]
    if order.null_handling is NullHandling.NULLS_FIRST:
        return nulls + ordered
    return ordered + nulls


def window(records: Sequence[R], offset: int, limit: int | None) -> list[R]:
    """Rows ``[offset, offset + limit)`` of *records*; ``limit=None`` means no limit."""
    if offset < 0:
        raise InvalidArgumentException(f"offset must be >= 0, got {offset}", argument="offset", value=offset)
    if limit is not None and limit < 0:
        raise InvalidArgumentException(f"limit must be >= 0, got {limit}", argument="limit", value=limit)
    end = None if limit is None else offset + limit
    return list(records[offset:end])
