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
"""Sort orders and page requests.

Page numbers are zero-based: ``PageRequest.of(1, 3)`` is the second page of
three rows and starts at row offset 3. Null placement is always explicit on
an :class:`Order` so that in-memory and database sorting agree regardless of
the storage engine's own default.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from enum import Enum

from pydantic import BaseModel, Field

from querylab.core.config import config_properties
from querylab.kernel.exceptions import InvalidArgumentException


class Direction(str, Enum):
    ASC = "asc"
    DESC = "desc"


class NullHandling(str, Enum):
    """Where records whose sort value is ``None`` are placed."""

    NULLS_FIRST = "nulls_first"
    NULLS_LAST = "nulls_last"


DEFAULT_NULL_HANDLING = NullHandling.NULLS_LAST


@config_properties(prefix="querylab.data.pagination")
class PaginationProperties(BaseModel):
    """Defaults applied by :meth:`PageRequest.from_params`."""

    default_size: int = Field(default=20, ge=1)
    max_size: int = Field(default=2000, ge=1)
    default_null_handling: NullHandling = DEFAULT_NULL_HANDLING


@dataclass(frozen=True)
class Order:
    """A single sort order: property name, direction and null placement."""

    property: str
    direction: Direction = Direction.ASC
    null_handling: NullHandling = DEFAULT_NULL_HANDLING

    def __post_init__(self) -> None:
        if not self.property:
            raise InvalidArgumentException("Sort property must not be empty", argument="property")

    @staticmethod
    def asc(property: str) -> Order:
        return Order(property=property, direction=Direction.ASC)

    @staticmethod
    def desc(property: str) -> Order:
        return Order(property=property, direction=Direction.DESC)

    @property
    def is_ascending(self) -> bool:
        return self.direction is Direction.ASC

    def nulls_first(self) -> Order:
        return replace(self, null_handling=NullHandling.NULLS_FIRST)

    def nulls_last(self) -> Order:
        return replace(self, null_handling=NullHandling.NULLS_LAST)

    def reverse(self) -> Order:
        """Flip the direction; null placement is kept as requested."""
        flipped = Direction.DESC if self.is_ascending else Direction.ASC
        return replace(self, direction=flipped)

    @classmethod
    def parse(cls, token: str, default_null_handling: NullHandling = DEFAULT_NULL_HANDLING) -> Order:
        """Parse ``"property[,asc|desc][,nulls_first|nulls_last]"``."""
        parts = [p.strip() for p in token.split(",") if p.strip()]
        if not parts:
            raise InvalidArgumentException("Empty sort token", argument="sort", value=token)
        direction = Direction.ASC
        null_handling = default_null_handling
        for part in parts[1:]:
            lowered = part.lower()
            if lowered in ("asc", "desc"):
                direction = Direction(lowered)
            elif lowered in ("nulls_first", "nulls_last"):
                null_handling = NullHandling(lowered)
            else:
                raise InvalidArgumentException(f"Unknown sort modifier '{part}'", argument="sort", value=token)
        return cls(property=parts[0], direction=direction, null_handling=null_handling)


@dataclass(frozen=True)
class Sort:
    """Ordered collection of sort orders; earlier orders take precedence."""

    orders: tuple[Order, ...] = ()

    @staticmethod
    def by(*items: str | Order) -> Sort:
        """Sort by property names (ascending) and/or explicit orders."""
        return Sort(orders=tuple(item if isinstance(item, Order) else Order.asc(item) for item in items))

    @staticmethod
    def unsorted() -> Sort:
        return Sort()

    @property
    def is_sorted(self) -> bool:
        return bool(self.orders)

    def and_then(self, other: Sort) -> Sort:
        return Sort(orders=self.orders + other.orders)

    def descending(self) -> Sort:
        return Sort(orders=tuple(replace(o, direction=Direction.DESC) for o in self.orders))

    def ascending(self) -> Sort:
        return Sort(orders=tuple(replace(o, direction=Direction.ASC) for o in self.orders))

    def __iter__(self) -> Iterator[Order]:
        return iter(self.orders)

    def __len__(self) -> int:
        return len(self.orders)


@dataclass(frozen=True)
class PageRequest:
    """A request for one zero-based page of ``size`` rows, sorted by ``sort``."""

    page: int = 0
    size: int = 20
    sort: Sort = field(default_factory=Sort)

    def __post_init__(self) -> None:
        if isinstance(self.page, bool) or not isinstance(self.page, int) or self.page < 0:
            raise InvalidArgumentException(f"page must be >= 0, got {self.page!r}", argument="page", value=self.page)
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size < 1:
            raise InvalidArgumentException(f"size must be >= 1, got {self.size!r}", argument="size", value=self.size)

    @staticmethod
    def of(page: int, size: int, sort: Sort | None = None) -> PageRequest:
        return PageRequest(page=page, size=size, sort=sort or Sort())

    @staticmethod
    def of_size(size: int) -> PageRequest:
        return PageRequest(page=0, size=size)

    @classmethod
    def from_params(
        cls,
        page: int | None = None,
        size: int | None = None,
        sort: Iterable[str] = (),
        properties: PaginationProperties | None = None,
    ) -> PageRequest:
        """Build a request from loosely-typed parameters (e.g. a query string).

        A missing ``size`` uses ``default_size``; a ``size`` above ``max_size``
        is clamped to it. Each sort token is parsed by :meth:`Order.parse`.
        """
        props = properties or PaginationProperties()
        resolved_size = props.default_size if size is None else min(size, props.max_size)
        orders = tuple(Order.parse(token, props.default_null_handling) for token in sort)
        return cls(page=0 if page is None else page, size=resolved_size, sort=Sort(orders=orders))

    @property
    def offset(self) -> int:
        """Row offset of the first record on this page."""
        return self.page * self.size

    @property
    def is_first(self) -> bool:
        return self.page == 0

    def next(self) -> PageRequest:
        return replace(self, page=self.page + 1)

    def previous_or_first(self) -> PageRequest:
        return replace(self, page=max(0, self.page - 1))

    def first(self) -> PageRequest:
        return replace(self, page=0)

    def with_sort(self, sort: Sort) -> PageRequest:
        return replace(self, sort=sort)
