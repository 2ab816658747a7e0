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
"""Page and slice results, and the arithmetic that builds them.

Two strategies exist for telling the caller whether more rows follow:

* :class:`Page`: the caller supplies the total row count (a separate
  count query). Gives ``total_elements`` and ``total_pages``.
* :class:`Slice`: the caller fetches ``size + 1`` rows; the extra probe
  row only signals ``has_next`` and is dropped. No count query is needed.

The two are never mixed: a slice carries no totals.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from querylab.data.pageable import PageRequest
from querylab.kernel.exceptions import InvalidArgumentException

T = TypeVar("T")
U = TypeVar("U")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Slice(Generic[T]):
    """A window of results that only knows whether a next window exists.

    Attributes:
        content: The rows of this window (at most ``size``).
        number: Zero-based index of this window.
        size: Requested window size.
        has_next: Whether at least one more row follows this window.
    """

    content: tuple[T, ...]
    number: int
    size: int
    has_next: bool

    def __post_init__(self) -> None:
        if self.number < 0:
            raise InvalidArgumentException(
                f"number must be >= 0, got {self.number}", argument="number", value=self.number
            )
        if self.size < 1:
            raise InvalidArgumentException(f"size must be >= 1, got {self.size}", argument="size", value=self.size)
        if len(self.content) > self.size:
            raise InvalidArgumentException(
                f"{len(self.content)} rows do not fit a window of size {self.size}",
                argument="content",
                value=len(self.content),
            )

    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @property
    def is_first(self) -> bool:
        return self.number == 0

    @property
    def is_last(self) -> bool:
        return not self.has_next

    @property
    def has_previous(self) -> bool:
        return self.number > 0

    @property
    def has_content(self) -> bool:
        return bool(self.content)

    def next_request(self, request: PageRequest) -> PageRequest | None:
        """The request for the following window, or ``None`` on the last one."""
        return request.next() if self.has_next else None

    def map(self, func: Callable[[T], U]) -> Slice[U]:
        """Transform every row, keeping the window metadata."""
        return Slice(
            content=tuple(func(item) for item in self.content),
            number=self.number,
            size=self.size,
            has_next=self.has_next,
        )


@dataclass(frozen=True)
class Page(Slice[T]):
    """A window of results plus the total number of matching rows.

    ``has_next`` must agree with ``total_elements``; :func:`paginate`
    computes it.
    """

    total_elements: int = 0

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.total_elements < 0:
            raise InvalidArgumentException(
                f"total_elements must be >= 0, got {self.total_elements}",
                argument="total_elements",
                value=self.total_elements,
            )
        if self.has_next != ((self.number + 1) * self.size < self.total_elements):
            raise InvalidArgumentException(
                f"has_next={self.has_next} contradicts {self.total_elements} total rows at page {self.number}",
                argument="has_next",
                value=self.has_next,
            )

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size)

    def map(self, func: Callable[[T], U]) -> Page[U]:
        return Page(
            content=tuple(func(item) for item in self.content),
            number=self.number,
            size=self.size,
            has_next=self.has_next,
            total_elements=self.total_elements,
        )


def paginate(items: Sequence[T], total_count: int, request: PageRequest) -> Page[T]:
    """Build a :class:`Page` from one fetched window and the total row count.

    Raises:
        InvalidArgumentException: if *total_count* is negative or *items*
            holds more rows than ``request.size``.
    """
    if total_count < 0:
        raise InvalidArgumentException(
            f"total_count must be >= 0, got {total_count}", argument="total_count", value=total_count
        )
    if len(items) > request.size:
        raise InvalidArgumentException(
            f"Received {len(items)} rows for a page of size {request.size}",
            argument="items",
            value=len(items),
        )
    has_next = (request.page + 1) * request.size < total_count
    return Page(
        content=tuple(items),
        number=request.page,
        size=request.size,
        has_next=has_next,
        total_elements=total_count,
    )


def paginate_slice(items_with_one_extra: Sequence[T], request: PageRequest) -> Slice[T]:
    """Build a :class:`Slice` from a window fetched with ``size + 1`` rows.

    Raises:
        InvalidArgumentException: if more than ``size + 1`` rows are given.
    """
    probe_limit = request.size + 1
    if len(items_with_one_extra) > probe_limit:
        raise InvalidArgumentException(
            f"Received {len(items_with_one_extra)} rows for a slice probe of {probe_limit}",
            argument="items",
            value=len(items_with_one_extra),
        )
    has_next = len(items_with_one_extra) > request.size
    return Slice(
        content=tuple(items_with_one_extra[: request.size]),
        number=request.page,
        size=request.size,
        has_next=has_next,
    )


def paginate_lazily(items: Sequence[T], request: PageRequest, count: Callable[[], int]) -> Page[T]:
    """Like :func:`paginate`, calling *count* only when the total is unknown.

    The total can be inferred without a count query when the first page is
    not full, or when a later page is non-empty and not full.
    """
    if len(items) < request.size and (request.page == 0 or items):
        return paginate(items, request.offset + len(items), request)
    logger.debug("Running count query for page %d (size %d)", request.page, request.size)
    return paginate(items, count(), request)
