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
"""Fluent queries and bulk mutations over a :class:`StoragePort`.

Usage::

    queries = QueryFactory()

    members = (
        queries.select_from(storage)
        .where(Path("age").goe(18), Path("username").eq(name_cond))
        .order_by(Path("age").desc())
        .fetch()
    )

    page = queries.select_from(storage).where(spec).fetch_page(PageRequest.of(1, 3))
    names = queries.select(Projections.field("username")).from_(storage).fetch()

    queries.update(storage).add("age", 1).where(Path("age").goe(28)).execute()
    queries.delete(storage).where(Path("age").gt(18)).execute()

``where`` ignores ``None`` arguments, so optional conditions built with
:class:`~querylab.data.path.Path` can be passed without checks.
"""

from __future__ import annotations

import logging
from typing import Any

from querylab.data.mapper import Mapper
from querylab.data.mutation import Assignment, AssignmentKind, Delete, Update
from querylab.data.page import Page, Slice, paginate, paginate_lazily, paginate_slice
from querylab.data.pageable import Order, PageRequest, PaginationProperties, Sort
from querylab.data.ports.outbound import StoragePort
from querylab.data.predicate import MATCH_ALL, Predicate, and_all
from querylab.data.projection import Projection, Projections, as_projection
from querylab.data.query_parser import QueryMethodParser
from querylab.kernel.exceptions import InvalidArgumentException, NonUniqueResultException

logger = logging.getLogger(__name__)


class Query:
    """A select query under construction.

    Builder methods mutate and return the query; terminal ``fetch*`` methods
    run it against the storage port. A query is not meant to be shared.
    """

    def __init__(
        self,
        storage: StoragePort | None = None,
        projection: Projection[Any] | None = None,
        properties: PaginationProperties | None = None,
    ) -> None:
        self._storage = storage
        self._projection = projection
        self._properties = properties or PaginationProperties()
        self._predicate: Predicate = MATCH_ALL
        self._orders: list[Order] = []
        self._offset = 0
        self._limit: int | None = None

    # ------------------------------------------------------------------
    # Builder
    # ------------------------------------------------------------------

    def from_(self, storage: StoragePort) -> Query:
        self._storage = storage
        return self

    def select(self, projection: Projection[Any] | type) -> Query:
        self._projection = as_projection(projection)
        return self

    def where(self, *predicates: Predicate | None) -> Query:
        """AND *predicates* onto the current condition, skipping ``None``."""
        self._predicate = and_all(self._predicate, *predicates)
        return self

    def order_by(self, *orders: Order | str) -> Query:
        """Append orders; strings use :meth:`Order.parse` syntax (``"age,desc"``)."""
        for order in orders:
            if isinstance(order, str):
                order = Order.parse(order, self._properties.default_null_handling)
            self._orders.append(order)
        return self

    def offset(self, offset: int) -> Query:
        if offset < 0:
            raise InvalidArgumentException(f"offset must be >= 0, got {offset}", argument="offset", value=offset)
        self._offset = offset
        return self

    def limit(self, limit: int) -> Query:
        if limit < 1:
            raise InvalidArgumentException(f"limit must be >= 1, got {limit}", argument="limit", value=limit)
        self._limit = limit
        return self

    @property
    def predicate(self) -> Predicate:
        return self._predicate

    @property
    def sort(self) -> Sort:
        return Sort(tuple(self._orders))

    # ------------------------------------------------------------------
    # Terminal operations
    # ------------------------------------------------------------------

    def fetch(self) -> list[Any]:
        """All matching rows inside the ``offset`` / ``limit`` window."""
        storage = self._require_storage()
        logger.debug(
            "fetch where %s order by %s offset %d limit %s", self._predicate, self._orders, self._offset, self._limit
        )
        if self._limit is None:
            rows = storage.fetch(self._predicate, self._sort_or_none())[self._offset :]
        else:
            rows = storage.fetch_page(self._predicate, self._offset, self._limit, self._sort_or_none())
        return self._project_all(rows)

    def fetch_first(self) -> Any | None:
        """The first matching row, or ``None``."""
        rows = self._require_storage().fetch_page(self._predicate, self._offset, 1, self._sort_or_none())
        return self._project(rows[0]) if rows else None

    def fetch_one(self) -> Any | None:
        """The single matching row, ``None`` when there is none.

        Raises:
            NonUniqueResultException: More than one row matches.
        """
        rows = self._require_storage().fetch_page(self._predicate, self._offset, 2, self._sort_or_none())
        if len(rows) > 1:
            raise NonUniqueResultException(self.fetch_count())
        return self._project(rows[0]) if rows else None

    def fetch_count(self) -> int:
        return self._require_storage().count(self._predicate)

    def exists(self) -> bool:
        return bool(self._require_storage().fetch_page(self._predicate, 0, 1))

    def fetch_page(self, request: PageRequest, *, lazy_count: bool = False) -> Page[Any]:
        """One page plus the total from a separate count query.

        The request's sort, when present, replaces the query's own orders.
        With ``lazy_count`` the count is skipped when the page itself
        reveals the total.
        """
        storage = self._require_storage()
        sort = self._request_sort(request)
        rows = storage.fetch_page(self._predicate, request.offset, request.size, sort)
        logger.debug(
            "page %d (size %d) fetched %d row(s) where %s", request.page, request.size, len(rows), self._predicate
        )
        if lazy_count:
            page = paginate_lazily(rows, request, lambda: storage.count(self._predicate))
        else:
            page = paginate(rows, storage.count(self._predicate), request)
        return page.map(self._project) if self._projection else page

    def fetch_slice(self, request: PageRequest) -> Slice[Any]:
        """One page read with a ``size + 1`` probe instead of a count query."""
        rows = self._require_storage().fetch_page(
            self._predicate, request.offset, request.size + 1, self._request_sort(request)
        )
        window = paginate_slice(rows, request)
        return window.map(self._project) if self._projection else window

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_storage(self) -> StoragePort:
        if self._storage is None:
            raise InvalidArgumentException("Query has no storage; call from_() first", argument="storage")
        return self._storage

    def _sort_or_none(self) -> Sort | None:
        return self.sort if self._orders else None

    def _request_sort(self, request: PageRequest) -> Sort | None:
        return request.sort if request.sort.is_sorted else self._sort_or_none()

    def _project(self, row: Any) -> Any:
        return self._projection(row) if self._projection else row

    def _project_all(self, rows: list[Any]) -> list[Any]:
        return [self._projection(row) for row in rows] if self._projection else list(rows)


class UpdateClause:
    """Bulk update: ``set`` / ``add`` assignments applied to matching rows."""

    def __init__(self, storage: StoragePort) -> None:
        self._storage = storage
        self._assignments: list[Assignment] = []
        self._predicate: Predicate = MATCH_ALL

    def set(self, field: str, value: Any) -> UpdateClause:
        self._assignments.append(Assignment(field, value))
        return self

    def add(self, field: str, amount: Any) -> UpdateClause:
        self._assignments.append(Assignment(field, amount, AssignmentKind.ADD))
        return self

    def where(self, *predicates: Predicate | None) -> UpdateClause:
        self._predicate = and_all(self._predicate, *predicates)
        return self

    def execute(self) -> int:
        """Run the update and return the number of affected rows."""
        mutation = Update(tuple(self._assignments), self._predicate)
        affected = self._storage.execute(mutation)
        logger.debug(
            "update %s where %s affected %d row(s)", [a.field for a in mutation.assignments], self._predicate, affected
        )
        return affected


class DeleteClause:
    """Bulk delete of matching rows."""

    def __init__(self, storage: StoragePort) -> None:
        self._storage = storage
        self._predicate: Predicate = MATCH_ALL

    def where(self, *predicates: Predicate | None) -> DeleteClause:
        self._predicate = and_all(self._predicate, *predicates)
        return self

    def execute(self) -> int:
        affected = self._storage.execute(Delete(self._predicate))
        logger.debug("delete where %s affected %d row(s)", self._predicate, affected)
        return affected


class QueryFactory:
    """Entry point for queries, bulk mutations and derived queries.

    Args:
        mapper: Mapper used by :meth:`select_mapped` projections.
        properties: Pagination defaults (null handling of string orders).
    """

    def __init__(self, mapper: Mapper | None = None, properties: PaginationProperties | None = None) -> None:
        self._mapper = mapper or Mapper()
        self._properties = properties or PaginationProperties()
        self._parser = QueryMethodParser()

    def select_from(self, storage: StoragePort) -> Query:
        return Query(storage, properties=self._properties)

    def select(self, projection: Projection[Any] | type) -> Query:
        """A projecting query; pick the storage with :meth:`Query.from_`."""
        return Query(projection=as_projection(projection), properties=self._properties)

    def select_mapped(self, dto_type: type) -> Query:
        """A query projecting through this factory's :class:`Mapper`."""
        return Query(projection=Projections.mapped(dto_type, self._mapper), properties=self._properties)

    def update(self, storage: StoragePort) -> UpdateClause:
        return UpdateClause(storage)

    def delete(self, storage: StoragePort) -> DeleteClause:
        return DeleteClause(storage)

    def derived(self, storage: StoragePort, method_name: str, *args: Any) -> Any:
        """Run a derived query method name such as ``find_by_age_greater_than``.

        Returns a list for ``find_by``, an int for ``count_by``, a bool for
        ``exists_by`` and the affected row count for ``delete_by``.
        """
        parsed = self._parser.parse(method_name)
        predicate = parsed.to_predicate(*args)
        logger.debug("derived query %s -> %s", method_name, predicate)
        if parsed.prefix == "find_by":
            return storage.fetch(predicate, parsed.sort if parsed.order_clauses else None)
        if parsed.prefix == "count_by":
            return storage.count(predicate)
        if parsed.prefix == "exists_by":
            return bool(storage.fetch_page(predicate, 0, 1))
        return storage.execute(Delete(predicate))
