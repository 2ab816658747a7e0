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
"""SQLAlchemy implementation of the storage port.

Works on a synchronous :class:`~sqlalchemy.orm.Session` owned by the caller.
The storage never commits or rolls back: transaction boundaries belong to
the application.

Usage::

    with Session(engine) as session, session.begin():
        members = SqlAlchemyStorage(session, Member)
        page = QueryFactory().select_from(members).where(spec).fetch_page(PageRequest.of(0, 20))

Bulk updates and deletes run as single UPDATE / DELETE statements with
``synchronize_session=False``; objects already loaded in the session keep
their old state unless ``clear_after_bulk`` is set, which expires every
instance in the session after the statement.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, delete, func, select, update
from sqlalchemy.orm import Session

from querylab.data.adapters.sqlalchemy.translator import PredicateTranslator
from querylab.data.mutation import AssignmentKind, Delete, Mutation, Update
from querylab.data.pageable import Sort
from querylab.data.predicate import Predicate
from querylab.kernel.exceptions import InvalidArgumentException, StorageException

E = TypeVar("E")

logger = logging.getLogger(__name__)


class SqlAlchemyStorage(Generic[E]):
    """Storage port over one mapped entity class.

    Args:
        session: The caller's session.
        entity: Mapped entity class queried by this storage.
        clear_after_bulk: Expire all session instances after a bulk
            mutation so later reads see the new state.
    """

    def __init__(self, session: Session, entity: type[E], *, clear_after_bulk: bool = False) -> None:
        self._session = session
        self._entity = entity
        self._translator = PredicateTranslator(entity)
        self._clear_after_bulk = clear_after_bulk

    def fetch(self, predicate: Predicate, sort: Sort | None = None) -> list[E]:
        return list(self._session.scalars(self._select(predicate, sort)).all())

    def count(self, predicate: Predicate) -> int:
        stmt = select(func.count()).select_from(self._entity)
        clause = self._translator.where(predicate)
        if clause is not None:
            stmt = stmt.where(clause)
        return self._session.execute(stmt).scalar_one()

    def fetch_page(self, predicate: Predicate, offset: int, limit: int, sort: Sort | None = None) -> list[E]:
        if offset < 0 or limit < 0:
            raise InvalidArgumentException(
                f"offset and limit must be >= 0, got {offset} and {limit}", argument="window", value=(offset, limit)
            )
        stmt = self._select(predicate, sort).offset(offset).limit(limit)
        return list(self._session.scalars(stmt).all())

    def execute(self, mutation: Mutation) -> int:
        if isinstance(mutation, Update):
            stmt: Any = update(self._entity).values(self._values(mutation))
        elif isinstance(mutation, Delete):
            stmt = delete(self._entity)
        else:
            raise InvalidArgumentException(
                f"Unsupported mutation {type(mutation).__name__}", argument="mutation", value=mutation
            )
        clause = self._translator.where(mutation.where)
        if clause is not None:
            stmt = stmt.where(clause)
        result = self._session.execute(stmt.execution_options(synchronize_session=False))
        affected: int = result.rowcount
        logger.debug("%s on %s affected %d row(s)", type(mutation).__name__, self._entity.__name__, affected)
        if self._clear_after_bulk:
            self._session.expire_all()
        return affected

    def _select(self, predicate: Predicate, sort: Sort | None) -> Select[Any]:
        stmt = select(self._entity)
        clause = self._translator.where(predicate)
        if clause is not None:
            stmt = stmt.where(clause)
        return stmt.order_by(*self._translator.order_by(sort))

    def _values(self, mutation: Update) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for assignment in mutation.assignments:
            if "." in assignment.field:
                raise StorageException(
                    f"Cannot bulk-update related field '{assignment.field}'",
                    context={"entity": self._entity.__name__, "field": assignment.field},
                )
            column = getattr(self._entity, assignment.field, None)
            if column is None:
                raise StorageException(
                    f"'{assignment.field}' is not a mapped column of {self._entity.__name__}",
                    context={"entity": self._entity.__name__, "field": assignment.field},
                )
            if assignment.kind is AssignmentKind.ADD:
                values[assignment.field] = column + assignment.value
            else:
                values[assignment.field] = assignment.value
        return values
