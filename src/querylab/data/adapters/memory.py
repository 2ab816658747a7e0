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
"""In-memory :class:`~querylab.data.ports.outbound.StoragePort`.

Evaluates predicates with :meth:`Predicate.matches` over a list of records
(dicts, dataclasses or plain objects). It serves as the reference
behaviour for the other adapters and as a test double.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import Any

from querylab.data.accessor import read_field, write_field
from querylab.data.mutation import Delete, Mutation, Update
from querylab.data.pageable import Sort
from querylab.data.predicate import Predicate
from querylab.data.sorting import sort_records, window
from querylab.kernel.exceptions import InvalidArgumentException

logger = logging.getLogger(__name__)


class InMemoryStorage:
    """Thread-safe list of records queried through predicates."""

    def __init__(self, records: Iterable[Any] = ()) -> None:
        self._records: list[Any] = list(records)
        self._lock = threading.RLock()

    def add(self, *records: Any) -> None:
        with self._lock:
            self._records.extend(records)

    def all(self) -> list[Any]:
        """Snapshot of the stored records, in insertion order."""
        with self._lock:
            return list(self._records)

    def fetch(self, predicate: Predicate, sort: Sort | None = None) -> list[Any]:
        with self._lock:
            matched = predicate.filter(self._records)
        return sort_records(matched, sort)

    def count(self, predicate: Predicate) -> int:
        with self._lock:
            return sum(1 for record in self._records if predicate.matches(record))

    def fetch_page(self, predicate: Predicate, offset: int, limit: int, sort: Sort | None = None) -> list[Any]:
        return window(self.fetch(predicate, sort), offset, limit)

    def execute(self, mutation: Mutation) -> int:
        with self._lock:
            if isinstance(mutation, Update):
                affected = self._update(mutation)
            elif isinstance(mutation, Delete):
                kept = [record for record in self._records if not mutation.where.matches(record)]
                affected = len(self._records) - len(kept)
                self._records = kept
            else:
                raise InvalidArgumentException(
                    f"Unsupported mutation {type(mutation).__name__}", argument="mutation", value=mutation
                )
        logger.debug("%s affected %d record(s)", type(mutation).__name__, affected)
        return affected

    def _update(self, mutation: Update) -> int:
        # Match first so that assignments never change which records qualify.
        targets = mutation.where.filter(self._records)
        # Every new value is computed before the first write, so a failing assignment changes nothing.
        writes: list[tuple[Any, str, Any]] = []
        for record in targets:
            for assignment in mutation.assignments:
                current = read_field(record, assignment.field)
                try:
                    writes.append((record, assignment.field, assignment.apply(current)))
                except TypeError as exc:
                    raise InvalidArgumentException(
                        f"Cannot {assignment.kind.value} {assignment.value!r} to '{assignment.field}' "
                        f"holding {type(current).__name__}",
                        argument=assignment.field,
                        value=current,
                    ) from exc
        for record, field, value in writes:
            write_field(record, field, value)
        return len(targets)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
