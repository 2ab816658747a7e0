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
"""Outbound port: the storage collaborator queries run against."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from querylab.data.mutation import Mutation
from querylab.data.pageable import Sort
from querylab.data.predicate import Predicate


@runtime_checkable
class StoragePort(Protocol):
    """Executes predicates, counts and bulk mutations against one record type.

    Implementations apply the predicate, then the sort (with explicit null
    placement), then the ``offset`` / ``limit`` window.
    """

    def fetch(self, predicate: Predicate, sort: Sort | None = None) -> list[Any]: ...

    def count(self, predicate: Predicate) -> int: ...

    def fetch_page(
        self, predicate: Predicate, offset: int, limit: int, sort: Sort | None = None
    ) -> list[Any]: ...

    def execute(self, mutation: Mutation) -> int: ...
