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
"""Bulk mutation descriptors handed to :meth:`StoragePort.execute`."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from querylab.data.predicate import MATCH_ALL, Predicate
from querylab.kernel.exceptions import InvalidArgumentException


class AssignmentKind(str, Enum):
    SET = "set"
    ADD = "add"


@dataclass(frozen=True, slots=True)
class Assignment:
    """``field = value`` (SET) or ``field = field + value`` (ADD)."""

    field: str
    value: Any
    kind: AssignmentKind = AssignmentKind.SET

    def __post_init__(self) -> None:
        if not self.field:
            raise InvalidArgumentException("Assignment field must not be empty", argument="field")
        if self.kind is AssignmentKind.ADD and (self.value is None or isinstance(self.value, bool)):
            raise InvalidArgumentException(
                f"Cannot add {self.value!r} to '{self.field}'", argument="value", value=self.value
            )

    def apply(self, current: Any) -> Any:
        """Value the field takes once the assignment runs against *current*."""
        if self.kind is AssignmentKind.SET:
            return self.value
        # NULL + n stays NULL, as in SQL.
        if current is None:
            return None
        return current + self.value


@dataclass(frozen=True, slots=True)
class Update:
    assignments: tuple[Assignment, ...]
    where: Predicate = MATCH_ALL

    def __post_init__(self) -> None:
        if not self.assignments:
            raise InvalidArgumentException("Update needs at least one assignment", argument="assignments")


@dataclass(frozen=True, slots=True)
class Delete:
    where: Predicate = MATCH_ALL


Mutation = Update | Delete
