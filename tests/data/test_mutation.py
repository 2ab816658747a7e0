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
"""Tests for the mutation descriptors."""

from __future__ import annotations

import pytest

from querylab.data.mutation import Assignment, AssignmentKind, Delete, Update
from querylab.data.predicate import MATCH_ALL
from querylab.kernel.exceptions import InvalidArgumentException


class TestAssignment:
    def test_set(self) -> None:
        assert Assignment("age", 3).apply(10) == 3

    def test_set_null(self) -> None:
        assert Assignment("age", None).apply(10) is None

    def test_add(self) -> None:
        assert Assignment("age", 1, AssignmentKind.ADD).apply(10) == 11

    def test_add_to_null_stays_null(self) -> None:
        assert Assignment("age", 1, AssignmentKind.ADD).apply(None) is None

    def test_add_requires_amount(self) -> None:
        with pytest.raises(InvalidArgumentException):
            Assignment("age", None, AssignmentKind.ADD)

    def test_empty_field(self) -> None:
        with pytest.raises(InvalidArgumentException):
            Assignment("", 1)


class TestMutations:
    def test_update_needs_assignments(self) -> None:
        with pytest.raises(InvalidArgumentException):
            Update(())

    def test_defaults_match_all(self) -> None:
        assert Update((Assignment("age", 1),)).where is MATCH_ALL
        assert Delete().where is MATCH_ALL
