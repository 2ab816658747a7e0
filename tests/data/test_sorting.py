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
"""Tests for null-aware in-memory sorting and windowing."""

from __future__ import annotations

import pytest

from querylab.data.pageable import Order, Sort
from querylab.data.sorting import sort_records, window
from querylab.kernel.exceptions import InvalidArgumentException

RECORDS = [
    {"username": "member1", "age": 10},
    {"username": "member2", "age": None},
    {"username": "member3", "age": 30},
    {"username": "member4", "age": 20},
]


def names(records: list[dict]) -> list[str]:
    return [r["username"] for r in records]


class TestSortRecords:
    def test_unsorted_keeps_input_order(self) -> None:
        assert sort_records(RECORDS, None) == RECORDS
        assert sort_records(RECORDS, Sort.unsorted()) == RECORDS

    def test_desc_nulls_last(self) -> None:
        result = sort_records(RECORDS, Sort.by(Order.desc("age").nulls_last()))
        assert names(result) == ["member3", "member4", "member1", "member2"]

    def test_desc_nulls_first(self) -> None:
        result = sort_records(RECORDS, [Order.desc("age").nulls_first()])
        assert names(result) == ["member2", "member3", "member4", "member1"]

    def test_asc_nulls_last_by_default(self) -> None:
        result = sort_records(RECORDS, Sort.by("age"))
        assert names(result) == ["member1", "member4", "member3", "member2"]

    def test_multiple_orders(self) -> None:
        records = [
            {"username": "b", "age": 20},
            {"username": "a", "age": 20},
            {"username": "c", "age": 10},
        ]
        result = sort_records(records, Sort.by(Order.desc("age"), Order.asc("username")))
        assert names(result) == ["a", "b", "c"]

    def test_stable_for_ties(self) -> None:
        records = [{"username": "x", "age": 1}, {"username": "y", "age": 1}]
        assert names(sort_records(records, Sort.by(Order.desc("age")))) == ["x", "y"]

    def test_incomparable_values(self) -> None:
        with pytest.raises(InvalidArgumentException):
            sort_records([{"age": 1}, {"age": "one"}], Sort.by("age"))


class TestWindow:
    def test_offset_and_limit(self) -> None:
        assert window([1, 2, 3, 4, 5], 1, 2) == [2, 3]

    def test_no_limit(self) -> None:
        assert window([1, 2, 3], 1, None) == [2, 3]

    def test_past_the_end(self) -> None:
        assert window([1, 2, 3], 5, 2) == []

    def test_negative_offset(self) -> None:
        with pytest.raises(InvalidArgumentException):
            window([1], -1, 1)
