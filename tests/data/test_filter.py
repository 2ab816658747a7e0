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
"""Tests for FilterUtils -- query by example."""

from __future__ import annotations

from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from querylab.data.filter import FilterUtils
from querylab.data.optional import ABSENT, Present
from querylab.data.predicate import MATCH_ALL, Comparison, Conjunction, Operator
from querylab.kernel.exceptions import InvalidArgumentException


@dataclass
class MemberSearch:
    username: str | None = None
    age: int | None = None


class MemberSearchModel(BaseModel):
    username: str | None = None
    age: int | None = None


class PlainSearch:
    def __init__(self, username: str | None = None) -> None:
        self.username = username
        self._internal = "hidden"


class TestBy:
    def test_single_keyword(self) -> None:
        assert FilterUtils.by(username="member1") == Comparison("username", Operator.EQ, ("member1",))

    def test_multiple_keywords_are_anded(self) -> None:
        predicate = FilterUtils.by(username="member1", age=10)
        assert isinstance(predicate, Conjunction)
        assert predicate.matches({"username": "member1", "age": 10})
        assert not predicate.matches({"username": "member1", "age": 20})

    def test_absent_keyword_is_skipped(self) -> None:
        assert FilterUtils.by(username=ABSENT) is MATCH_ALL

    def test_none_is_rejected(self) -> None:
        with pytest.raises(InvalidArgumentException):
            FilterUtils.by(username=None)


class TestFromDict:
    def test_none_values_skipped(self) -> None:
        assert FilterUtils.from_dict({"username": "member1", "age": None}) == Comparison(
            "username", Operator.EQ, ("member1",)
        )

    def test_explicit_optionals(self) -> None:
        predicate = FilterUtils.from_dict({"username": Present(""), "age": ABSENT})
        assert predicate == Comparison("username", Operator.EQ, ("",))

    def test_empty_dict(self) -> None:
        assert FilterUtils.from_dict({}) is MATCH_ALL


class TestFromExample:
    def test_dataclass(self) -> None:
        assert FilterUtils.from_example(MemberSearch(age=20)) == Comparison("age", Operator.EQ, (20,))

    def test_pydantic_model(self) -> None:
        predicate = FilterUtils.from_example(MemberSearchModel(username="member2", age=20))
        assert predicate.matches({"username": "member2", "age": 20})

    def test_plain_object_ignores_private_attributes(self) -> None:
        assert FilterUtils.from_example(PlainSearch("member3")) == Comparison(
            "username", Operator.EQ, ("member3",)
        )

    def test_empty_example_matches_all(self) -> None:
        assert FilterUtils.from_example(MemberSearch()) is MATCH_ALL
