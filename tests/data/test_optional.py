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
"""Tests for Present / ABSENT optional values."""

from __future__ import annotations

import pickle

from querylab.data.optional import ABSENT, Absent, Present, is_maybe, of_blank, of_nullable


class TestPresent:
    def test_holds_falsy_values(self) -> None:
        assert Present("").value == ""
        assert Present(0).value == 0
        assert Present(0).is_present

    def test_map(self) -> None:
        assert Present(2).map(lambda v: v * 10) == Present(20)

    def test_get_or_ignores_default(self) -> None:
        assert Present("x").get_or("y") == "x"

    def test_equality_by_value(self) -> None:
        assert Present(1) == Present(1)
        assert Present(1) != Present(2)


class TestAbsent:
    def test_singleton(self) -> None:
        assert Absent() is ABSENT

    def test_falsy_and_repr(self) -> None:
        assert not ABSENT
        assert repr(ABSENT) == "ABSENT"
        assert not ABSENT.is_present

    def test_map_stays_absent(self) -> None:
        assert ABSENT.map(lambda v: v + 1) is ABSENT

    def test_get_or_returns_default(self) -> None:
        assert ABSENT.get_or(5) == 5

    def test_survives_pickling(self) -> None:
        assert pickle.loads(pickle.dumps(ABSENT)) is ABSENT


class TestAdapters:
    def test_of_nullable(self) -> None:
        assert of_nullable(None) is ABSENT
        assert of_nullable("") == Present("")
        assert of_nullable(0) == Present(0)

    def test_of_blank(self) -> None:
        assert of_blank(None) is ABSENT
        assert of_blank("   ") is ABSENT
        assert of_blank("member1") == Present("member1")

    def test_is_maybe(self) -> None:
        assert is_maybe(ABSENT)
        assert is_maybe(Present(None))
        assert not is_maybe(None)
        assert not is_maybe("value")
