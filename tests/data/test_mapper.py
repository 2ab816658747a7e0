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
"""Tests for the generic Mapper."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel

from querylab.data.mapper import Mapper, field_names, lookup


@dataclass
class MemberEntity:
    username: str
    age: int
    password: str = "secret"


@dataclass
class MemberDto:
    username: str
    age: int = 0


class UserDto(BaseModel):
    name: str
    age: int


@dataclass
class MemberLabel:
    username: str
    label: str = ""


class AnnotatedDto:
    username: str
    _cache: dict

    def __init__(self, username: str) -> None:
        self.username = username


class TestFieldNames:
    def test_dataclass(self) -> None:
        assert field_names(MemberEntity) == ["username", "age", "password"]

    def test_pydantic(self) -> None:
        assert field_names(UserDto) == ["name", "age"]

    def test_annotated_class_skips_private(self) -> None:
        assert field_names(AnnotatedDto) == ["username"]


class TestLookup:
    def test_mapping(self) -> None:
        assert lookup({"a": None}, "a") == (True, None)
        assert lookup({}, "a") == (False, None)

    def test_object(self) -> None:
        assert lookup(MemberDto("m", 1), "age") == (True, 1)
        assert lookup(MemberDto("m", 1), "missing") == (False, None)
        assert lookup(MemberDto("m", 1), "__class__") == (False, None)


class TestMapper:
    def test_auto_maps_matching_fields(self) -> None:
        dto = Mapper().map(MemberEntity("member1", 10), MemberDto)
        assert dto == MemberDto("member1", 10)

    def test_maps_from_dict(self) -> None:
        dto = Mapper().map({"username": "member1"}, MemberDto)
        assert dto == MemberDto("member1", 0)

    def test_field_map_renames(self) -> None:
        mapper = Mapper()
        mapper.add_mapping(MemberEntity, UserDto, field_map={"username": "name"})
        assert mapper.map(MemberEntity("member1", 10), UserDto) == UserDto(name="member1", age=10)

    def test_transformers_and_exclude(self) -> None:
        mapper = Mapper()
        mapper.add_mapping(
            MemberEntity,
            MemberDto,
            transformers={"username": str.upper},
            exclude={"age"},
        )
        assert mapper.map(MemberEntity("member1", 10), MemberDto) == MemberDto("MEMBER1", 0)

    def test_map_list(self) -> None:
        dtos = Mapper().map_list([MemberEntity("a", 1), MemberEntity("b", 2)], MemberDto)
        assert [d.username for d in dtos] == ["a", "b"]

    def test_project_with_computed_field(self) -> None:
        mapper = Mapper()
        mapper.register_projection(
            MemberEntity, MemberLabel, transforms={"label": lambda m: f"{m.username}_{m.age}"}
        )
        assert mapper.project(MemberEntity("member1", 10), MemberLabel) == MemberLabel("member1", "member1_10")

    def test_project_keeps_configured_mapping(self) -> None:
        mapper = Mapper()
        mapper.add_mapping(MemberEntity, MemberLabel, transformers={"username": str.upper})
        mapper.register_projection(MemberEntity, MemberLabel, transforms={"label": lambda m: str(m.age)})
        assert mapper.project(MemberEntity("member1", 10), MemberLabel) == MemberLabel("MEMBER1", "10")

    def test_project_without_registration(self) -> None:
        assert Mapper().project(MemberEntity("member1", 10), MemberLabel) == MemberLabel("member1", "")
