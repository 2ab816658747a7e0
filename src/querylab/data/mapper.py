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
"""Generic record-to-DTO mapper inspired by MapStruct.

Maps between any two shapes (mappings, dataclasses, pydantic models, ORM
entities) by matching field names, with optional renaming, transformers and
exclusions::

    mapper = Mapper()
    mapper.add_mapping(Member, MemberDto, field_map={"username": "name"})
    dto = mapper.map(member, MemberDto)
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar, get_type_hints

from pydantic import BaseModel

S = TypeVar("S")
D = TypeVar("D")


@dataclasses.dataclass
class MappingConfig:
    """Configuration for one ``(source type, destination type)`` pair.

    Attributes:
        field_map: Source field name -> destination field name.
        transformers: Destination field name -> value transformer.
        exclude: Destination fields left unset.
    """

    field_map: dict[str, str] = dataclasses.field(default_factory=dict)
    transformers: dict[str, Callable[[Any], Any]] = dataclasses.field(default_factory=dict)
    exclude: set[str] = dataclasses.field(default_factory=set)


class Mapper:
    """Auto-maps records onto destination types by matching field names."""

    def __init__(self) -> None:
        self._mappings: dict[tuple[type, type], MappingConfig] = {}
        self._projections: dict[tuple[type, type], dict[str, Callable[[Any], Any]]] = {}

    def add_mapping(
        self,
        source_type: type[S],
        dest_type: type[D],
        *,
        field_map: dict[str, str] | None = None,
        transformers: dict[str, Callable[[Any], Any]] | None = None,
        exclude: set[str] | None = None,
    ) -> None:
        """Register renames, transformers and exclusions for a type pair."""
        self._mappings[(source_type, dest_type)] = MappingConfig(
            field_map=field_map or {},
            transformers=transformers or {},
            exclude=exclude or set(),
        )

    def map(self, source: Any, dest_type: type[D]) -> D:
        """Map *source* onto a new *dest_type* instance.

        Destination fields without a source counterpart are left to the
        destination type's defaults.
        """
        return self._build(source, dest_type, {})

    def map_list(self, sources: Iterable[Any], dest_type: type[D]) -> list[D]:
        return [self.map(source, dest_type) for source in sources]

    def register_projection(
        self,
        source_type: type[S],
        projection_type: type[D],
        *,
        transforms: dict[str, Callable[[Any], Any]] | None = None,
    ) -> None:
        """Register computed fields for a projection.

        Each transform receives the whole source record::

            mapper.register_projection(Member, MemberLabel, transforms={
                "label": lambda m: f"{m.username}_{m.age}",
            })
        """
        self._projections[(source_type, projection_type)] = transforms or {}

    def project(self, source: Any, projection_type: type[D]) -> D:
        """Like :meth:`map`, with registered computed fields filled from the whole record."""
        transforms = self._projections.get((type(source), projection_type), {})
        return self._build(source, projection_type, transforms)

    def _build(self, source: Any, dest_type: type[D], computed: dict[str, Callable[[Any], Any]]) -> D:
        config = self._mappings.get((type(source), dest_type), MappingConfig())
        renamed = {dest: src for src, dest in config.field_map.items()}

        kwargs: dict[str, Any] = {}
        for dest_field in field_names(dest_type):
            if dest_field in computed:
                kwargs[dest_field] = computed[dest_field](source)
                continue
            if dest_field in config.exclude:
                continue
            source_field = renamed.get(dest_field, dest_field)
            found, value = lookup(source, source_field)
            if not found:
                continue
            transformer = config.transformers.get(dest_field)
            kwargs[dest_field] = transformer(value) if transformer else value
        return dest_type(**kwargs)


def field_names(cls: type) -> list[str]:
    """Declared field names of a dataclass, pydantic model or annotated class."""
    if dataclasses.is_dataclass(cls):
        return [f.name for f in dataclasses.fields(cls)]
    if isinstance(cls, type) and issubclass(cls, BaseModel):
        return list(cls.model_fields)
    return [name for name in get_type_hints(cls) if not name.startswith("_")]


def lookup(source: Any, name: str) -> tuple[bool, Any]:
    """``(True, value)`` when *source* has field *name*, else ``(False, None)``.

    Attribute access is used for objects so that ORM-managed attributes
    (including not-yet-loaded ones) are read through their descriptors.
    """
    if isinstance(source, Mapping):
        return (True, source[name]) if name in source else (False, None)
    if name.startswith("_") or not hasattr(source, name):
        return False, None
    return True, getattr(source, name)
