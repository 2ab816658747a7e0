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
"""Projections: reshape fetched records into scalars, tuples or DTOs.

Factories on :class:`Projections` mirror the usual DTO population styles::

    Projections.field("username")                          # -> "member1"
    Projections.tuple("username", "age")                   # -> ("member1", 10)
    Projections.fields(MemberDto, "username", "age")       # keyword arguments
    Projections.bean(MemberBean, "username", "age")        # setattr on MemberBean()
    Projections.constructor(MemberDto, "username", "age")  # positional arguments
    Projections.fields(UserDto, name="username", age="age")  # aliases

Alias sources may be a dotted field path or a callable receiving the whole
record. A Protocol marked with :func:`projection` is also accepted wherever a
projection is expected and yields a namespace with its declared fields.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any, Generic, TypeVar, get_type_hints

from querylab.data.accessor import read_field
from querylab.data.mapper import Mapper, field_names
from querylab.kernel.exceptions import InvalidArgumentException

P = TypeVar("P")

_PROJECTION_MARKER = "__querylab_projection__"

Source = str | Callable[[Any], Any]


def projection(cls: type) -> type:
    """Mark a Protocol class as a projection interface.

    Usage::

        @projection
        class UsernameOnly(Protocol):
            username: str
    """
    setattr(cls, _PROJECTION_MARKER, True)
    return cls


def is_projection(cls: type) -> bool:
    return getattr(cls, _PROJECTION_MARKER, False) is True


def projection_fields(cls: type) -> list[str]:
    """Field names declared on a projection interface."""
    return [name for name in get_type_hints(cls) if not name.startswith("_")]


def _read(record: Any, source: Source) -> Any:
    return source(record) if callable(source) else read_field(record, source)


class Projection(ABC, Generic[P]):
    """Turns one record into its projected shape."""

    @abstractmethod
    def project(self, record: Any) -> P: ...

    def __call__(self, record: Any) -> P:
        return self.project(record)


class FieldProjection(Projection[Any]):
    """A single field value."""

    def __init__(self, source: Source) -> None:
        self.source = source

    def project(self, record: Any) -> Any:
        return _read(record, self.source)


class TupleProjection(Projection[tuple[Any, ...]]):
    """A tuple of field values, in declaration order."""

    def __init__(self, *sources: Source) -> None:
        if not sources:
            raise InvalidArgumentException("Tuple projection needs at least one field", argument="sources")
        self.sources = sources

    def project(self, record: Any) -> tuple[Any, ...]:
        return tuple(_read(record, source) for source in self.sources)


class FieldsProjection(Projection[P]):
    """Populate a DTO through keyword arguments."""

    def __init__(self, dto_type: type[P], bindings: dict[str, Source]) -> None:
        self.dto_type = dto_type
        self.bindings = bindings

    def project(self, record: Any) -> P:
        return self.dto_type(**{name: _read(record, source) for name, source in self.bindings.items()})


class BeanProjection(Projection[P]):
    """Instantiate the DTO without arguments, then assign each attribute."""

    def __init__(self, dto_type: type[P], bindings: dict[str, Source]) -> None:
        self.dto_type = dto_type
        self.bindings = bindings

    def project(self, record: Any) -> P:
        instance = self.dto_type()
        for name, source in self.bindings.items():
            setattr(instance, name, _read(record, source))
        return instance


class ConstructorProjection(Projection[P]):
    """Call the DTO constructor with positional arguments."""

    def __init__(self, dto_type: type[P], sources: tuple[Source, ...]) -> None:
        self.dto_type = dto_type
        self.sources = sources

    def project(self, record: Any) -> P:
        return self.dto_type(*(_read(record, source) for source in self.sources))


class InterfaceProjection(Projection[SimpleNamespace]):
    """Namespace holding only the fields declared on a ``@projection`` Protocol."""

    def __init__(self, interface: type) -> None:
        self.interface = interface
        self.fields = projection_fields(interface)

    def project(self, record: Any) -> SimpleNamespace:
        return SimpleNamespace(**{name: read_field(record, name) for name in self.fields})


class MapperProjection(Projection[P]):
    """Delegate to :meth:`Mapper.project <querylab.data.mapper.Mapper.project>`."""

    def __init__(self, dto_type: type[P], mapper: Mapper) -> None:
        self.dto_type = dto_type
        self.mapper = mapper

    def project(self, record: Any) -> P:
        return self.mapper.project(record, self.dto_type)


def _bindings(dto_type: type, names: tuple[str, ...], aliases: dict[str, Source]) -> dict[str, Source]:
    bindings: dict[str, Source] = {name: name for name in names}
    bindings.update(aliases)
    if not bindings:
        bindings = {name: name for name in field_names(dto_type)}
    return bindings


class Projections:
    """Factories for :class:`Projection` objects."""

    @staticmethod
    def field(source: Source) -> FieldProjection:
        return FieldProjection(source)

    @staticmethod
    def tuple(*sources: Source) -> TupleProjection:
        return TupleProjection(*sources)

    @staticmethod
    def fields(dto_type: type[P], *names: str, **aliases: Source) -> FieldsProjection[P]:
        """Keyword population; with no names, every declared DTO field is read."""
        return FieldsProjection(dto_type, _bindings(dto_type, names, aliases))

    @staticmethod
    def bean(dto_type: type[P], *names: str, **aliases: Source) -> BeanProjection[P]:
        """Setter population; with no names, every declared DTO field is read."""
        return BeanProjection(dto_type, _bindings(dto_type, names, aliases))

    @staticmethod
    def constructor(dto_type: type[P], *sources: Source) -> ConstructorProjection[P]:
        if not sources:
            raise InvalidArgumentException("Constructor projection needs at least one argument", argument="sources")
        return ConstructorProjection(dto_type, sources)

    @staticmethod
    def mapped(dto_type: type[P], mapper: Mapper | None = None) -> MapperProjection[P]:
        return MapperProjection(dto_type, mapper or Mapper())


def as_projection(target: Projection[Any] | type) -> Projection[Any]:
    """Coerce a projection, ``@projection`` interface or DTO type into a :class:`Projection`."""
    if isinstance(target, Projection):
        return target
    if isinstance(target, type):
        if is_projection(target):
            return InterfaceProjection(target)
        return Projections.fields(target)
    raise InvalidArgumentException(
        f"Cannot project onto {target!r}", argument="projection", value=target
    )
