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
"""Explicit optional values for dynamic filters.

A filter value is either ``Present(value)`` or ``ABSENT``. ``None`` and the
empty string are ordinary values here: ``Present("")`` filters on the empty
string, while ``ABSENT`` means "do not filter on this field at all".
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Final, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Present(Generic[T]):
    """A filter value that was supplied."""

    value: T

    @property
    def is_present(self) -> bool:
        return True

    def map(self, func: Callable[[T], U]) -> Present[U]:
        return Present(func(self.value))

    def get_or(self, default: Any) -> T:
        return self.value


class Absent:
    """The "no value supplied" marker type; its only instance is :data:`ABSENT`."""

    __slots__ = ()
    _instance: Absent | None = None

    def __new__(cls) -> Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def is_present(self) -> bool:
        return False

    def map(self, func: Callable[[Any], Any]) -> Absent:
        return self

    def get_or(self, default: U) -> U:
        return default

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT: Final = Absent()

Maybe = Union[Present[T], Absent]


def of_nullable(value: T | None) -> Maybe[T]:
    """Adapt a nullable value (e.g. an unset request parameter) to :data:`Maybe`.

    This is the single place where ``None`` is read as "absent"; callers that
    want to filter on ``None`` should use ``is_null`` instead.
    """
    return ABSENT if value is None else Present(value)


def of_blank(value: str | None) -> Maybe[str]:
    """Like :func:`of_nullable`, but blank strings are absent too."""
    if value is None or not value.strip():
        return ABSENT
    return Present(value)


def is_maybe(value: object) -> bool:
    return isinstance(value, (Present, Absent))
