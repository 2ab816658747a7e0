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
"""Query by Example helpers.

Build equality predicates from keyword arguments, dicts or example objects::

    FilterUtils.by(username="member1", age=10)
    FilterUtils.from_dict({"username": Present("member1"), "age": ABSENT})
    FilterUtils.from_example(MemberSearch(username=Present("member1")))

Values wrapped in :class:`Present` / :data:`ABSENT` follow the optional
semantics of :func:`~querylab.data.builder.build_predicate`. For dicts and
examples, bare values are taken as present, except that a bare ``None`` is
an unset example field and is skipped.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from pydantic import BaseModel

from querylab.data.builder import FilterCondition, build_predicate
from querylab.data.optional import Present, is_maybe, of_nullable
from querylab.data.predicate import Operator, Predicate


class FilterUtils:
    """Generate AND-ed equality predicates dynamically."""

    @staticmethod
    def by(**kwargs: Any) -> Predicate:
        """All keyword arguments become ``eq`` conditions (``None`` is rejected)."""
        return build_predicate(
            FilterCondition(field, Operator.EQ, value if is_maybe(value) else Present(value))
            for field, value in kwargs.items()
        )

    @staticmethod
    def from_dict(filters: dict[str, Any]) -> Predicate:
        """Create a predicate from a ``field -> value`` mapping."""
        return build_predicate(FilterUtils._conditions(filters))

    @staticmethod
    def from_example(example: Any) -> Predicate:
        """Create a predicate from a dataclass, pydantic model or plain object."""
        if dataclasses.is_dataclass(example) and not isinstance(example, type):
            fields = {f.name: getattr(example, f.name) for f in dataclasses.fields(example)}
        elif isinstance(example, BaseModel):
            fields = {name: getattr(example, name) for name in type(example).model_fields}
        else:
            fields = {k: v for k, v in vars(example).items() if not k.startswith("_")}
        return build_predicate(FilterUtils._conditions(fields))

    @staticmethod
    def _conditions(values: dict[str, Any]) -> list[FilterCondition]:
        return [
            FilterCondition(field, Operator.EQ, value if is_maybe(value) else of_nullable(value))
            for field, value in values.items()
        ]
