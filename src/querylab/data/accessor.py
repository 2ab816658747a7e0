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
"""Field access on records of any shape.

Records may be mappings, dataclasses, pydantic models or ORM entities. Dotted
paths (``team.name``) walk through related records; a missing attribute or a
``None`` hop reads as ``None``. A hop that lands on a collection of related
records (``team.members``) is a to-many hop: see :func:`is_collection`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def read_attribute(record: Any, name: str) -> Any:
    """One hop: ``record[name]`` for mappings, ``getattr`` otherwise."""
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def is_collection(value: Any) -> bool:
    """True for list/set/tuple containers of related records.

    Named tuples are records in their own right and are not collections.
    """
    if isinstance(value, tuple):
        return not hasattr(value, "_fields")
    return isinstance(value, (list, set, frozenset))


def read_field(record: Any, path: str) -> Any:
    """Return the value at *path* on *record*, or ``None`` when unreachable."""
    current = record
    for part in path.split("."):
        if current is None:
            return None
        current = read_attribute(current, part)
    return current


def write_field(record: Any, path: str, value: Any) -> None:
    """Assign *value* at *path*; intermediate hops must already exist."""
    head, _, leaf = path.rpartition(".")
    target = read_field(record, head) if head else record
    if target is None:
        raise AttributeError(f"Cannot assign '{path}': '{head}' is not set")
    if isinstance(target, dict):
        target[leaf] = value
    else:
        setattr(target, leaf, value)
