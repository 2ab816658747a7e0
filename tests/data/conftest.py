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
"""Shared record fixtures for the data tests."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from querylab.data.adapters.memory import InMemoryStorage


@dataclass
class Team:
    name: str
    members: list[Member] = field(default_factory=list, repr=False, compare=False)


@dataclass
class Member:
    username: str
    age: int | None
    team: Team | None = None


@pytest.fixture
def teams() -> tuple[Team, Team]:
    return Team("teamA"), Team("teamB")


@pytest.fixture
def members(teams: tuple[Team, Team]) -> list[Member]:
    team_a, team_b = teams
    result = [
        Member("member1", 10, team_a),
        Member("member2", 20, team_a),
        Member("member3", 30, team_b),
        Member("member4", 40, team_b),
    ]
    for member in result:
        member.team.members.append(member)  # type: ignore[union-attr]
    return result


@pytest.fixture
def storage(members: list[Member]) -> InMemoryStorage:
    return InMemoryStorage(members)
