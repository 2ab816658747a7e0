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
"""querylab data: predicates, pagination, projections and storage ports.

Adapters:
    - ``querylab.data.adapters.memory``: in-memory reference storage.
    - ``querylab.data.adapters.sqlalchemy``: SQLAlchemy ORM storage.

The SQLAlchemy adapter is not re-exported here; import it from its package.
"""

from querylab.data.adapters.memory import InMemoryStorage
from querylab.data.builder import FilterCondition, PredicateBuilder, build_predicate
from querylab.data.filter import FilterUtils
from querylab.data.mapper import Mapper, MappingConfig
from querylab.data.mutation import Assignment, AssignmentKind, Delete, Update
from querylab.data.optional import ABSENT, Absent, Maybe, Present, of_blank, of_nullable
from querylab.data.page import Page, Slice, paginate, paginate_lazily, paginate_slice
from querylab.data.pageable import (
    Direction,
    NullHandling,
    Order,
    PageRequest,
    PaginationProperties,
    Sort,
)
from querylab.data.path import Path
from querylab.data.ports.outbound import StoragePort
from querylab.data.predicate import (
    MATCH_ALL,
    Comparison,
    Conjunction,
    Disjunction,
    Negation,
    Operator,
    Predicate,
    and_all,
    negate,
    or_any,
)
from querylab.data.projection import Projection, Projections, is_projection, projection
from querylab.data.query import DeleteClause, Query, QueryFactory, UpdateClause
from querylab.data.query_parser import ParsedQuery, QueryMethodParser
from querylab.data.sorting import sort_records

__all__ = [
    # Optional values
    "ABSENT",
    "Absent",
    "Maybe",
    "Present",
    "of_blank",
    "of_nullable",
    # Predicates
    "MATCH_ALL",
    "Comparison",
    "Conjunction",
    "Disjunction",
    "Negation",
    "Operator",
    "Path",
    "Predicate",
    "and_all",
    "negate",
    "or_any",
    "FilterCondition",
    "FilterUtils",
    "PredicateBuilder",
    "build_predicate",
    # Pagination
    "Direction",
    "NullHandling",
    "Order",
    "Page",
    "PageRequest",
    "PaginationProperties",
    "Slice",
    "Sort",
    "paginate",
    "paginate_lazily",
    "paginate_slice",
    "sort_records",
    # Projections
    "Mapper",
    "MappingConfig",
    "Projection",
    "Projections",
    "is_projection",
    "projection",
    # Queries
    "Assignment",
    "AssignmentKind",
    "Delete",
    "DeleteClause",
    "ParsedQuery",
    "Query",
    "QueryFactory",
    "QueryMethodParser",
    "Update",
    "UpdateClause",
    # Storage
    "InMemoryStorage",
    "StoragePort",
]
