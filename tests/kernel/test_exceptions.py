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
"""Tests for the querylab exception hierarchy."""

from querylab.kernel.exceptions import (
    BusinessException,
    InfrastructureException,
    InvalidArgumentException,
    NonUniqueResultException,
    QueryLabException,
    StorageException,
    ValidationException,
)


class TestQueryLabException:
    def test_basic_creation(self):
        exc = QueryLabException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.message == "something went wrong"
        assert exc.code is None
        assert exc.context == {}

    def test_with_code_and_context(self):
        exc = QueryLabException("bad", code="BAD", context={"field": "age"})
        assert exc.code == "BAD"
        assert exc.context["field"] == "age"

    def test_context_defaults_to_empty_dict(self):
        exc = QueryLabException("test")
        exc.context["key"] = "value"
        assert QueryLabException("test2").context == {}


class TestExceptionHierarchy:
    def test_business_branch(self):
        assert issubclass(BusinessException, QueryLabException)
        assert issubclass(ValidationException, BusinessException)
        assert issubclass(InvalidArgumentException, ValidationException)
        assert issubclass(NonUniqueResultException, BusinessException)

    def test_infrastructure_branch(self):
        assert issubclass(InfrastructureException, QueryLabException)
        assert issubclass(StorageException, InfrastructureException)


class TestInvalidArgumentException:
    def test_code_and_context(self):
        exc = InvalidArgumentException("size must be >= 1", argument="size", value=0)
        assert exc.code == "INVALID_ARGUMENT"
        assert exc.context == {"argument": "size", "value": 0}
        assert exc.argument == "size"
        assert exc.value == 0

    def test_without_argument(self):
        assert InvalidArgumentException("bad input").context == {}


class TestNonUniqueResultException:
    def test_carries_count(self):
        exc = NonUniqueResultException(3)
        assert exc.count == 3
        assert exc.code == "NON_UNIQUE_RESULT"
        assert "3" in str(exc)
