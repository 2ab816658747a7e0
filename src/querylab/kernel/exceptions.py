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
"""Exception hierarchy for querylab.

Every error raised by the library derives from :class:`QueryLabException`,
which carries a machine-readable ``code`` and a ``context`` dict. Errors
raised by a storage driver (for example SQLAlchemy) are not wrapped and
reach the caller unchanged.
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# Base Exception
# =============================================================================


class QueryLabException(Exception):
    """Base exception for all querylab errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "INVALID_ARGUMENT").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.context: dict[str, Any] = context if context is not None else {}


# =============================================================================
# Business Exceptions
# =============================================================================


class BusinessException(QueryLabException):
    """Errors caused by the caller's input rather than the environment."""


class ValidationException(BusinessException):
    """Input validation failures."""


class InvalidArgumentException(ValidationException):
    """A filter, page request or page computation received malformed input."""

    def __init__(
        self,
        message: str,
        *,
        argument: str | None = None,
        value: Any = None,
    ) -> None:
        context: dict[str, Any] = {}
        if argument is not None:
            context["argument"] = argument
            context["value"] = value
        super().__init__(message, code="INVALID_ARGUMENT", context=context)
        self.argument = argument
        self.value = value


class NonUniqueResultException(BusinessException):
    """A single-result query matched more than one record."""

    def __init__(self, count: int) -> None:
        super().__init__(
            f"Expected at most one result but found {count}",
            code="NON_UNIQUE_RESULT",
            context={"count": count},
        )
        self.count = count


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(QueryLabException):
    """Failures of the storage collaborator or its configuration."""


class StorageException(InfrastructureException):
    """A storage adapter cannot serve the request (e.g. unknown column or relation)."""
