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
"""Layered configuration: packaged defaults, YAML/TOML files and env vars.

Keys use dot notation (``querylab.data.pagination.max_size``). Any key can be
overridden by an environment variable named ``QUERYLAB_`` followed by the key
without its ``querylab.`` prefix, upper-cased, with dots and dashes turned
into underscores (``QUERYLAB_DATA_PAGINATION_MAX_SIZE``).
"""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, cast, get_type_hints

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

T = TypeVar("T")

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")

_CONFIG_PREFIX_ATTR = "__querylab_config_prefix__"

_ENV_PREFIX = "QUERYLAB_"

_MAX_PLACEHOLDER_DEPTH = 10


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a dataclass or pydantic model as bindable to a config prefix.

    Usage::

        @config_properties(prefix="querylab.data.pagination")
        class PaginationProperties(BaseModel):
            default_size: int = 20
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PREFIX_ATTR, prefix)
        return cls

    return decorator


def _walk(data: dict[str, Any], key: str) -> Any:
    current: Any = data
    for part in key.split("."):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
        if current is None:
            return None
    return current


class Config:
    """Hierarchical configuration with dot-notation access.

    Priority (highest wins):

    1. Environment variables (``QUERYLAB_*``)
    2. Values loaded from files or passed as a dict
    3. Defaults declared on the bound dataclass / model
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """Config sources merged into this instance, in merge order."""
        return list(self._loaded_sources)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    @classmethod
    def from_sources(
        cls,
        base_dir: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Load and merge configuration files found under *base_dir*.

        Merge order (later wins):

        1. Packaged defaults (``querylab-defaults.yaml``)
        2. ``config/querylab.yaml`` or ``config/querylab.toml``
        3. ``querylab.yaml`` or ``querylab.toml``
        4. Profile overlays ``querylab-{profile}.yaml|toml`` in both locations
        """
        base_dir = Path(base_dir)
        data: dict[str, Any] = {}
        sources: list[str] = []

        if load_defaults:
            data = cls._load_packaged_defaults()
            sources.append("querylab-defaults.yaml (packaged defaults)")

        candidates: list[tuple[Path, str | None]] = []
        for search_dir in (base_dir / "config", base_dir):
            candidates.extend((search_dir / f"querylab{ext}", None) for ext in (".yaml", ".toml"))
        for profile in active_profiles or []:
            for search_dir in (base_dir / "config", base_dir):
                candidates.extend(
                    (search_dir / f"querylab-{profile}{ext}", profile) for ext in (".yaml", ".toml")
                )

        for candidate, profile in candidates:
            if candidate.is_file():
                data = cls._deep_merge(data, cls._load_file(candidate))
                sources.append(f"{candidate} (profile: {profile})" if profile else str(candidate))

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @classmethod
    def from_file(cls, path: str | Path, load_defaults: bool = True) -> Config:
        """Load a single YAML or TOML file on top of the packaged defaults."""
        path = Path(path)
        data: dict[str, Any] = {}
        sources: list[str] = []
        if load_defaults:
            data = cls._load_packaged_defaults()
            sources.append("querylab-defaults.yaml (packaged defaults)")
        if path.is_file():
            data = cls._deep_merge(data, cls._load_file(path))
            sources.append(str(path))
        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @staticmethod
    def _load_file(path: Path) -> dict[str, Any]:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f) or {}
        with open(path) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _load_packaged_defaults() -> dict[str, Any]:
        defaults = importlib.resources.files("querylab.resources").joinpath("querylab-defaults.yaml")
        with importlib.resources.as_file(defaults) as p, open(p) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        merged = dict(base)
        for key, value in override.items():
            if isinstance(merged.get(key), dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @staticmethod
    def env_key(key: str) -> str:
        """Return the environment variable that overrides *key*."""
        base = key.removeprefix("querylab.")
        return _ENV_PREFIX + base.upper().replace(".", "_").replace("-", "_")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, checking env vars first.

        String values may contain ``${ENV_VAR}``, ``${other.key}`` or
        ``${key:default}`` placeholders.
        """
        env_val = os.environ.get(self.env_key(key))
        if env_val is not None:
            return env_val

        value = _walk(self._data, key)
        if value is None:
            return default
        if isinstance(value, str) and "${" in value:
            return self._resolve_placeholders(value)
        return value

    def _resolve_placeholders(self, value: str, _depth: int = 0) -> str:
        if _depth > _MAX_PLACEHOLDER_DEPTH:
            raise ValueError(f"Circular placeholder reference while resolving '{value}'")

        def _replace(match: re.Match[str]) -> str:
            ref_key, _, fallback = match.group(1).partition(":")
            env_val = os.environ.get(ref_key)
            if env_val is not None:
                return env_val
            found = _walk(self._data, ref_key)
            if found is not None:
                resolved = str(found)
                if "${" in resolved:
                    resolved = self._resolve_placeholders(resolved, _depth + 1)
                return resolved
            if ":" in match.group(1):
                return fallback
            raise ValueError(f"Cannot resolve placeholder '${{{match.group(1)}}}'")

        return _PLACEHOLDER_RE.sub(_replace, value)

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Return the raw mapping stored under *prefix* (empty if missing)."""
        section = _walk(self._data, prefix)
        return dict(section) if isinstance(section, dict) else {}

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    def bind(self, config_cls: type[T]) -> T:
        """Bind the section named by ``@config_properties`` to *config_cls*.

        Environment overrides are applied per field before validation.
        Pydantic models are validated with ``model_validate``; dataclasses get
        simple ``int`` / ``float`` / ``bool`` coercion of string values.
        """
        prefix = getattr(config_cls, _CONFIG_PREFIX_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        section = self.get_section(prefix)

        if issubclass(config_cls, BaseModel):
            for name in config_cls.model_fields:
                env_val = os.environ.get(self.env_key(f"{prefix}.{name}"))
                if env_val is not None:
                    section[name] = env_val
            try:
                return cast(T, config_cls.model_validate(section))
            except ValidationError as exc:
                raise ValueError(
                    f"Configuration validation failed for '{config_cls.__name__}' (prefix='{prefix}'):\n{exc}"
                ) from exc

        hints = get_type_hints(config_cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            value = self.get(f"{prefix}.{field.name}")
            if value is None:
                continue
            expected = hints.get(field.name)
            if isinstance(value, str):
                if expected is int:
                    value = int(value)
                elif expected is float:
                    value = float(value)
                elif expected is bool:
                    value = value.lower() in ("true", "1", "yes")
            kwargs[field.name] = value
        return config_cls(**kwargs)
