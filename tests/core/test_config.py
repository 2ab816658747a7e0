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
"""Tests for Config loading, env overrides and binding."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest

from querylab.core.config import Config, config_properties
from querylab.data.pageable import NullHandling, PaginationProperties


class TestConfigLookup:
    def test_get_nested_value(self):
        config = Config({"querylab": {"data": {"pagination": {"max_size": 50}}}})
        assert config.get("querylab.data.pagination.max_size") == 50

    def test_get_with_default(self):
        assert Config({}).get("missing.key", "default") == "default"

    def test_env_key(self):
        assert Config.env_key("querylab.data.pagination.max-size") == "QUERYLAB_DATA_PAGINATION_MAX_SIZE"

    def test_env_var_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("QUERYLAB_LOGGING_FORMAT", "json")
        config = Config({"querylab": {"logging": {"format": "console"}}})
        assert config.get("querylab.logging.format") == "json"

    def test_placeholder_from_other_key(self):
        config = Config({"db": {"host": "localhost", "url": "sqlite://${db.host}/app"}})
        assert config.get("db.url") == "sqlite://localhost/app"

    def test_placeholder_default(self):
        config = Config({"db": {"url": "${DB_URL_UNSET_FOR_TEST:sqlite://}"}})
        assert config.get("db.url") == "sqlite://"

    def test_placeholder_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("QL_TEST_HOST", "db.internal")
        config = Config({"db": {"url": "postgresql://${QL_TEST_HOST}/app"}})
        assert config.get("db.url") == "postgresql://db.internal/app"

    def test_unresolvable_placeholder(self):
        with pytest.raises(ValueError):
            Config({"a": "${nowhere.to.be.found}"}).get("a")

    def test_circular_placeholder(self):
        with pytest.raises(ValueError):
            Config({"a": "${b}", "b": "${a}"}).get("a")

    def test_get_section_is_a_copy(self):
        config = Config({"querylab": {"logging": {"level": {"root": "INFO"}}}})
        section = config.get_section("querylab.logging.level")
        section.pop("root")
        assert config.get("querylab.logging.level.root") == "INFO"


class TestLoading:
    def test_packaged_defaults(self):
        config = Config.from_sources("/nonexistent-dir")
        assert config.get("querylab.data.pagination.default_size") == 20
        assert config.get("querylab.data.pagination.default_null_handling") == "nulls_last"
        assert config.get("querylab.logging.format") == "console"

    def test_yaml_file_over_defaults(self, tmp_path: Path):
        (tmp_path / "querylab.yaml").write_text("querylab:\n  data:\n    pagination:\n      max_size: 100\n")
        config = Config.from_sources(tmp_path)
        assert config.get("querylab.data.pagination.max_size") == 100
        assert config.get("querylab.data.pagination.default_size") == 20

    def test_toml_in_config_dir(self, tmp_path: Path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "querylab.toml").write_text('[querylab.logging]\nformat = "json"\n')
        config = Config.from_sources(tmp_path, load_defaults=False)
        assert config.get("querylab.logging.format") == "json"
        assert config.get("querylab.data.pagination.default_size") is None

    def test_root_file_wins_over_config_dir(self, tmp_path: Path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "querylab.yaml").write_text("app:\n  name: from-config-dir\n")
        (tmp_path / "querylab.yaml").write_text("app:\n  name: from-root\n")
        assert Config.from_sources(tmp_path).get("app.name") == "from-root"

    def test_profile_overlay(self, tmp_path: Path):
        (tmp_path / "querylab.yaml").write_text("app:\n  name: base\n  port: 8080\n")
        (tmp_path / "querylab-dev.yaml").write_text("app:\n  port: 9090\n")
        config = Config.from_sources(tmp_path, active_profiles=["dev"])
        assert config.get("app.port") == 9090
        assert config.get("app.name") == "base"
        assert any("profile: dev" in source for source in config.loaded_sources)

    def test_from_file(self, tmp_path: Path):
        path = tmp_path / "custom.yaml"
        path.write_text("querylab:\n  logging:\n    format: json\n")
        config = Config.from_file(path)
        assert config.get("querylab.logging.format") == "json"
        assert config.loaded_sources[-1] == str(path)


class TestBinding:
    def test_bind_pagination_properties(self):
        config = Config(
            {"querylab": {"data": {"pagination": {"max_size": 100, "default_null_handling": "nulls_first"}}}}
        )
        props = config.bind(PaginationProperties)
        assert props.max_size == 100
        assert props.default_size == 20
        assert props.default_null_handling is NullHandling.NULLS_FIRST

    def test_bind_env_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("QUERYLAB_DATA_PAGINATION_DEFAULT_SIZE", "15")
        assert Config({}).bind(PaginationProperties).default_size == 15

    def test_bind_invalid_value(self):
        config = Config({"querylab": {"data": {"pagination": {"default_size": 0}}}})
        with pytest.raises(ValueError, match="PaginationProperties"):
            config.bind(PaginationProperties)

    def test_bind_dataclass_coerces_strings(self, monkeypatch: pytest.MonkeyPatch):
        @config_properties(prefix="querylab.cache")
        @dataclass
        class CacheProperties:
            enabled: bool = False
            ttl: int = 60

        monkeypatch.setenv("QUERYLAB_CACHE_TTL", "120")
        props = Config({"querylab": {"cache": {"enabled": "true"}}}).bind(CacheProperties)
        assert props.enabled is True
        assert props.ttl == 120

    def test_bind_requires_decorator(self):
        @dataclass
        class Plain:
            value: int = 1

        with pytest.raises(ValueError):
            Config({}).bind(Plain)
