"""
Tests for the tool type registry and config decoding.
"""

import types

import pytest

from toolbox.core.exceptions import ConfigDecodeError, RegistrationConflictError
from toolbox.core.loader import load_tool_configs
from toolbox.core.registry import ToolRegistry, build_registry
from toolbox.tools.mysql import list_table_stats
from toolbox.tools.mysql.list_table_stats import ListTableStatsConfig


def _factory(label):
    def factory(name, raw):
        return (label, name, dict(raw))
    return factory


class TestToolRegistry:
    """Tests for ToolRegistry registration and lookup."""

    def test_register_and_decode(self):
        registry = ToolRegistry()
        assert registry.register("echo", _factory("first"))
        assert "echo" in registry
        assert registry.decode("echo", "t", {"a": 1}) == ("first", "t", {"a": 1})

    def test_duplicate_registration_keeps_first(self):
        registry = ToolRegistry()
        first = _factory("first")
        assert registry.register("echo", first) is True
        assert registry.register("echo", _factory("second")) is False
        assert registry.get_factory("echo") is first
        assert registry.decode("echo", "t", {})[0] == "first"

    def test_register_or_raise(self):
        registry = ToolRegistry()
        registry.register_or_raise("echo", _factory("first"))
        with pytest.raises(RegistrationConflictError) as exc:
            registry.register_or_raise("echo", _factory("second"))
        assert exc.value.details["tool_type"] == "echo"

    def test_unknown_type(self):
        registry = ToolRegistry()
        with pytest.raises(ConfigDecodeError, match="unknown tool type"):
            registry.decode("missing", "t", {})

    def test_unhashable_type(self):
        registry = ToolRegistry()
        with pytest.raises(ConfigDecodeError, match="unknown tool type"):
            registry.decode(["a", "b"], "t", {})

    def test_types_sorted(self):
        registry = ToolRegistry()
        registry.register("b", _factory("b"))
        registry.register("a", _factory("a"))
        assert registry.types() == ["a", "b"]
        assert len(registry) == 2


class TestBuildRegistry:
    """Tests for startup registry construction."""

    def test_builtin_types(self, registry):
        assert list_table_stats.TOOL_TYPE in registry

    def test_conflicting_modules_fail_startup(self):
        with pytest.raises(RegistrationConflictError):
            build_registry([list_table_stats, list_table_stats])

    def test_custom_modules(self):
        module = types.SimpleNamespace(
            register=lambda registry: registry.register_or_raise("custom", _factory("custom"))
        )
        registry = build_registry([module])
        assert registry.types() == ["custom"]

    def test_registries_are_independent(self):
        assert build_registry() is not build_registry()


class TestConfigDecode:
    """Tests for decoding tool configuration documents."""

    @pytest.fixture
    def raw(self):
        return {
            "type": "mysql-list-table-stats",
            "source": "my-mysql",
            "description": "Statistics for every user table",
            "authRequired": ["my-google-auth"],
        }

    def test_decode(self, registry, raw):
        config = registry.decode("mysql-list-table-stats", "stats", raw)

        assert isinstance(config, ListTableStatsConfig)
        assert config.name == "stats"
        assert config.source == "my-mysql"
        assert config.auth_required == ("my-google-auth",)
        assert config.tool_config_type() == "mysql-list-table-stats"

    def test_auth_required_optional(self, registry, raw):
        del raw["authRequired"]
        config = registry.decode("mysql-list-table-stats", "stats", raw)
        assert config.auth_required == ()

    def test_null_auth_required(self, registry, raw):
        raw["authRequired"] = None
        config = registry.decode("mysql-list-table-stats", "stats", raw)
        assert config.auth_required == ()
        assert config.initialize().authorized([])

    def test_bare_auth_required_key_in_yaml(self, registry, tmp_path):
        path = tmp_path / "tools.yaml"
        path.write_text(
            "tools:\n"
            "  stats:\n"
            "    type: mysql-list-table-stats\n"
            "    source: db\n"
            "    description: Per-table statistics\n"
            "    authRequired:\n"
        )
        configs = load_tool_configs(path, registry)
        assert configs["stats"].auth_required == ()

    def test_name_in_document_wins(self, registry, raw):
        raw["name"] = "explicit"
        assert registry.decode("mysql-list-table-stats", "stats", raw).name == "explicit"

    @pytest.mark.parametrize("field", ["source", "description", "type"])
    def test_missing_required_field(self, registry, raw, field):
        del raw[field]
        with pytest.raises(ConfigDecodeError) as exc:
            registry.decode("mysql-list-table-stats", "stats", raw)
        assert exc.value.details["tool_name"] == "stats"
        assert exc.value.status_code == 422

    def test_unknown_field_rejected(self, registry, raw):
        raw["statement"] = "DROP TABLE users"
        with pytest.raises(ConfigDecodeError):
            registry.decode("mysql-list-table-stats", "stats", raw)

    def test_wrong_field_type_rejected(self, registry, raw):
        raw["authRequired"] = "my-google-auth"
        with pytest.raises(ConfigDecodeError):
            registry.decode("mysql-list-table-stats", "stats", raw)

    def test_type_mismatch_rejected(self, registry, raw):
        raw["type"] = "postgres-list-table-stats"
        with pytest.raises(ConfigDecodeError, match="type must be"):
            registry.decode("mysql-list-table-stats", "stats", raw)

    def test_non_mapping_rejected(self, registry):
        with pytest.raises(ConfigDecodeError, match="must be a mapping"):
            registry.decode("mysql-list-table-stats", "stats", ["not", "a", "mapping"])

    def test_config_is_immutable(self, registry, raw):
        config = registry.decode("mysql-list-table-stats", "stats", raw)
        with pytest.raises(Exception):
            config.source = "other"
