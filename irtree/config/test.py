"""Tests for configuration management."""

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_environment,
    get_environment_info,
    get_id_prefix,
    get_log_level,
    get_move_mode,
    get_property_checks_enabled,
    get_wide_node_threshold,
    list_environment_variables,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("IRTREE_WIDE_NODE_THRESHOLD", raising=False)
        assert get_environment(EnvVar.WIDE_NODE_THRESHOLD) == 100

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("IRTREE_WIDE_NODE_THRESHOLD", "9999")
        assert get_environment(EnvVar.WIDE_NODE_THRESHOLD, override=5) == 5

    @pytest.mark.unit
    def test_int_type_conversion(self, monkeypatch):
        """Integer type conversion from string."""
        monkeypatch.setenv("IRTREE_WIDE_NODE_THRESHOLD", "12")
        result = get_environment(EnvVar.WIDE_NODE_THRESHOLD)
        assert result == 12
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_invalid_int_returns_default(self, monkeypatch):
        """Invalid integer value returns default."""
        monkeypatch.setenv("IRTREE_WIDE_NODE_THRESHOLD", "lots")
        assert get_environment(EnvVar.WIDE_NODE_THRESHOLD) == 100

    @pytest.mark.unit
    def test_string_type(self, monkeypatch):
        """String type returns as-is."""
        monkeypatch.setenv("IRTREE_ID_PREFIX", "node")
        result = get_environment(EnvVar.ID_PREFIX)
        assert result == "node"
        assert isinstance(result, str)

    @pytest.mark.unit
    def test_choices_are_case_insensitive(self, monkeypatch):
        """Choice-restricted values are normalized to the declared spelling."""
        monkeypatch.setenv("IRTREE_MOVE_MODE", "Transactional")
        assert get_environment(EnvVar.MOVE_MODE) == "transactional"

    @pytest.mark.unit
    def test_unknown_choice_returns_default(self, monkeypatch):
        """Values outside the declared choices fall back to the default."""
        monkeypatch.setenv("IRTREE_MOVE_MODE", "atomic")
        assert get_environment(EnvVar.MOVE_MODE) == "faithful"

    @pytest.mark.unit
    @pytest.mark.parametrize("raw", ["false", "0", "NO", " False "])
    def test_bool_false_spellings(self, monkeypatch, raw):
        """Boolean values accept true/false, 1/0 and yes/no."""
        monkeypatch.setenv("IRTREE_PROPERTY_CHECKS", raw)
        assert get_environment(EnvVar.PROPERTY_CHECKS) is False

    @pytest.mark.unit
    def test_bool_true(self, monkeypatch):
        monkeypatch.setenv("IRTREE_PROPERTY_CHECKS", "yes")
        assert get_environment(EnvVar.PROPERTY_CHECKS) is True

    @pytest.mark.unit
    def test_invalid_bool_returns_default(self, monkeypatch):
        """Unrecognized boolean value returns default."""
        monkeypatch.setenv("IRTREE_PROPERTY_CHECKS", "maybe")
        assert get_environment(EnvVar.PROPERTY_CHECKS) is True


class TestGetEnvironmentInfo:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_returns_env_config(self):
        """Returns EnvConfig dataclass."""
        info = get_environment_info(EnvVar.MOVE_MODE)
        assert isinstance(info, EnvConfig)
        assert info.name == "IRTREE_MOVE_MODE"
        assert info.default == "faithful"
        assert info.var_type is str
        assert info.category == "mutation"

    @pytest.mark.unit
    def test_all_names_are_prefixed(self):
        """Every variable lives in the IRTREE_ namespace."""
        for var in EnvVar:
            assert var.value.name.startswith("IRTREE_")
            assert var.value.description


class TestConvenienceFunctions:
    """Tests for the typed helper accessors."""

    @pytest.mark.unit
    def test_id_prefix_default(self, monkeypatch):
        monkeypatch.delenv("IRTREE_ID_PREFIX", raising=False)
        assert get_id_prefix() == "component"

    @pytest.mark.unit
    def test_id_prefix_empty_env_falls_back(self, monkeypatch):
        monkeypatch.setenv("IRTREE_ID_PREFIX", "")
        assert get_id_prefix() == "component"

    @pytest.mark.unit
    def test_move_mode_override(self):
        assert get_move_mode("transactional") == "transactional"

    @pytest.mark.unit
    def test_wide_node_threshold_env(self, monkeypatch):
        monkeypatch.setenv("IRTREE_WIDE_NODE_THRESHOLD", "3")
        assert get_wide_node_threshold() == 3

    @pytest.mark.unit
    def test_log_level_default(self, monkeypatch):
        monkeypatch.delenv("IRTREE_LOG_LEVEL", raising=False)
        assert get_log_level() == "INFO"

    @pytest.mark.unit
    def test_property_checks_default_and_override(self):
        assert get_property_checks_enabled() is True
        assert get_property_checks_enabled(False) is False


class TestListEnvironmentVariables:
    """Tests for listing environment variables."""

    @pytest.mark.unit
    def test_lists_all(self):
        assert set(list_environment_variables()) == set(EnvVar)

    @pytest.mark.unit
    def test_filter_by_category(self):
        mutation_vars = list_environment_variables("mutation")
        assert EnvVar.ID_PREFIX in mutation_vars
        assert EnvVar.MOVE_MODE in mutation_vars
        assert EnvVar.LOG_LEVEL not in mutation_vars
        assert EnvVar.PROPERTY_CHECKS in list_environment_variables("validation")

    @pytest.mark.unit
    def test_unknown_category_is_empty(self):
        assert list_environment_variables("docker") == []
