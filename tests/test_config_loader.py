"""Tests for config/loader.py.

Tests for configuration file discovery and parsing.
"""

import pytest
import yaml
from hieravault.config.loader import LoadedConfig, get_config_path, load_config, parse_config
from hieravault.config.settings import OverrideBehavior
from hieravault.errors import ConfigInvalidError


@pytest.fixture
def isolated_dirs(tmp_path, monkeypatch):
    """Run with an empty working directory and home."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    return work, home


class TestGetConfigPath:
    """Tests for get_config_path."""

    def test_explicit_path(self, tmp_path):
        """Returns an explicit path that exists."""
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("vault: {}\n")

        assert get_config_path(config_file) == config_file

    def test_explicit_path_missing(self, tmp_path):
        """A missing explicit path is an error."""
        with pytest.raises(ConfigInvalidError):
            get_config_path(tmp_path / "missing.yaml")

    def test_current_directory(self, isolated_dirs):
        """Finds hieravault.yaml in the working directory."""
        work, _ = isolated_dirs
        (work / "hieravault.yaml").write_text("vault: {}\n")

        assert get_config_path() == work / "hieravault.yaml"

    def test_home_directory(self, isolated_dirs):
        """Falls back to ~/.hieravault/config.yaml."""
        _, home = isolated_dirs
        config_file = home / ".hieravault" / "config.yaml"
        config_file.parent.mkdir()
        config_file.write_text("vault: {}\n")

        assert get_config_path() == config_file

    def test_none_found(self, isolated_dirs):
        """Returns None when nothing is found."""
        assert get_config_path() is None


class TestParseConfig:
    """Tests for parse_config."""

    def test_full_config(self):
        """Parses hierarchy and vault sections."""
        loaded = parse_config(
            {
                "hierarchy": ["nodes/%{fqdn}", "common"],
                "vault": {
                    "override_behavior": "flag",
                    "use_hierarchy": True,
                    "default_field": "value",
                },
            }
        )

        assert loaded.hierarchy == ["nodes/%{fqdn}", "common"]
        assert loaded.backend.override_behavior == OverrideBehavior.FLAG
        assert loaded.backend.use_hierarchy is True
        assert loaded.backend.default_field == "value"

    def test_single_hierarchy_level(self):
        """A string hierarchy becomes a one-element list."""
        assert parse_config({"hierarchy": "common"}).hierarchy == ["common"]

    def test_invalid_hierarchy(self):
        """Hierarchy must be a list."""
        with pytest.raises(ConfigInvalidError):
            parse_config({"hierarchy": {"a": 1}})

    def test_invalid_vault_section(self):
        """The vault section must be a mapping."""
        with pytest.raises(ConfigInvalidError):
            parse_config({"vault": ["secret"]})

    def test_not_a_mapping(self):
        """The document must be a mapping."""
        with pytest.raises(ConfigInvalidError):
            parse_config(["vault"])


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self, isolated_dirs):
        """Returns defaults when no file exists."""
        loaded = load_config()

        assert isinstance(loaded, LoadedConfig)
        assert loaded.path is None
        assert loaded.hierarchy == []
        assert loaded.backend.mounts == ("secret",)

    def test_loads_yaml(self, tmp_path):
        """Loads settings from YAML."""
        config_file = tmp_path / "hieravault.yaml"
        config_file.write_text(
            yaml.dump(
                {
                    "hierarchy": ["%{environment}", "common"],
                    "vault": {"mounts": {"generic": ["kv"]}, "use_hierarchy": "yes"},
                }
            )
        )

        loaded = load_config(config_file)

        assert loaded.path == config_file
        assert loaded.hierarchy == ["%{environment}", "common"]
        assert loaded.backend.mounts == ("kv",)
        assert loaded.backend.use_hierarchy is True

    def test_yaml_yes_is_boolean(self, tmp_path):
        """Unquoted yes parses as a boolean and is accepted."""
        config_file = tmp_path / "hieravault.yaml"
        config_file.write_text("vault:\n  use_hierarchy: yes\n")

        assert load_config(config_file).backend.use_hierarchy is True

    def test_invalid_yaml(self, tmp_path):
        """Malformed YAML is a configuration error."""
        config_file = tmp_path / "hieravault.yaml"
        config_file.write_text("vault: [unclosed\n")

        with pytest.raises(ConfigInvalidError):
            load_config(config_file)

    def test_invalid_value(self, tmp_path):
        """Invalid enum values in the file fail loading."""
        config_file = tmp_path / "hieravault.yaml"
        config_file.write_text("vault:\n  default_field_parse: xml\n")

        with pytest.raises(ConfigInvalidError):
            load_config(config_file)
