"""
Tests for configuration loading — analytics.yml and module definitions.
"""

import textwrap
from pathlib import Path

import pytest

from modular_analytics.core.config.loader import (
    ConfigError,
    find_settings_file,
    load_module_definition,
    load_settings,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("MA_STATE_FILE", "MA_LOG_LEVEL", "MA_LOG_FILE", "MA_LOG_FILE_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:
    def test_defaults_without_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = load_settings()
        assert settings.log_level == "WARNING"
        assert settings.log_path() is None
        assert settings.state_path() == (tmp_path / ".state" / "analytics.json").resolve()

    def test_load_file(self, tmp_path: Path):
        config = tmp_path / "analytics.yml"
        config.write_text(
            textwrap.dedent("""\
                state_file: data/state.json
                log_level: INFO
                log_file: analytics.log
            """)
        )
        settings = load_settings(config)
        assert settings.log_level == "INFO"
        assert settings.log_file == "analytics.log"
        assert settings.log_path() == (tmp_path / "analytics.log").resolve()
        assert settings.state_path() == (tmp_path / "data" / "state.json").resolve()

    def test_absolute_state_file(self, tmp_path: Path):
        target = tmp_path / "elsewhere" / "s.json"
        config = tmp_path / "analytics.yml"
        config.write_text(f"state_file: {target}\n")
        assert load_settings(config).state_path() == target.resolve()

    def test_empty_file_is_defaults(self, tmp_path: Path):
        config = tmp_path / "analytics.yml"
        config.write_text("")
        assert load_settings(config).state_file == ".state/analytics.json"

    def test_found_by_walking_up(self, tmp_path: Path, monkeypatch):
        (tmp_path / "analytics.yml").write_text("log_level: DEBUG\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        assert find_settings_file() == (tmp_path / "analytics.yml").resolve()
        assert load_settings().log_level == "DEBUG"

    def test_env_overrides(self, tmp_path: Path, monkeypatch):
        config = tmp_path / "analytics.yml"
        config.write_text("log_level: INFO\n")
        monkeypatch.setenv("MA_LOG_LEVEL", "ERROR")
        monkeypatch.setenv("MA_STATE_FILE", "other.json")
        settings = load_settings(config)
        assert settings.log_level == "ERROR"
        assert settings.state_path() == (tmp_path / "other.json").resolve()

    def test_missing_explicit_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "missing.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        config = tmp_path / "analytics.yml"
        config.write_text("log_level: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(config)

    def test_not_a_mapping(self, tmp_path: Path):
        config = tmp_path / "analytics.yml"
        config.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(config)

    def test_invalid_field(self, tmp_path: Path):
        config = tmp_path / "analytics.yml"
        config.write_text("log_level: [1, 2]\n")
        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings(config)


class TestModuleDefinition:
    def test_wrapped_definition(self, tmp_path: Path):
        path = tmp_path / "sales.yml"
        path.write_text(
            textwrap.dedent("""\
                module:
                  id: 42
                  name: Sales Report
                  query_name: sales_report
                  config_schema:
                    - name: region
                      type: select
                      options: [emea, apac]
                    - name: filters
                      type: json
            """)
        )
        definition = load_module_definition(path)
        assert definition["id"] == 42
        assert definition["name"] == "Sales Report"
        assert len(definition["config_schema"]) == 2

    def test_flat_json_definition(self, tmp_path: Path):
        path = tmp_path / "limits.json"
        path.write_text('{"name": "Limits", "config_schema": [{"name": "limit", "type": "number"}]}')
        definition = load_module_definition(path)
        assert "id" not in definition
        assert definition["config_schema"][0]["name"] == "limit"

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_module_definition(tmp_path / "nope.yml")

    def test_invalid_schema(self, tmp_path: Path):
        path = tmp_path / "bad.yml"
        path.write_text(
            textwrap.dedent("""\
                name: Bad
                config_schema:
                  - name: region
                    type: select
            """)
        )
        with pytest.raises(ConfigError, match="Invalid module definition"):
            load_module_definition(path)
