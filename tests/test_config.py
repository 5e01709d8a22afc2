"""Tests for configuration loading."""

import json
import logging

import pytest

from cronexpr.config import CronConfig, load_config
from cronexpr.errors import ConfigError, CronError


class TestCronConfig:
    """Tests for CronConfig."""

    def test_defaults(self):
        """Defaults match the documented values."""
        config = CronConfig()
        assert config.datetime_format == "%Y-%m-%d %H:%M:%S"
        assert config.strict_day_pairing is False
        assert config.log_level == "WARNING"
        assert config.log_format == "console"
        assert config.default_count == 5

    def test_log_level_normalized(self):
        """Log levels are upper-cased."""
        config = CronConfig(log_level="info")
        assert config.log_level == "INFO"
        assert config.log_level_value == logging.INFO

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"log_level": "LOUD"},
            {"log_format": "xml"},
            {"default_count": 0},
            {"datetime_format": ""},
        ],
    )
    def test_invalid_values(self, kwargs):
        """Invalid settings raise ConfigError."""
        with pytest.raises(ConfigError):
            CronConfig(**kwargs)

    def test_config_error_is_cron_error(self):
        """ConfigError is part of the package hierarchy."""
        with pytest.raises(CronError):
            CronConfig(log_format="xml")

    def test_merge(self):
        """merge() returns an updated copy."""
        config = CronConfig()
        merged = config.merge({"default_count": 10})
        assert merged.default_count == 10
        assert config.default_count == 5

    def test_to_dict(self):
        """to_dict() lists every setting."""
        assert set(CronConfig().to_dict()) == {
            "datetime_format",
            "strict_day_pairing",
            "log_level",
            "log_format",
            "default_count",
        }


class TestFromDict:
    """Tests for CronConfig.from_dict()."""

    def test_unknown_key(self):
        """Unknown keys are rejected."""
        with pytest.raises(ConfigError, match="colour"):
            CronConfig.from_dict({"colour": "blue"})

    @pytest.mark.parametrize(
        "raw,expected",
        [("true", True), ("Yes", True), ("1", True), ("off", False), ("no", False), (True, True)],
    )
    def test_bool_coercion(self, raw, expected):
        """Boolean settings accept common spellings."""
        assert CronConfig.from_dict({"strict_day_pairing": raw}).strict_day_pairing is expected

    def test_bad_bool(self):
        """Unrecognised boolean text is rejected."""
        with pytest.raises(ConfigError):
            CronConfig.from_dict({"strict_day_pairing": "maybe"})

    def test_int_coercion(self):
        """Integer settings accept numeric strings."""
        assert CronConfig.from_dict({"default_count": "12"}).default_count == 12

    @pytest.mark.parametrize("raw", ["many", True, None])
    def test_bad_int(self, raw):
        """Non-numeric counts are rejected."""
        with pytest.raises(ConfigError):
            CronConfig.from_dict({"default_count": raw})

    def test_bad_string(self):
        """String settings must be strings."""
        with pytest.raises(ConfigError):
            CronConfig.from_dict({"datetime_format": 42})


class TestFromEnv:
    """Tests for CronConfig.from_env()."""

    def test_reads_prefixed_variables(self):
        """CRONEXPR_* variables map to settings."""
        config = CronConfig.from_env(
            {
                "CRONEXPR_DEFAULT_COUNT": "3",
                "CRONEXPR_LOG_FORMAT": "json",
                "CRONEXPR_STRICT_DAY_PAIRING": "true",
                "HOME": "/root",
            }
        )
        assert config.default_count == 3
        assert config.log_format == "json"
        assert config.strict_day_pairing is True

    def test_ignores_unknown_variables(self):
        """Unrelated CRONEXPR_* variables are skipped."""
        config = CronConfig.from_env({"CRONEXPR_SOMETHING": "x", "CRONEXPR_CONFIG": "a.yaml"})
        assert config == CronConfig()

    def test_os_environ(self, clean_env):
        """Without an argument the process environment is used."""
        clean_env.setenv("CRONEXPR_LOG_LEVEL", "debug")
        assert CronConfig.from_env().log_level == "DEBUG"


class TestFromFile:
    """Tests for file-based configuration."""

    def test_yaml(self, tmp_path):
        """YAML files are supported."""
        path = tmp_path / "cronexpr.yaml"
        path.write_text("datetime_format: '%d/%m/%Y'\ndefault_count: 2\n")
        config = CronConfig.from_file(path)
        assert config.datetime_format == "%d/%m/%Y"
        assert config.default_count == 2

    def test_json(self, tmp_path):
        """JSON files are supported."""
        path = tmp_path / "cronexpr.json"
        path.write_text(json.dumps({"log_format": "json", "strict_day_pairing": True}))
        config = CronConfig.from_file(path)
        assert config.log_format == "json"
        assert config.strict_day_pairing is True

    def test_empty_yaml(self, tmp_path):
        """An empty YAML file gives the defaults."""
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert CronConfig.from_file(path) == CronConfig()

    def test_missing_file(self, tmp_path):
        """A missing file is a ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            CronConfig.from_file(tmp_path / "missing.yaml")

    def test_unsupported_format(self, tmp_path):
        """Only YAML and JSON are read."""
        path = tmp_path / "cronexpr.toml"
        path.write_text("default_count = 2\n")
        with pytest.raises(ConfigError, match="Unsupported"):
            CronConfig.from_file(path)

    def test_invalid_yaml(self, tmp_path):
        """Unparseable YAML is a ConfigError."""
        path = tmp_path / "bad.yaml"
        path.write_text("default_count: [1, 2\n")
        with pytest.raises(ConfigError, match="Failed to load"):
            CronConfig.from_file(path)

    def test_not_a_mapping(self, tmp_path):
        """The top level must be a mapping."""
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError, match="mapping"):
            CronConfig.from_file(path)


class TestLoadConfig:
    """Tests for load_config()."""

    def test_defaults_only(self):
        """No file and no environment gives the defaults."""
        assert load_config(environ={}) == CronConfig()

    def test_env_overrides_file(self, tmp_path):
        """Environment variables take precedence over the file."""
        path = tmp_path / "cronexpr.yaml"
        path.write_text("default_count: 2\nlog_format: json\n")
        config = load_config(path, environ={"CRONEXPR_DEFAULT_COUNT": "9"})
        assert config.default_count == 9
        assert config.log_format == "json"

    def test_config_path_from_env(self, tmp_path):
        """CRONEXPR_CONFIG names the file when no path is given."""
        path = tmp_path / "cronexpr.json"
        path.write_text(json.dumps({"default_count": 7}))
        config = load_config(environ={"CRONEXPR_CONFIG": str(path)})
        assert config.default_count == 7
