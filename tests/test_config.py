"""Tests for configuration loading and validation."""

import argparse
import os
from dataclasses import replace

import pytest

from log_consolidator.config import (
    Config, _parse_bool, load_config, load_yaml_config, validate_config,
)
from log_consolidator.errors import ConfigError


def _cli(**kwargs) -> argparse.Namespace:
    base = {"output_file": None, "log_pattern": None, "retention_days": None,
            "poll_interval": None}
    base.update(kwargs)
    return argparse.Namespace(**base)


class TestParseBool:
    def test_true_values(self):
        for val in ("true", "True", "TRUE", "1", "yes", "YES", " true ", True):
            assert _parse_bool(val) is True

    def test_false_values(self):
        for val in ("false", "False", "0", "no", "", "random", False):
            assert _parse_bool(val) is False


class TestConfigDefaults:
    def test_defaults(self):
        cfg = Config()
        assert cfg.output_filename == "ADSI_Consolidated.txt"
        assert cfg.log_pattern == "ADSI*.log"
        assert cfg.date_pattern == r"ADSI\.(\d{8})\.log"
        assert cfg.date_format == "%Y%m%d"
        assert cfg.retention_days == 14
        assert cfg.poll_interval == 60
        assert cfg.max_retry_attempts == 3
        assert cfg.retry_delay_ms == 150
        assert cfg.file_encoding == "utf-8"
        assert cfg.verbose_output is True
        assert cfg.enable_colors is True

    def test_derived_paths(self):
        cfg = Config(output_dir="/data/out")
        assert cfg.output_path == os.path.join("/data/out", "ADSI_Consolidated.txt")
        assert cfg.state_path == os.path.join("/data/out", ".consolidator_state.json")

    def test_explicit_state_file(self):
        cfg = Config(output_dir="/data/out", state_file="/var/lib/state.json")
        assert cfg.state_path == "/var/lib/state.json"

    def test_frozen(self):
        cfg = Config()
        with pytest.raises(AttributeError):
            cfg.retention_days = 3


class TestLoadYamlConfig:
    def test_no_path(self):
        assert load_yaml_config(None) == {}

    def test_missing_file(self, tmp_path):
        assert load_yaml_config(str(tmp_path / "missing.yml")) == {}

    def test_reads_mapping(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("source_dir: /logs\nretention_days: 7\n")
        assert load_yaml_config(str(path)) == {"source_dir": "/logs", "retention_days": 7}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("")
        assert load_yaml_config(str(path)) == {}

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            load_yaml_config(str(path))

    def test_invalid_yaml_rejected(self, tmp_path):
        path = tmp_path / "config.yml"
        path.write_text("source_dir: [unclosed\n")
        with pytest.raises(ConfigError):
            load_yaml_config(str(path))


class TestLoadConfig:
    def test_defaults_with_empty_env(self):
        assert load_config(environ={}) == Config()

    def test_yaml_values(self):
        cfg = load_config(yaml_data={"source_dir": "/logs", "retention_days": 7,
                                     "enable_colors": False}, environ={})
        assert cfg.source_dir == "/logs"
        assert cfg.retention_days == 7
        assert cfg.enable_colors is False

    def test_env_overrides_yaml(self):
        cfg = load_config(
            yaml_data={"retention_days": 7, "output_dir": "/yaml"},
            environ={"RETENTION_DAYS": "30", "VERBOSE_OUTPUT": "no",
                     "RETRY_DELAY_MS": "500", "POLL_INTERVAL": "2.5"},
        )
        assert cfg.retention_days == 30
        assert cfg.output_dir == "/yaml"
        assert cfg.verbose_output is False
        assert cfg.retry_delay_ms == 500
        assert cfg.poll_interval == 2.5

    def test_cli_overrides_env(self):
        cfg = load_config(
            _cli(output_file="merged.txt", log_pattern="*.log", retention_days=3,
                 poll_interval=5.0),
            yaml_data={"output_filename": "yaml.txt"},
            environ={"OUTPUT_FILENAME": "env.txt", "RETENTION_DAYS": "30"},
        )
        assert cfg.output_filename == "merged.txt"
        assert cfg.log_pattern == "*.log"
        assert cfg.retention_days == 3
        assert cfg.poll_interval == 5.0

    def test_unset_cli_values_ignored(self):
        cfg = load_config(_cli(), environ={"LOG_PATTERN": "X*.log"})
        assert cfg.log_pattern == "X*.log"

    def test_bad_number_raises_config_error(self):
        with pytest.raises(ConfigError):
            load_config(environ={"RETENTION_DAYS": "two weeks"})


class TestValidateConfig:
    @pytest.fixture()
    def valid(self, tmp_path):
        return Config(source_dir=str(tmp_path), output_dir=str(tmp_path / "out"))

    def test_valid(self, valid):
        validate_config(valid)

    @pytest.mark.parametrize("changes", [
        {"source_dir": ""},
        {"output_dir": ""},
        {"output_filename": ""},
        {"retention_days": 0},
        {"poll_interval": -1},
        {"max_retry_attempts": 0},
        {"retry_delay_ms": -1},
        {"date_pattern": "ADSI\\.(\\d{8}"},
        {"date_pattern": "ADSI\\.\\d{8}\\.log"},
        {"date_pattern": "(ADSI)\\.(\\d{8})\\.log"},
        {"file_encoding": "no-such-codec"},
    ])
    def test_invalid(self, valid, changes):
        with pytest.raises(ConfigError):
            validate_config(replace(valid, **changes))

    def test_source_dir_must_exist(self, valid, tmp_path):
        with pytest.raises(ConfigError, match="not a directory"):
            validate_config(replace(valid, source_dir=str(tmp_path / "missing")))
