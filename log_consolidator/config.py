"""Configuration loading from an optional YAML file, env vars, and CLI overrides."""

import codecs
import logging
import os
import re
from dataclasses import dataclass, replace

import yaml

from log_consolidator.errors import ConfigError

logger = logging.getLogger(__name__)

STATE_FILENAME = ".consolidator_state.json"


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    source_dir: str = ""
    output_dir: str = ""
    output_filename: str = "ADSI_Consolidated.txt"
    log_pattern: str = "ADSI*.log"
    date_pattern: str = r"ADSI\.(\d{8})\.log"
    date_format: str = "%Y%m%d"
    retention_days: int = 14
    poll_interval: float = 60.0
    max_retry_attempts: int = 3
    retry_delay_ms: int = 150
    file_encoding: str = "utf-8"
    verbose_output: bool = True
    enable_colors: bool = True
    state_file: str = ""  # empty = <output_dir>/.consolidator_state.json

    @property
    def output_path(self) -> str:
        return os.path.join(self.output_dir, self.output_filename)

    @property
    def state_path(self) -> str:
        return self.state_file or os.path.join(self.output_dir, STATE_FILENAME)


# (field name, env var, converter)
_FIELDS = (
    ("source_dir", "SOURCE_DIR", str),
    ("output_dir", "OUTPUT_DIR", str),
    ("output_filename", "OUTPUT_FILENAME", str),
    ("log_pattern", "LOG_PATTERN", str),
    ("date_pattern", "DATE_PATTERN", str),
    ("date_format", "DATE_FORMAT", str),
    ("retention_days", "RETENTION_DAYS", int),
    ("poll_interval", "POLL_INTERVAL", float),
    ("max_retry_attempts", "MAX_RETRY_ATTEMPTS", int),
    ("retry_delay_ms", "RETRY_DELAY_MS", int),
    ("file_encoding", "FILE_ENCODING", str),
    ("verbose_output", "VERBOSE_OUTPUT", _parse_bool),
    ("enable_colors", "ENABLE_COLORS", _parse_bool),
    ("state_file", "STATE_FILE", str),
)

# CLI attribute -> Config field
_CLI_OVERRIDES = {
    "output_file": "output_filename",
    "log_pattern": "log_pattern",
    "retention_days": "retention_days",
    "poll_interval": "poll_interval",
}


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path or file missing."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    logger.info("Loaded YAML config from %s", path)
    return data


def load_config(cli_args=None, yaml_data: dict | None = None, environ=None) -> Config:
    """Build Config from defaults <- YAML <- env vars <- CLI args (highest priority)."""
    yaml_data = yaml_data or {}
    environ = os.environ if environ is None else environ

    kwargs: dict = {}
    for name, env_var, convert in _FIELDS:
        raw = environ.get(env_var, yaml_data.get(name))
        if raw is None:
            continue
        try:
            kwargs[name] = convert(raw)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid value for {name}: {raw!r}") from e

    config = Config(**kwargs)

    if cli_args is not None:
        overrides = {}
        for attr, name in _CLI_OVERRIDES.items():
            value = getattr(cli_args, attr, None)
            if value is not None:
                overrides[name] = value
        if overrides:
            config = replace(config, **overrides)

    return config


def validate_config(config: Config) -> None:
    """Raise ConfigError if the configuration cannot be run."""
    if not config.source_dir:
        raise ConfigError("source_dir is not set (SOURCE_DIR)")
    if not os.path.isdir(config.source_dir):
        raise ConfigError(f"source_dir is not a directory: {config.source_dir}")
    if not config.output_dir:
        raise ConfigError("output_dir is not set (OUTPUT_DIR)")
    if not config.output_filename:
        raise ConfigError("output_filename must not be empty")
    if config.retention_days < 1:
        raise ConfigError(f"retention_days must be >= 1, got {config.retention_days}")
    if config.poll_interval < 0:
        raise ConfigError(f"poll_interval must be >= 0, got {config.poll_interval}")
    if config.max_retry_attempts < 1:
        raise ConfigError(
            f"max_retry_attempts must be >= 1, got {config.max_retry_attempts}"
        )
    if config.retry_delay_ms < 0:
        raise ConfigError(f"retry_delay_ms must be >= 0, got {config.retry_delay_ms}")

    try:
        pattern = re.compile(config.date_pattern)
    except re.error as e:
        raise ConfigError(f"Invalid date_pattern {config.date_pattern!r}: {e}") from e
    if pattern.groups != 1:
        raise ConfigError(
            f"date_pattern must have exactly one capturing group, got {pattern.groups}"
        )

    try:
        codecs.lookup(config.file_encoding)
    except LookupError as e:
        raise ConfigError(f"Unknown file_encoding: {config.file_encoding}") from e
