"""Shared pytest fixtures for the log consolidator test suite."""

from datetime import datetime

import pytest

from log_consolidator.appender import RetryPolicy
from log_consolidator.config import Config

# Fixed "now" so filename dates like 20251111 stay inside the retention window.
NOW = datetime(2025, 11, 12, 9, 30, 0)


def fixed_now() -> datetime:
    return NOW


@pytest.fixture()
def source_dir(tmp_path):
    d = tmp_path / "logs"
    d.mkdir()
    return d


@pytest.fixture()
def output_dir(tmp_path):
    d = tmp_path / "consolidated"
    d.mkdir()
    return d


@pytest.fixture()
def config(source_dir, output_dir) -> Config:
    return Config(
        source_dir=str(source_dir),
        output_dir=str(output_dir),
        output_filename="ADSI_Consolidated.txt",
        retention_days=14,
        poll_interval=0,
        verbose_output=False,
        enable_colors=False,
    )


@pytest.fixture()
def no_sleep_policy() -> RetryPolicy:
    return RetryPolicy(max_attempts=3, delay_ms=150, sleep=lambda _s: None)


@pytest.fixture()
def clock():
    return fixed_now
