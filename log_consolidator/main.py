#!/usr/bin/env python3
"""Log consolidator — entry point."""

import argparse
import logging
import os
import signal
import sys
import threading

from log_consolidator.config import load_config, load_yaml_config, validate_config
from log_consolidator.errors import ConfigError
from log_consolidator.monitor import Monitor
from log_consolidator.reporter import ConsoleReporter

logger = logging.getLogger(__name__)

_stop = threading.Event()


def _signal_handler(sig, _frame):
    logger.info("Shutdown signal received (signal %d), stopping...", sig)
    _stop.set()


def setup_logging() -> None:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [log-consolidator] %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="log-consolidator",
        description="Append new content of date-stamped log files into one consolidated file.",
    )
    parser.add_argument(
        "--config", default=os.environ.get("CONFIG_PATH"),
        help="Path to YAML config file (default: $CONFIG_PATH)",
    )
    parser.add_argument(
        "--output-file", default=None,
        help="Consolidated output filename, inside the output directory",
    )
    parser.add_argument(
        "--log-pattern", default=None,
        help="Glob for source log files (default: ADSI*.log)",
    )
    parser.add_argument(
        "--retention-days", type=int, default=None,
        help="Ignore and forget files dated more than N days ago (default: 14)",
    )
    parser.add_argument(
        "--poll-interval", type=float, default=None,
        help="Seconds between scans (default: 60)",
    )
    parser.add_argument(
        "--once", action="store_true",
        help="Run a single scan and exit",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    args = build_cli_parser().parse_args(argv)

    try:
        config = load_config(args, load_yaml_config(args.config))
        validate_config(config)
        os.makedirs(config.output_dir, exist_ok=True)
    except (ConfigError, OSError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    reporter = ConsoleReporter(verbose=config.verbose_output, colors=config.enable_colors)
    reporter.banner(config)
    logger.info(
        "Config: source_dir=%s, pattern=%s, output=%s, retention=%dd, interval=%gs",
        config.source_dir, config.log_pattern, config.output_path,
        config.retention_days, config.poll_interval,
    )

    monitor = Monitor(config, reporter=reporter)
    monitor.run(_stop, max_iterations=1 if args.once else None)

    totals = monitor.totals
    logger.info("Stopped after %d scan(s): %d file update(s), %d bytes, %d failure(s)",
                monitor.scans, totals.processed, totals.bytes_read, totals.failed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
