"""Monitor loop: scan the source directory on a fixed interval until stopped."""

import glob
import logging
import os
import re
import threading
from dataclasses import dataclass, fields
from datetime import datetime

from log_consolidator.appender import RetryPolicy
from log_consolidator.config import Config
from log_consolidator.dates import extract_date, parse_date
from log_consolidator.errors import AppendError
from log_consolidator.processor import FileProcessor, FileStatus
from log_consolidator.state import State, StateStore, prune_expired

logger = logging.getLogger(__name__)


@dataclass
class ScanSummary:
    candidates: int = 0
    processed: int = 0
    new_files: int = 0
    skipped: int = 0
    failed: int = 0
    bytes_read: int = 0
    pruned: int = 0


class Monitor:
    """Owns the tracked-file state for the lifetime of the process.

    Only one instance may run per output folder / state file pair; nothing
    locks the state file against a second process.
    """

    def __init__(self, config: Config, store: StateStore | None = None, reporter=None,
                 policy: RetryPolicy | None = None, now=None):
        self._config = config
        self._store = store or StateStore(config.state_path)
        self._reporter = reporter
        self._policy = policy or RetryPolicy(config.max_retry_attempts, config.retry_delay_ms)
        self._now = now
        self._date_re = re.compile(config.date_pattern)
        self.state: State | None = None
        self.scans = 0
        self.totals = ScanSummary()

    def load_state(self) -> State:
        self.state = self._store.load()
        return self.state

    def _sort_key(self, path: str) -> datetime:
        date = extract_date(os.path.basename(path), self._date_re)
        return parse_date(date, self._config.date_format) or datetime.min

    def list_candidates(self) -> list[str]:
        """Files matching the log pattern, oldest first by filename date."""
        excluded = {
            os.path.abspath(self._config.output_path),
            os.path.abspath(self._config.state_path),
        }
        paths = [
            p for p in glob.glob(os.path.join(glob.escape(self._config.source_dir),
                                              self._config.log_pattern))
            if os.path.isfile(p) and os.path.abspath(p) not in excluded
        ]
        # sort is stable: equal dates keep directory listing order
        return sorted(paths, key=self._sort_key)

    def scan_once(self) -> ScanSummary:
        """Prune, process every candidate in date order, persist state."""
        if self.state is None:
            self.load_state()
        state = self.state
        summary = ScanSummary()

        before = len(state.files)
        prune_expired(state, self._config.retention_days, self._config.date_format, self._now)
        summary.pruned = before - len(state.files)

        processor = FileProcessor(self._config, state, self._policy, self._now)
        candidates = self.list_candidates()
        summary.candidates = len(candidates)

        for path in candidates:
            try:
                result = processor.process(path)
            except AppendError as e:
                summary.failed += 1
                logger.error("Append failed for %s: %s", os.path.basename(path), e)
                if self._reporter:
                    self._reporter.file_failed(os.path.basename(path), e)
                continue
            except Exception as e:
                summary.failed += 1
                logger.exception("Processing failed for %s: %s", os.path.basename(path), e)
                if self._reporter:
                    self._reporter.file_failed(os.path.basename(path), e)
                continue

            if result.status is FileStatus.PROCESSED:
                summary.processed += 1
                summary.bytes_read += result.bytes_read
            elif result.status is not FileStatus.NO_GROWTH:
                summary.skipped += 1
            if result.newly_tracked:
                summary.new_files += 1
            if self._reporter:
                self._reporter.file_result(result)

        self._store.save(state)
        self.scans += 1
        self._accumulate(summary)
        logger.info("Scan %d: %d candidate(s), %d processed, %d new, %d failed",
                    self.scans, summary.candidates, summary.processed,
                    summary.new_files, summary.failed)
        return summary

    def _accumulate(self, summary: ScanSummary) -> None:
        for f in fields(ScanSummary):
            setattr(self.totals, f.name, getattr(self.totals, f.name) + getattr(summary, f.name))

    def run(self, stop_event: threading.Event | None = None,
            max_iterations: int | None = None) -> None:
        """Scan, report, wait; repeat until *stop_event* is set or iterations run out."""
        stop_event = stop_event or threading.Event()
        if self.state is None:
            self.load_state()

        iterations = 0
        while not stop_event.is_set():
            try:
                summary = self.scan_once()
                if self._reporter:
                    self._reporter.scan_summary(summary)
            except Exception as e:
                logger.exception("Scan failed: %s", e)
                if self._reporter:
                    self._reporter.scan_error(e)

            iterations += 1
            if max_iterations is not None and iterations >= max_iterations:
                break
            stop_event.wait(self._config.poll_interval)
