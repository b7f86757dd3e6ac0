"""Per-file processing: offset lookup, truncation check, incremental read, append."""

import logging
import os
import re
from dataclasses import dataclass
from enum import Enum

from log_consolidator.appender import RetryPolicy, append_text
from log_consolidator.config import Config
from log_consolidator.dates import extract_date, is_within_retention
from log_consolidator.reader import file_size, read_chunk
from log_consolidator.state import State

logger = logging.getLogger(__name__)


class FileStatus(Enum):
    PROCESSED = "processed"
    NO_GROWTH = "no growth"
    INVALID_DATE = "invalid date format"
    OUTSIDE_RETENTION = "outside retention"
    NOT_FOUND = "not found"
    READ_FAILED = "read failed"


@dataclass
class FileResult:
    name: str
    status: FileStatus
    bytes_read: int = 0
    chars_appended: int = 0
    newly_tracked: bool = False
    truncated: bool = False


class FileProcessor:
    """Moves new bytes of one source file into the consolidated file per scan.

    State entries only advance after the append succeeds, so a failed append
    is retried from the same offset on the next scan.
    """

    def __init__(self, config: Config, state: State, policy: RetryPolicy | None = None,
                 now=None):
        self._config = config
        self._state = state
        self._policy = policy or RetryPolicy(config.max_retry_attempts, config.retry_delay_ms)
        self._now = now
        self._date_re = re.compile(config.date_pattern)

    def process(self, path: str) -> FileResult:
        name = os.path.basename(path)

        date = extract_date(name, self._date_re)
        if date is None:
            logger.debug("Skipping %s: invalid date format", name)
            return FileResult(name, FileStatus.INVALID_DATE)

        if not is_within_retention(date, self._config.retention_days,
                                   self._config.date_format, self._now):
            logger.debug("Skipping %s: outside retention", name)
            return FileResult(name, FileStatus.OUTSIDE_RETENTION)

        current_size = file_size(path)
        if current_size is None:
            logger.info("Skipping %s: not found", name)
            return FileResult(name, FileStatus.NOT_FOUND)

        tracked = name in self._state.files
        last_size = self._state.get_size(name)
        truncated = False

        if current_size < last_size:
            logger.warning("Truncation detected for %s (%d -> %d bytes), re-reading from start",
                           name, last_size, current_size)
            self._state.track(name, 0, date)
            last_size = 0
            truncated = True

        if current_size > last_size:
            length = current_size - last_size
            chunk = read_chunk(path, last_size, self._config.file_encoding, length)
            if chunk is None:
                logger.warning("No data read from %s at offset %d, retrying next scan",
                               name, last_size)
                return FileResult(name, FileStatus.READ_FAILED, truncated=truncated)
            text, consumed = chunk
            if consumed == 0:
                # only the start of a multibyte character so far
                if not tracked:
                    self._state.track(name, last_size, date)
                return FileResult(name, FileStatus.NO_GROWTH, newly_tracked=not tracked,
                                  truncated=truncated)
            appended = 0
            if text.strip():
                appended = append_text(self._config.output_path, text,
                                       self._config.file_encoding, self._policy)
            new_size = last_size + consumed
            self._state.track(name, new_size, date)
            logger.debug("Processed %s: %d -> %d bytes", name, last_size, new_size)
            return FileResult(name, FileStatus.PROCESSED, bytes_read=consumed,
                              chars_appended=appended, newly_tracked=not tracked,
                              truncated=truncated)

        if not tracked:
            self._state.track(name, current_size, date)
        return FileResult(name, FileStatus.NO_GROWTH, newly_tracked=not tracked,
                          truncated=truncated)
