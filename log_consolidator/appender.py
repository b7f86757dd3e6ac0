"""Appends text to the consolidated file with a bounded retry on contention."""

import logging
import time

from log_consolidator.errors import AppendError

logger = logging.getLogger(__name__)


class RetryPolicy:
    """Fixed-delay retry for operations that can hit a transient OSError.

    Args:
        max_attempts: Total number of calls, including the first one.
        delay_ms: Pause between attempts, in milliseconds.
        sleep: Sleep function, replaceable in tests.
    """

    def __init__(self, max_attempts: int = 3, delay_ms: int = 150, sleep=time.sleep):
        self.max_attempts = max(1, max_attempts)
        self.delay_ms = delay_ms
        self._sleep = sleep

    def run(self, func, path: str = ""):
        last_error = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                return func()
            except OSError as e:
                last_error = e
                if attempt < self.max_attempts:
                    logger.debug("Attempt %d/%d on %s failed: %s", attempt,
                                 self.max_attempts, path, e)
                    self._sleep(self.delay_ms / 1000)
        raise AppendError(path, self.max_attempts) from last_error


def append_text(path: str, text: str, encoding: str = "utf-8",
                policy: RetryPolicy | None = None) -> int:
    """Append *text* to *path*. Returns characters written (0 for empty text)."""
    if text == "":
        return 0
    policy = policy or RetryPolicy()

    def _write() -> int:
        with open(path, "a", encoding=encoding, errors="replace", newline="") as f:
            written = f.write(text)
            f.flush()
        return written

    return policy.run(_write, path)
