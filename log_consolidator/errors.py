"""Exception types raised by the consolidator."""


class ConsolidatorError(Exception):
    """Base class for consolidator errors."""


class ConfigError(ConsolidatorError):
    """Raised when the configuration is unusable. Fatal at startup."""


class AppendError(ConsolidatorError):
    """Raised when the consolidated file could not be written after all retries."""

    def __init__(self, path: str, attempts: int):
        super().__init__(f"Failed to append to {path} after {attempts} attempt(s)")
        self.path = path
        self.attempts = attempts
