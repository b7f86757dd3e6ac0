"""Console reporting: per-file status lines and scan summaries, optionally in ANSI color."""

from datetime import datetime

from log_consolidator.processor import FileResult, FileStatus

# ANSI color codes
COLORS = {
    FileStatus.PROCESSED: "\033[32m",          # green
    FileStatus.NO_GROWTH: "\033[36m",          # cyan
    FileStatus.INVALID_DATE: "\033[33m",       # yellow
    FileStatus.OUTSIDE_RETENTION: "\033[33m",  # yellow
    FileStatus.NOT_FOUND: "\033[33m",          # yellow
    FileStatus.READ_FAILED: "\033[31m",        # red
}
ERROR_COLOR = "\033[31m"
BOLD = "\033[1m"
RESET = "\033[0m"


class ConsoleReporter:
    def __init__(self, verbose: bool = True, colors: bool = True, out=None):
        self._verbose = verbose
        self._colors = colors
        self._out = out

    def _paint(self, text: str, color: str) -> str:
        if not self._colors or not color:
            return text
        return f"{color}{text}{RESET}"

    def _emit(self, line: str) -> None:
        print(line, file=self._out, flush=True)

    def format_file_result(self, result: FileResult) -> str:
        status = self._paint(result.status.value.upper(), COLORS.get(result.status, ""))
        line = f"  [{status}] {result.name}"
        if result.status is FileStatus.PROCESSED:
            line += f" (+{result.bytes_read} bytes)"
        if result.truncated:
            line += " " + self._paint("truncated, re-read from start", ERROR_COLOR)
        if result.newly_tracked:
            line += " [new]"
        return line

    def format_summary(self, summary) -> str:
        ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        parts = [
            f"{summary.candidates} file(s)",
            f"{summary.processed} processed",
            f"{summary.new_files} new",
            f"{summary.bytes_read} bytes",
        ]
        if summary.pruned:
            parts.append(f"{summary.pruned} pruned")
        if summary.failed:
            parts.append(self._paint(f"{summary.failed} failed", ERROR_COLOR))
        return f"[{ts}] Scan complete: " + ", ".join(parts)

    def banner(self, config) -> None:
        self._emit(self._paint("Log consolidator", BOLD))
        self._emit(f"  Source:    {config.source_dir} ({config.log_pattern})")
        self._emit(f"  Output:    {config.output_path}")
        self._emit(f"  State:     {config.state_path}")
        self._emit(f"  Retention: {config.retention_days} day(s), poll every {config.poll_interval:g}s")

    def file_result(self, result: FileResult) -> None:
        if self._verbose:
            self._emit(self.format_file_result(result))

    def file_failed(self, name: str, error: Exception) -> None:
        self._emit(f"  [{self._paint('FAILED', ERROR_COLOR)}] {name}: {error}")

    def scan_summary(self, summary) -> None:
        self._emit(self.format_summary(summary))

    def scan_error(self, error: Exception) -> None:
        self._emit(self._paint(f"Scan failed: {error}", ERROR_COLOR))
