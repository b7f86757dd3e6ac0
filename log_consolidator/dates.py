"""Filename date extraction and retention window checks."""

import re
from datetime import datetime, timedelta


def extract_date(filename: str, pattern) -> str | None:
    """Return the first capture group of *pattern* in *filename*, or None."""
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    match = pattern.search(filename)
    if match is None:
        return None
    return match.group(1)


def parse_date(value: str | None, date_format: str) -> datetime | None:
    """Parse *value* with strptime. Returns None on failure."""
    if not value:
        return None
    try:
        return datetime.strptime(value, date_format)
    except (TypeError, ValueError):
        return None


def is_within_retention(date_str: str | None, retention_days: int, date_format: str,
                        now=None) -> bool:
    """True if the date is no older than *retention_days* before now.

    Unparsable dates are never retained. *now* is an optional zero-argument
    callable; the local clock is read on every call when it is omitted.
    """
    parsed = parse_date(date_str, date_format)
    if parsed is None:
        return False
    now_func = now or datetime.now
    cutoff = now_func() - timedelta(days=retention_days)
    return parsed >= cutoff
