"""Incremental reads from a byte offset to end of file."""

import codecs
import logging
import os

logger = logging.getLogger(__name__)

_BOM = "\ufeff"


def read_chunk(path: str, offset: int, encoding: str = "utf-8",
               length: int | None = None) -> tuple[str, int] | None:
    """Read from *offset* and decode only complete characters.

    Returns ``(text, consumed)`` where *consumed* counts the bytes that make up
    *text*. A multibyte character cut off at the end of the read is left out of
    both, so the next read starting at ``offset + consumed`` picks it up whole.
    Returns None on any I/O failure.
    """
    try:
        with open(path, "rb") as f:
            if offset > 0:
                f.seek(offset)
            data = f.read() if length is None else f.read(length)
    except FileNotFoundError:
        logger.debug("File not found: %s", path)
        return None
    except OSError as e:
        logger.warning("Failed to read %s at offset %d: %s", path, offset, e)
        return None

    if not data:
        return "", 0

    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
    text = decoder.decode(data, final=False)
    pending = len(decoder.getstate()[0])
    if offset == 0 and text.startswith(_BOM):
        text = text[1:]
    return text, len(data) - pending


def read_from_offset(path: str, offset: int, encoding: str = "utf-8",
                     length: int | None = None) -> str:
    """Return the decoded text from *offset* to EOF, or "" on any I/O failure.

    Opens read-only without locking so writers appending to the file are not
    blocked. When *length* is given at most that many bytes are read.
    """
    chunk = read_chunk(path, offset, encoding, length)
    if chunk is None:
        return ""
    return chunk[0]


def file_size(path: str) -> int | None:
    """Current size of *path* in bytes, or None if it cannot be stat'ed."""
    try:
        return os.stat(path).st_size
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.warning("Failed to stat %s: %s", path, e)
        return None
