import logging
from pathlib import Path
from typing import NamedTuple

logger = logging.getLogger(__name__)

UTF8_BOM = b'\xef\xbb\xbf'


class LoadedFile(NamedTuple):
    """A scanned file and its normalized lines."""
    path: str
    lines: list[str]


def split_lines(data: bytes) -> list[str]:
    """Split raw file content into lines.

    Lines are separated by '\\n'. One trailing '\\r' is removed from each line, and a UTF-8
    byte-order mark is removed from the start of the first line. A terminator at the very end
    of the data does not start another line, so only empty data has no lines at all. Bytes
    that are not valid UTF-8 are kept as surrogate escapes so they still compare byte for byte.
    """
    if not data:
        return []

    if data.startswith(UTF8_BOM):
        data = data[len(UTF8_BOM):]

    lines = data.decode('utf-8', errors='surrogateescape').split('\n')
    if len(lines) > 1 and lines[-1] == '':
        lines.pop()

    return [line[:-1] if line.endswith('\r') else line for line in lines]


def read_lines(path: str | Path) -> list[str]:
    """Read and normalize the lines of a file.

    Raises:
        OSError: The file cannot be read
    """
    with open(path, 'rb') as f:
        lines = split_lines(f.read())
    logger.debug(f"read {path} ({len(lines)} lines)")
    return lines


def line_byte_size(line: str) -> int:
    """Size in bytes of a line as stored on disk, without its terminator."""
    return len(line.encode('utf-8', errors='surrogateescape'))
