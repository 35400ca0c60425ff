import logging
from pathlib import Path
from typing import Iterator

import chardet

logger = logging.getLogger(__name__)


def read_text_unknown_encoding(file: Path) -> str | None:
    """Read a file and return the contents as a string. Will guess the encoding if it is not UTF-8.

    Args:
        file (Path): Path to the file

    Raises:
        OSError: if the file can't be opened or read

    Returns:
        str | None: Contents of the file, or None if no encoding could decode it

    """
    logger.debug(f"Reading file <{file}>")

    try:
        # No newline translation, lines are split on "\n" only and printed as read
        with file.open(encoding="utf-8", newline="") as f:
            return f.read()
    except UnicodeDecodeError:
        logger.debug(f"File {file} is not in UTF-8 encoding. Trying to detect encoding.")

    raw = file.read_bytes()
    encoding = chardet.detect(raw)["encoding"]
    logger.debug(f"Detected encoding {encoding} for file {file}.")

    if encoding is None:
        return None

    try:
        return raw.decode(encoding)
    except (UnicodeDecodeError, LookupError):
        logger.exception(f"Could not decode file {file} as {encoding}.")
        return None


def iter_lines(text: str) -> Iterator[str]:
    """Split text into lines, keeping the line terminators.

    Only "\\n" ends a line. Other control characters (e.g. form feed) stay part of the line.

    """
    start = 0

    while start < len(text):
        end = text.find("\n", start)

        if end == -1:
            yield text[start:]
            return

        yield text[start : end + 1]
        start = end + 1


def strip_terminator(line: str) -> str:
    """Remove a single trailing "\\n" or "\\r\\n" from a line."""
    if line.endswith("\r\n"):
        return line[:-2]

    if line.endswith("\n"):
        return line[:-1]

    return line
