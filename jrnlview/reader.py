"""Generator-based reading of a journal export file."""

import logging
from typing import Generator

logger = logging.getLogger(__name__)


def read_lines(filepath: str) -> Generator[str, None, None]:
    """Yield each non-blank line of *filepath*, decoded as UTF-8.

    Raises OSError (e.g. FileNotFoundError) if the file cannot be opened.
    Lines that are not valid UTF-8 are logged and skipped.
    """
    with open(filepath, "rb") as f:
        for lineno, raw in enumerate(f, start=1):
            try:
                line = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                logger.warning("Failed to read line %d of %s, ignoring: %s", lineno, filepath, e)
                continue
            line = line.strip()
            if line:
                yield line
