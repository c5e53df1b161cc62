"""Journal export line decoder: one JSON object per line into an Entry."""

import json
import logging
from typing import Iterable, Iterator

from jrnlview.models import Entry

logger = logging.getLogger(__name__)

_decode_errors = 0


def get_decode_error_count() -> int:
    return _decode_errors


def reset_decode_error_count() -> None:
    global _decode_errors
    _decode_errors = 0


def decode_line(line: str) -> Entry | None:
    """Decode a single journal export line. Returns None for undecodable lines."""
    global _decode_errors
    try:
        data = json.loads(line)
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        return Entry.from_journal(data)
    except (ValueError, TypeError, RecursionError) as e:
        _decode_errors += 1
        logger.warning("Illformatted line: %s - ignoring entry", e)
        return None


def decode_lines(lines: Iterable[str]) -> Iterator[Entry]:
    """Decode every line, dropping the ones that fail."""
    for line in lines:
        entry = decode_line(line)
        if entry is not None:
            yield entry
