"""Session (boot) discovery over a decoded entry list."""

import logging
from typing import Iterable

from jrnlview.models import NOT_AVAILABLE, Entry

logger = logging.getLogger(__name__)


def discover_sessions(entries: Iterable[Entry]) -> list[str]:
    """Return the distinct boot ids in first-seen order.

    Entries without a boot id are logged and left out.
    """
    seen = set()
    sessions = []
    for entry in entries:
        if not entry.boot_id:
            logger.warning("Unable to get boot id from entry %s", entry.cursor or NOT_AVAILABLE)
            continue
        if entry.boot_id not in seen:
            seen.add(entry.boot_id)
            sessions.append(entry.boot_id)
    return sessions
