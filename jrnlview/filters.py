"""Filter predicates for journal entries: session, unit, kernel, priority."""

import logging

from jrnlview.config import UNSIGNED_PATTERN, FilterSpec
from jrnlview.errors import FieldFormatError
from jrnlview.models import NOT_AVAILABLE, Entry, resolve_unit

logger = logging.getLogger(__name__)

KERNEL_UNIT = "kernel"


def parse_priority(value: str) -> int:
    """Parse a PRIORITY field as an unsigned integer."""
    if not UNSIGNED_PATTERN.fullmatch(value):
        raise FieldFormatError("PRIORITY", value, "expected an unsigned integer")
    try:
        return int(value)
    except ValueError as e:
        raise FieldFormatError("PRIORITY", value, str(e)) from e


def filter_by_session(entry: Entry, sessions) -> bool:
    return bool(entry.boot_id) and entry.boot_id in sessions


def filter_by_kernel(unit: str) -> bool:
    """True if the resolved unit is the kernel itself."""
    return unit == KERNEL_UNIT


def filter_by_unit(unit: str, units) -> bool:
    """True if no unit filter is set or the resolved unit is in it."""
    return not units or unit in units


def filter_by_priority(entry: Entry, max_level: int) -> bool:
    """True if the entry is at most *max_level*, or has no priority at all.

    Raises FieldFormatError when PRIORITY is present but not an integer.
    """
    if not entry.priority:
        logger.warning("Unable to get log level for entry %s", entry.cursor or NOT_AVAILABLE)
        return True
    return parse_priority(entry.priority) <= max_level


class FilterEngine:
    """Decides which entries make it into the report.

    *sessions* are the report keys: the explicit session filter when one is
    given, otherwise every session discovered in the file.
    """

    def __init__(self, spec: FilterSpec, sessions):
        self.spec = spec
        self.sessions = frozenset(sessions)
        self.units = frozenset(spec.units)
        if spec.has_time_window:
            logger.warning("Time and date filters are parsed but not applied yet")

    def accepts(self, entry: Entry) -> bool:
        if not filter_by_session(entry, self.sessions):
            return False

        unit = resolve_unit(entry)
        if unit == NOT_AVAILABLE:
            logger.warning("Unable to get unit name for entry %s", entry.cursor or NOT_AVAILABLE)
        if self.spec.kernel_only and not filter_by_kernel(unit):
            return False
        if not filter_by_unit(unit, self.units):
            return False

        return filter_by_priority(entry, self.spec.max_level)
