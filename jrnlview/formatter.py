"""Entry formatting: cursor sequence numbers, UTC timestamps, text and JSON rows."""

import json
import logging
import re
from dataclasses import asdict
from datetime import datetime, timezone

from jrnlview.errors import FieldFormatError
from jrnlview.models import NOT_AVAILABLE, DisplayRecord, Entry, resolve_unit

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
ROW_FORMAT = "{0:<5}  {1:<20}  {2:<5}  {3:<18}  {4}"
COLUMNS = ("Seq#", "Datetime", "LVL", "Unit", "Message")

SEQNUM_PREFIX = "i="
HEX_PATTERN = re.compile(r"[0-9a-fA-F]+")
INT_PATTERN = re.compile(r"[-+]?[0-9]+")
I64_MIN, I64_MAX = -(2 ** 63), 2 ** 63 - 1
MICROSECONDS = 1_000_000


def decode_sequence_number(cursor: str | None) -> str:
    """Return the decimal sequence number encoded in a journal cursor.

    The cursor is a ``;``-separated list of ``key=value`` parts; the ``i``
    part holds the sequence number in hex, e.g. ``s=abc;i=1a;b=def`` -> ``26``.

    Raises FieldFormatError if the cursor has no ``i=`` part or it is not hex.
    """
    if not cursor:
        logger.warning("Unable to get cursor string for entry")
        return NOT_AVAILABLE

    for part in cursor.split(";"):
        if part.startswith(SEQNUM_PREFIX):
            digits = part[len(SEQNUM_PREFIX):]
            if not HEX_PATTERN.fullmatch(digits):
                raise FieldFormatError("__CURSOR", cursor, f"bad sequence number {digits!r}")
            return str(int(digits, 16))

    raise FieldFormatError("__CURSOR", cursor, "no sequence number")


def format_timestamp(realtime: str | None) -> str:
    """Render a realtime timestamp (microseconds since epoch) as UTC text."""
    if not realtime:
        return NOT_AVAILABLE

    if not INT_PATTERN.fullmatch(realtime):
        raise FieldFormatError("__REALTIME_TIMESTAMP", realtime, "expected an integer")
    try:
        micros = int(realtime)
    except ValueError as e:
        raise FieldFormatError("__REALTIME_TIMESTAMP", realtime, str(e)) from e
    if not I64_MIN <= micros <= I64_MAX:
        raise FieldFormatError("__REALTIME_TIMESTAMP", realtime, "out of range")

    # Truncate toward zero, matching integer division on the journal side.
    seconds = abs(micros) // MICROSECONDS
    if micros < 0:
        seconds = -seconds
    try:
        dt = datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as e:
        raise FieldFormatError("__REALTIME_TIMESTAMP", realtime, str(e)) from e
    return dt.strftime(TIMESTAMP_FORMAT)


def format_entry(entry: Entry) -> DisplayRecord:
    """Project an accepted Entry into a DisplayRecord."""
    return DisplayRecord(
        sequence_number=decode_sequence_number(entry.cursor),
        timestamp=format_timestamp(entry.realtime_timestamp),
        priority=entry.priority or NOT_AVAILABLE,
        unit=f"{resolve_unit(entry)}({entry.pid or NOT_AVAILABLE})",
        message=entry.message or NOT_AVAILABLE,
    )


def format_column_header() -> str:
    return ROW_FORMAT.format(*COLUMNS)


def format_row(record: DisplayRecord) -> str:
    return ROW_FORMAT.format(
        record.sequence_number,
        record.timestamp,
        record.priority,
        record.unit,
        record.message,
    )


def format_json(boot_id: str, record: DisplayRecord) -> str:
    """Return NDJSON, one object per record, compatible with jq."""
    return json.dumps({"boot_id": boot_id, **asdict(record)})
