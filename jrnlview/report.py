"""Per-boot grouping of formatted entries and report rendering."""

import logging
from itertools import islice
from typing import Iterable, TextIO

from jrnlview.config import FilterSpec
from jrnlview.filters import FilterEngine
from jrnlview.formatter import format_column_header, format_entry, format_json, format_row
from jrnlview.models import NOT_AVAILABLE, DisplayRecord, Entry

logger = logging.getLogger(__name__)

SEPARATOR = " ".join("-" * 48)

Report = dict[str, list[DisplayRecord]]


def build_report(entries: Iterable[Entry], sessions: list[str], spec: FilterSpec) -> Report:
    """Filter and format *entries*, grouped by boot id in source order.

    Keys come from the session filter when one is set, otherwise from
    *sessions*. Raises FieldFormatError on the first malformed field; no
    partial report is returned.
    """
    keys = spec.sessions or sessions
    report: Report = {boot_id: [] for boot_id in keys}
    engine = FilterEngine(spec, report.keys())

    for entry in entries:
        if not entry.boot_id:
            logger.warning("Unable to format entry %s without boot id, ignoring",
                           entry.cursor or NOT_AVAILABLE)
            continue
        if not engine.accepts(entry):
            continue
        report[entry.boot_id].append(format_entry(entry))

    for boot_id in spec.sessions:
        if boot_id not in sessions:
            logger.warning("Boot %s not found in logfile", boot_id)

    return report


def render_report(report: Report, total_entries: int, spec: FilterSpec, stream: TextIO) -> None:
    """Write the report to *stream*, at most spec.max_entries rows per boot.

    The boot header shows the number of entries parsed from the whole file,
    not the number kept for that boot.
    """
    for boot_id, records in report.items():
        if spec.max_entries:
            records = islice(records, spec.max_entries)

        if spec.output == "json":
            for record in records:
                print(format_json(boot_id, record), file=stream)
            continue

        print(SEPARATOR, file=stream)
        print(f"Boot : ID: {boot_id}, Number of parsed entries: {total_entries}", file=stream)
        print(SEPARATOR, file=stream)
        print(format_column_header(), file=stream)
        for record in records:
            print(format_row(record), file=stream)


def render_session_list(sessions: list[str], stream: TextIO) -> None:
    for boot_id in sessions:
        print(boot_id, file=stream)
