#!/usr/bin/env python3
"""jrnlview: view a systemd journal JSON export, grouped by boot."""

import argparse
import logging
import os
import sys

# Ensure the package is importable when run as `python jrnlview/main.py`
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from jrnlview.config import OUTPUT_FORMATS, load_filter_spec, load_yaml_config
from jrnlview.errors import ConfigError, FieldFormatError
from jrnlview.parser import decode_lines, get_decode_error_count, reset_decode_error_count
from jrnlview.reader import read_lines
from jrnlview.report import build_report, render_report, render_session_list
from jrnlview.sessions import discover_sessions

logger = logging.getLogger("jrnlview")


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="jrnlview",
        description="Journal viewer for systemd journal JSON exports (journalctl -o json).",
    )
    parser.add_argument("logfile", help="The journal json logfile to view")
    parser.add_argument(
        "-l", "--list-boots", action="store_true",
        help="List all boots from provided logfile",
    )
    parser.add_argument(
        "-k", "--kernel", action="store_true",
        help="Only print log entries originating from the kernel",
    )
    parser.add_argument(
        "-p", "--priority",
        help="Set entry log level to print, default 7 = debug",
    )
    parser.add_argument(
        "-b", "--boot", action="append",
        help="Specify a boot to show (repeatable)",
    )
    parser.add_argument(
        "-u", "--unit", action="append",
        help="systemd unit to print (repeatable), NAME also matches NAME.service",
    )
    parser.add_argument(
        "-n", "--number",
        help="Max amount of log entries to print for each boot (0 = all)",
    )
    parser.add_argument("--since-time", help="Start time of day, HH:MM[:SS] UTC (not applied yet)")
    parser.add_argument("--until-time", help="Stop time of day, HH:MM[:SS] UTC (not applied yet)")
    parser.add_argument("--since-date", help="Start date, YYYY-MM-DD[ HH:MM:SS] UTC (not applied yet)")
    parser.add_argument("--until-date", help="Stop date, YYYY-MM-DD[ HH:MM:SS] UTC (not applied yet)")
    parser.add_argument(
        "--output", choices=OUTPUT_FORMATS, default=None,
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--config", default=None,
        help="Path to YAML file with default filter options (or $JRNLVIEW_CONFIG)",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Increase diagnostic output on stderr (-v info, -vv debug)",
    )
    return parser


def setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s [jrnlview] %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def run(args, stream=None) -> int:
    """Read, filter and print the journal described by *args*. Returns the exit code."""
    stream = stream or sys.stdout
    reset_decode_error_count()

    try:
        spec = load_filter_spec(args, load_yaml_config(args.config))
    except ConfigError as e:
        logger.error("Failed to get cli-options: %s", e)
        return 1

    try:
        entries = list(decode_lines(read_lines(args.logfile)))
    except OSError as e:
        logger.error("Failed to parse logfile: %s", e)
        return 1

    logger.info("Parsed %d entries from %s (%d undecodable lines)",
                len(entries), args.logfile, get_decode_error_count())
    if not entries:
        logger.warning("No entries found in %s", args.logfile)

    sessions = discover_sessions(entries)

    if args.list_boots:
        print(f"'{args.logfile}' contains the following boot ids:", file=sys.stderr)
        render_session_list(sessions, stream)
        return 0

    try:
        report = build_report(entries, sessions, spec)
    except FieldFormatError as e:
        logger.error("Error while formatting log entries [ %s ], unable to display logs", e)
        return 1

    render_report(report, len(entries), spec, stream)
    return 0


def main():
    args = build_parser().parse_args()
    setup_logging(args.verbose)
    try:
        code = run(args)
    except (KeyboardInterrupt, BrokenPipeError):
        code = 0
    sys.exit(code)


if __name__ == "__main__":
    main()
