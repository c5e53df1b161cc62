"""Journal entry model: frozen dataclasses and the journal field mapping."""

from dataclasses import dataclass

NOT_AVAILABLE = "N/A"

# https://www.freedesktop.org/software/systemd/man/systemd.journal-fields.html
JOURNAL_FIELDS = {
    "__CURSOR": "cursor",
    "__REALTIME_TIMESTAMP": "realtime_timestamp",
    "__MONOTONIC_TIMESTAMP": "monotonic_timestamp",
    "_BOOT_ID": "boot_id",
    "_TRANSPORT": "transport",
    "SYSLOG_FACILITY": "syslog_facility",
    "_UID": "uid",
    "_GID": "gid",
    "_MACHINE_ID": "machine_id",
    "SYSLOG_IDENTIFIER": "syslog_identifier",
    "_PID": "pid",
    "_CMDLINE": "cmdline",
    "_SYSTEMD_CGROUP": "systemd_cgroup",
    "_SYSTEMD_UNIT": "systemd_unit",
    "MESSAGE": "message",
    "_HOSTNAME": "hostname",
    "PRIORITY": "priority",
    "CODE_FILE": "code_file",
    "CODE_LINE": "code_line",
    "CODE_FUNCTION": "code_function",
    "ERRNO": "errno",
    "UNIT": "unit",
}


@dataclass(frozen=True)
class Entry:
    """One journal line. Every field is optional; journald fills them unevenly."""

    cursor: str | None = None
    realtime_timestamp: str | None = None
    monotonic_timestamp: str | None = None
    boot_id: str | None = None
    transport: str | None = None
    syslog_facility: str | None = None
    uid: str | None = None
    gid: str | None = None
    machine_id: str | None = None
    syslog_identifier: str | None = None
    pid: str | None = None
    cmdline: str | None = None
    systemd_cgroup: str | None = None
    systemd_unit: str | None = None
    message: str | None = None
    hostname: str | None = None
    priority: str | None = None
    code_file: str | None = None
    code_line: str | None = None
    code_function: str | None = None
    errno: str | None = None
    unit: str | None = None

    @classmethod
    def from_journal(cls, data: dict) -> "Entry":
        """Build an Entry from a decoded journal export object.

        Unknown keys are ignored. JSON null counts as absent. Any other
        non-string value for a known key raises TypeError.
        """
        values = {}
        for key, attr in JOURNAL_FIELDS.items():
            value = data.get(key)
            if value is None:
                continue
            if not isinstance(value, str):
                raise TypeError(
                    f"field {key} must be a string, got {type(value).__name__}"
                )
            values[attr] = value
        return cls(**values)


@dataclass(frozen=True)
class DisplayRecord:
    sequence_number: str
    timestamp: str
    priority: str
    unit: str        # "<unit>(<pid>)"
    message: str


def first_present(*values: str | None) -> str | None:
    """Return the first value that is neither None nor empty, else None."""
    for value in values:
        if value:
            return value
    return None


# Fallback order for the originating unit name.
UNIT_FALLBACK = ("unit", "systemd_unit", "syslog_identifier")


def resolve_unit(entry: Entry) -> str:
    """Resolve the unit name via UNIT_FALLBACK, or NOT_AVAILABLE."""
    name = first_present(*(getattr(entry, attr) for attr in UNIT_FALLBACK))
    return NOT_AVAILABLE if name is None else name
