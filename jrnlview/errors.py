"""Exceptions that abort a jrnlview run."""


class JournalViewError(Exception):
    """Base class for fatal, whole-run errors."""


class ConfigError(JournalViewError):
    """Raised when a filter option or config file value is invalid."""


class FieldFormatError(JournalViewError, ValueError):
    """Raised when a present journal field cannot be parsed.

    Missing fields are tolerated and replaced by a sentinel; a field that is
    present but malformed (priority, cursor, realtime timestamp) stops report
    generation.
    """

    def __init__(self, field: str, value: str, reason: str = ""):
        self.field = field
        self.value = value
        detail = f": {reason}" if reason else ""
        super().__init__(f"Malformed {field} value {value!r}{detail}")
