"""Filter configuration from CLI args, env vars, and an optional YAML file."""

import logging
import os
import re
from dataclasses import dataclass
from datetime import datetime, time, timezone

import yaml

from jrnlview.errors import ConfigError

logger = logging.getLogger(__name__)

MAX_LEVEL = 7  # debug
SERVICE_SUFFIX = ".service"
OUTPUT_FORMATS = ("text", "json")
UNSIGNED_PATTERN = re.compile(r"\+?[0-9]+")
TIME_OF_DAY_PATTERN = re.compile(r"^[0-9]{2}:[0-9]{2}(?::[0-9]{2})?$")


class ConfigLoader(yaml.SafeLoader):
    """SafeLoader that keeps HH:MM[:SS] scalars as strings instead of base-60 ints."""


ConfigLoader.yaml_implicit_resolvers = {
    first: list(resolvers) for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
for _digit in "0123456789":
    ConfigLoader.yaml_implicit_resolvers.setdefault(_digit, []).insert(
        0, ("tag:yaml.org,2002:str", TIME_OF_DAY_PATTERN)
    )


@dataclass(frozen=True)
class FilterSpec:
    max_level: int = MAX_LEVEL
    sessions: tuple[str, ...] = ()
    units: tuple[str, ...] = ()
    kernel_only: bool = False
    start_time: int | None = None   # seconds since midnight UTC
    stop_time: int | None = None
    start_date: int | None = None   # epoch seconds UTC
    stop_date: int | None = None
    max_entries: int = 0            # per session, 0 = unlimited
    output: str = "text"

    @property
    def has_time_window(self) -> bool:
        return any(
            v is not None
            for v in (self.start_time, self.stop_time, self.start_date, self.stop_date)
        )


def _parse_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


def _dedupe(values) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


def expand_units(units) -> tuple[str, ...]:
    """Add a ``<name>.service`` variant for every bare unit name."""
    expanded = []
    for unit in units:
        expanded.append(unit)
        if not unit.endswith(SERVICE_SUFFIX):
            expanded.append(unit + SERVICE_SUFFIX)
    return _dedupe(expanded)


def _parse_int(value, name: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"Invalid {name}: {value!r}")
    if isinstance(value, int):
        number = value
    else:
        text = str(value).strip()
        if not UNSIGNED_PATTERN.fullmatch(text):
            raise ConfigError(f"Invalid {name}: {value!r}, expected a non-negative integer")
        try:
            number = int(text)
        except ValueError as e:
            raise ConfigError(f"Invalid {name}: {value!r}: {e}") from e
    if number < 0:
        raise ConfigError(f"Invalid {name}: {value!r}, expected a non-negative integer")
    return number


def clamp_level(value) -> int:
    """Parse a priority level, clamping anything above 7 to 7."""
    level = _parse_int(value, "log level")
    if level > MAX_LEVEL:
        logger.warning(
            "Invalid log level: %d, default level DEBUG (%d) will be used", level, MAX_LEVEL
        )
        return MAX_LEVEL
    return level


def parse_time_of_day(value: str) -> int:
    """Parse ``HH:MM[:SS]`` into seconds since midnight."""
    if not isinstance(value, str):
        raise ConfigError(
            f"Invalid time of day {value!r}, expected HH:MM[:SS] (quote times in YAML)"
        )
    try:
        t = time.fromisoformat(str(value).strip())
    except ValueError as e:
        raise ConfigError(f"Invalid time of day {value!r}, expected HH:MM[:SS]") from e
    return t.hour * 3600 + t.minute * 60 + t.second


def parse_calendar_date(value: str) -> int:
    """Parse ``YYYY-MM-DD[ HH:MM[:SS]]`` (UTC) into epoch seconds."""
    try:
        dt = datetime.fromisoformat(str(value).strip())
    except ValueError as e:
        raise ConfigError(
            f"Invalid date {value!r}, expected YYYY-MM-DD[ HH:MM:SS]"
        ) from e
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def load_yaml_config(path: str | None) -> dict:
    """Load default filter options from a YAML file. Returns empty dict if no path."""
    path = path or os.environ.get("JRNLVIEW_CONFIG")
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.load(f, Loader=ConfigLoader) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Unable to read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    logger.info("Loaded YAML config from %s", path)
    return data


def _pick(cli_value, yaml_data: dict, key: str, env_var: str | None = None):
    """CLI value, then YAML, then environment; None if none is set."""
    if cli_value is not None:
        return cli_value
    if yaml_data.get(key) is not None:
        return yaml_data[key]
    if env_var:
        return os.environ.get(env_var) or None
    return None


def _as_list(value) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def _optional(value, parse):
    return None if value is None else parse(value)


def load_filter_spec(cli_args, yaml_data: dict) -> FilterSpec:
    """Build a FilterSpec from CLI args and parsed YAML data.

    Raises ConfigError for any malformed value.
    """
    level = _pick(getattr(cli_args, "priority", None), yaml_data, "priority", "JRNLVIEW_PRIORITY")
    number = _pick(getattr(cli_args, "number", None), yaml_data, "number", "JRNLVIEW_NUMBER")
    kernel = getattr(cli_args, "kernel", False) or _parse_bool(yaml_data.get("kernel", False))
    output = _pick(getattr(cli_args, "output", None), yaml_data, "output") or "text"
    if output not in OUTPUT_FORMATS:
        raise ConfigError(f"Invalid output format {output!r}, expected one of {OUTPUT_FORMATS}")

    sessions = _as_list(_pick(getattr(cli_args, "boot", None), yaml_data, "boots"))
    units = _as_list(_pick(getattr(cli_args, "unit", None), yaml_data, "units"))

    spec = FilterSpec(
        max_level=MAX_LEVEL if level is None else clamp_level(level),
        sessions=_dedupe(sessions),
        units=expand_units(units),
        kernel_only=kernel,
        start_time=_optional(
            _pick(getattr(cli_args, "since_time", None), yaml_data, "since_time"), parse_time_of_day
        ),
        stop_time=_optional(
            _pick(getattr(cli_args, "until_time", None), yaml_data, "until_time"), parse_time_of_day
        ),
        start_date=_optional(
            _pick(getattr(cli_args, "since_date", None), yaml_data, "since_date"), parse_calendar_date
        ),
        stop_date=_optional(
            _pick(getattr(cli_args, "until_date", None), yaml_data, "until_date"), parse_calendar_date
        ),
        max_entries=0 if number is None else _parse_int(number, "number of entries"),
        output=output,
    )

    if (
        spec.start_date is not None
        and spec.stop_date is not None
        and spec.start_date > spec.stop_date
    ):
        raise ConfigError("Start date is after stop date")

    return spec
