"""Tests for the configuration module."""

import os
import tempfile
import unittest
from argparse import Namespace

from jrnlview.config import (
    FilterSpec,
    clamp_level,
    expand_units,
    load_filter_spec,
    load_yaml_config,
    parse_calendar_date,
    parse_time_of_day,
)
from jrnlview.errors import ConfigError

ENV_KEYS = ("JRNLVIEW_CONFIG", "JRNLVIEW_PRIORITY", "JRNLVIEW_NUMBER")


def _args(**overrides) -> Namespace:
    values = dict(
        priority=None, boot=None, unit=None, kernel=False, number=None,
        since_time=None, until_time=None, since_date=None, until_date=None,
        output=None,
    )
    values.update(overrides)
    return Namespace(**values)


class TestExpandUnits(unittest.TestCase):
    def test_bare_name_gets_service_variant(self):
        self.assertEqual(expand_units(["foo"]), ("foo", "foo.service"))

    def test_service_name_not_doubled(self):
        self.assertEqual(expand_units(["foo.service"]), ("foo.service",))

    def test_duplicates_removed(self):
        self.assertEqual(
            expand_units(["foo", "foo.service", "bar"]),
            ("foo", "foo.service", "bar", "bar.service"),
        )

    def test_empty(self):
        self.assertEqual(expand_units([]), ())


class TestClampLevel(unittest.TestCase):
    def test_in_range(self):
        for level in range(8):
            self.assertEqual(clamp_level(str(level)), level)

    def test_above_seven_clamped(self):
        with self.assertLogs("jrnlview.config", level="WARNING") as cm:
            self.assertEqual(clamp_level("9"), 7)
        self.assertIn("Invalid log level: 9", cm.output[0])

    def test_int_value(self):
        self.assertEqual(clamp_level(3), 3)

    def test_leading_plus(self):
        self.assertEqual(clamp_level("+3"), 3)

    def test_malformed(self):
        for value in ("abc", "-1", "3.5", "", -2, True):
            with self.assertRaises(ConfigError, msg=f"Expected ConfigError for {value!r}"):
                clamp_level(value)


class TestTimeParsing(unittest.TestCase):
    def test_time_of_day(self):
        self.assertEqual(parse_time_of_day("00:00"), 0)
        self.assertEqual(parse_time_of_day("08:30"), 8 * 3600 + 30 * 60)
        self.assertEqual(parse_time_of_day("23:59:59"), 86399)

    def test_bad_time_of_day(self):
        for value in ("25:00", "8h30", "noon"):
            with self.assertRaises(ConfigError):
                parse_time_of_day(value)

    def test_non_string_time_of_day(self):
        with self.assertRaises(ConfigError) as cm:
            parse_time_of_day(510)
        self.assertIn("quote", str(cm.exception))

    def test_calendar_date(self):
        self.assertEqual(parse_calendar_date("2020-09-13"), 1599955200)
        self.assertEqual(parse_calendar_date("2020-09-13 12:26:40"), 1600000000)

    def test_bad_calendar_date(self):
        for value in ("2020-13-01", "13/09/2020", "yesterday"):
            with self.assertRaises(ConfigError):
                parse_calendar_date(value)


class TestFilterSpecDefaults(unittest.TestCase):
    def test_default_values(self):
        spec = FilterSpec()
        self.assertEqual(spec.max_level, 7)
        self.assertEqual(spec.sessions, ())
        self.assertEqual(spec.units, ())
        self.assertFalse(spec.kernel_only)
        self.assertEqual(spec.max_entries, 0)
        self.assertEqual(spec.output, "text")
        self.assertFalse(spec.has_time_window)

    def test_frozen(self):
        spec = FilterSpec()
        with self.assertRaises(AttributeError):
            spec.max_level = 3


class TestLoadFilterSpec(unittest.TestCase):
    def setUp(self):
        self._orig_env = os.environ.copy()
        for key in ENV_KEYS:
            os.environ.pop(key, None)

    def tearDown(self):
        os.environ.clear()
        os.environ.update(self._orig_env)

    def test_defaults(self):
        self.assertEqual(load_filter_spec(_args(), {}), FilterSpec())

    def test_cli_values(self):
        spec = load_filter_spec(
            _args(priority="3", boot=["a", "b", "a"], unit=["sshd"], kernel=True, number="5"),
            {},
        )
        self.assertEqual(spec.max_level, 3)
        self.assertEqual(spec.sessions, ("a", "b"))
        self.assertEqual(spec.units, ("sshd", "sshd.service"))
        self.assertTrue(spec.kernel_only)
        self.assertEqual(spec.max_entries, 5)

    def test_cli_priority_leading_plus(self):
        self.assertEqual(load_filter_spec(_args(priority="+3"), {}).max_level, 3)

    def test_priority_clamped(self):
        with self.assertLogs("jrnlview.config", level="WARNING"):
            spec = load_filter_spec(_args(priority="12"), {})
        self.assertEqual(spec.max_level, 7)

    def test_bad_number(self):
        with self.assertRaises(ConfigError):
            load_filter_spec(_args(number="ten"), {})
        with self.assertRaises(ConfigError):
            load_filter_spec(_args(number="-1"), {})

    def test_time_window_parsed(self):
        spec = load_filter_spec(
            _args(since_time="08:00", until_time="17:30",
                  since_date="2020-09-13", until_date="2020-09-14"),
            {},
        )
        self.assertEqual(spec.start_time, 8 * 3600)
        self.assertEqual(spec.stop_time, 17 * 3600 + 30 * 60)
        self.assertEqual(spec.start_date, 1599955200)
        self.assertEqual(spec.stop_date, 1600041600)
        self.assertTrue(spec.has_time_window)

    def test_reversed_date_window(self):
        with self.assertRaises(ConfigError):
            load_filter_spec(_args(since_date="2020-09-14", until_date="2020-09-13"), {})

    def test_bad_output(self):
        with self.assertRaises(ConfigError):
            load_filter_spec(_args(), {"output": "xml"})

    def test_yaml_values_used_when_cli_unset(self):
        yaml_data = {
            "priority": 4,
            "boots": "a",
            "units": ["cron", "sshd.service"],
            "kernel": True,
            "number": 10,
            "output": "json",
        }
        spec = load_filter_spec(_args(), yaml_data)
        self.assertEqual(spec.max_level, 4)
        self.assertEqual(spec.sessions, ("a",))
        self.assertEqual(spec.units, ("cron", "cron.service", "sshd.service"))
        self.assertTrue(spec.kernel_only)
        self.assertEqual(spec.max_entries, 10)
        self.assertEqual(spec.output, "json")

    def test_cli_overrides_yaml(self):
        spec = load_filter_spec(_args(priority="2", unit=["ntpd"]), {"priority": 5, "units": ["cron"]})
        self.assertEqual(spec.max_level, 2)
        self.assertEqual(spec.units, ("ntpd", "ntpd.service"))

    def test_env_fallback(self):
        os.environ["JRNLVIEW_PRIORITY"] = "5"
        os.environ["JRNLVIEW_NUMBER"] = "20"
        spec = load_filter_spec(_args(), {})
        self.assertEqual(spec.max_level, 5)
        self.assertEqual(spec.max_entries, 20)

    def test_yaml_overrides_env(self):
        os.environ["JRNLVIEW_PRIORITY"] = "5"
        spec = load_filter_spec(_args(), {"priority": 1})
        self.assertEqual(spec.max_level, 1)

    def test_empty_env_values_treated_as_unset(self):
        os.environ["JRNLVIEW_PRIORITY"] = ""
        os.environ["JRNLVIEW_NUMBER"] = ""
        spec = load_filter_spec(_args(), {})
        self.assertEqual(spec.max_level, 7)
        self.assertEqual(spec.max_entries, 0)


class TestLoadYamlConfig(unittest.TestCase):
    def setUp(self):
        self._orig_env = os.environ.copy()
        os.environ.pop("JRNLVIEW_CONFIG", None)
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        os.environ.clear()
        os.environ.update(self._orig_env)

    def _write(self, text: str) -> str:
        path = os.path.join(self.tmpdir, "jrnlview.yml")
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def test_no_path(self):
        self.assertEqual(load_yaml_config(None), {})

    def test_loads_mapping(self):
        path = self._write("priority: 3\nunits:\n  - sshd\nsince_time: '08:00'\n")
        self.assertEqual(
            load_yaml_config(path),
            {"priority": 3, "units": ["sshd"], "since_time": "08:00"},
        )

    def test_empty_file(self):
        self.assertEqual(load_yaml_config(self._write("")), {})

    def test_missing_file_warns(self):
        with self.assertLogs("jrnlview.config", level="WARNING"):
            self.assertEqual(load_yaml_config(os.path.join(self.tmpdir, "nope.yml")), {})

    def test_env_path(self):
        os.environ["JRNLVIEW_CONFIG"] = self._write("kernel: true\n")
        self.assertEqual(load_yaml_config(None), {"kernel": True})

    def test_malformed_yaml(self):
        with self.assertRaises(ConfigError):
            load_yaml_config(self._write("units: [sshd\n"))

    def test_non_mapping(self):
        with self.assertRaises(ConfigError):
            load_yaml_config(self._write("- sshd\n- cron\n"))

    def test_unquoted_time_stays_string(self):
        data = load_yaml_config(self._write("since_time: 10:30\nuntil_time: 17:45:30\n"))
        self.assertEqual(data, {"since_time": "10:30", "until_time": "17:45:30"})
        spec = load_filter_spec(_args(), data)
        self.assertEqual(spec.start_time, 10 * 3600 + 30 * 60)
        self.assertEqual(spec.stop_time, 17 * 3600 + 45 * 60 + 30)

    def test_unquoted_single_digit_hour_rejected(self):
        data = load_yaml_config(self._write("since_time: 8:30\n"))
        with self.assertRaises(ConfigError) as cm:
            load_filter_spec(_args(), data)
        self.assertIn("quote", str(cm.exception))

    def test_directory_path(self):
        with self.assertRaises(ConfigError):
            load_yaml_config(self.tmpdir)

    def test_not_utf8(self):
        path = os.path.join(self.tmpdir, "binary.yml")
        with open(path, "wb") as f:
            f.write(b"priority: \xff\xfe\n")
        with self.assertRaises(ConfigError):
            load_yaml_config(path)


if __name__ == "__main__":
    unittest.main()
