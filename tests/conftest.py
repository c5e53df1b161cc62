import os

import pytest

SAMPLE_JOURNAL = os.path.join(os.path.dirname(__file__), "data", "sample.json")

BOOT_A = "1f3c5a7e9b2d4f6081a3c5e7f9b1d3e5"
BOOT_B = "2a4c6e8f0b1d3f5a7c9e1b3d5f7a9c0e"


@pytest.fixture
def sample_journal():
    return SAMPLE_JOURNAL


@pytest.fixture
def journal_file(tmp_path):
    """Write the given lines to a temporary journal export and return its path."""
    def _write(*lines: str) -> str:
        path = tmp_path / "journal.json"
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return str(path)
    return _write
