"""Shared fixtures for proctree tests."""

from pathlib import Path

import pytest

DATA_DIR = Path(__file__).parent / "data"


def cat(name: str) -> list[str]:
    """Command vector replaying a captured 'ps' table from tests/data."""
    return ["cat", str(DATA_DIR / name)]


def count_lines(name: str) -> int:
    """Number of non-blank lines in a data file."""
    return sum(1 for line in (DATA_DIR / name).read_text().splitlines() if line.strip())


@pytest.fixture
def data_dir() -> Path:
    """Directory holding captured 'ps' output."""
    return DATA_DIR
