"""Pytest configuration and shared fixtures."""

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
import structlog

from gv100ad.database import Database


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Drop logging configuration bound to a stream of a finished test."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)
    root.setLevel(logging.WARNING)


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def test_data_dir(project_root: Path) -> Path:
    """Return the test data directory."""
    return project_root / "tests" / "data"


@pytest.fixture
def sample_path(test_data_dir: Path) -> Path:
    """
    GV100AD excerpt covering Saarland, Berlin, Baden-Württemberg and Bayern.

    Saarland has no Regierungsbezirke, Baden-Württemberg has Regionen, and
    Bayern has a gemeindefreies Gebiet without population.
    """
    return test_data_dir / "GV100AD_sample.txt"


@pytest.fixture
def sample_lines(sample_path: Path) -> list[str]:
    """Lines of the sample file, without terminators."""
    return sample_path.read_text(encoding="utf-8").splitlines()


@pytest.fixture
def db(sample_path: Path) -> Database:
    """Database built from the sample file."""
    return Database.from_path(sample_path)


def _make_line(*fields: tuple[int, str]) -> str:
    chars = [" "] * 220
    for start, text in fields:
        chars[start - 1 : start - 1 + len(text)] = text
    return "".join(chars)


@pytest.fixture
def make_line() -> Callable[..., str]:
    """
    Build a 220-character line from (start column, text) pairs.

    Columns are 1-based, as in the record description.
    """
    return _make_line
