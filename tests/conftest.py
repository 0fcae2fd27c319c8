"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from kolviz.config.settings import Settings
from kolviz.core.log_data import LogData
from kolviz.data.reference import load_reference_data
from kolviz.parser.context import ParseContext


@pytest.fixture
def fixtures_dir():
    """Get the fixtures directory path."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_session_log(fixtures_dir):
    """Raw session log of five turns over two days."""
    return fixtures_dir / "sample_session.txt"


@pytest.fixture
def sample_preparsed_log(fixtures_dir):
    """Pre-parsed turn rundown of seven turns over two days."""
    return fixtures_dir / "sample_preparsed.txt"


@pytest.fixture(scope="session")
def reference():
    """Bundled reference data."""
    return load_reference_data()


@pytest.fixture
def ctx(reference):
    """Fresh parse context over an empty detailed log."""
    return ParseContext(log_data=LogData(is_detailed=True), reference=reference, settings=Settings())
