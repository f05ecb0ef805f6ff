"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from pubmerge.models import SourceRecord  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def make_record() -> Callable[..., SourceRecord]:
    """Factory for source records with minimal boilerplate.

    Only ``title`` is needed; everything else defaults to None and the
    source defaults to 'scholar'.
    """

    def _factory(
        title: str = "A Study of Things",
        *,
        source: str = "scholar",
        **fields: Any,
    ) -> SourceRecord:
        return SourceRecord(source=source, title=title, **fields)

    return _factory


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding raw source fixtures."""
    return FIXTURES_DIR
