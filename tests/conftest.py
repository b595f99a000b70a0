"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from chuk_mcp_composer.arrangement import ArrangementScheduler
from chuk_mcp_composer.catalog import CatalogLoader
from chuk_mcp_composer.core.rng import SeededRandom


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def rng() -> SeededRandom:
    """A seeded random source."""
    return SeededRandom(1234)


@pytest.fixture
def catalog() -> CatalogLoader:
    """Catalog loaded from the built-in library."""
    return CatalogLoader()


@pytest.fixture
def scheduler() -> ArrangementScheduler:
    """Scheduler loaded from the built-in arrangement library."""
    return ArrangementScheduler()
