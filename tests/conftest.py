"""
Pytest Configuration and Fixtures

Provides shared fixtures for all tests.
"""

import os
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

FIXTURES_DIR = Path(__file__).parent / "fixtures"

AGENCY_CODE = "XNWXNW"


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def load_fixture() -> Callable[[str], str]:
    """Return a loader for REAXML documents in tests/fixtures."""

    def _load(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")

    return _load


@pytest.fixture(scope="function")
def temp_db() -> Generator[str, None, None]:
    """Create a temporary database file with the listing schema.

    Yields:
        Path to temporary database file.
    """
    from reaxmlfeed.core.database import get_connection
    from reaxmlfeed.core.schema import init_schema

    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = f.name

    with get_connection(db_path) as conn:
        init_schema(conn)

    yield db_path

    # Cleanup
    try:
        os.unlink(db_path)
    except (OSError, PermissionError):
        pass


@pytest.fixture(scope="function")
def repository(temp_db: str):
    """Open a ListingRepository on the temporary database."""
    from reaxmlfeed.core.repository import open_repository

    with open_repository(temp_db) as repo:
        yield repo


@pytest.fixture(scope="function")
def agency_id(repository) -> str:
    """Register the agency used by the sample feeds."""
    return repository.register_agency(AGENCY_CODE, "Example Realty")


@pytest.fixture(scope="function")
def test_config(temp_db: str, monkeypatch):
    """Create test configuration with temp database.

    Yields:
        Config object configured for testing.
    """
    # Set environment variables
    monkeypatch.setenv("REAXMLFEED_DB_PATH", temp_db)
    monkeypatch.setenv("REAXMLFEED_LOG_LEVEL", "DEBUG")

    # Reset config singleton
    from reaxmlfeed.config import reset_config, get_config
    reset_config()

    config = get_config()
    yield config

    # Cleanup
    reset_config()


@pytest.fixture(scope="function")
def make_record():
    """Factory for a valid current residential ListingRecord."""
    from reaxmlfeed.core.models import Address, Agent, Image, ListingRecord

    def _make(**overrides) -> ListingRecord:
        values = {
            "agent_id": AGENCY_CODE,
            "unique_id": "RES-1",
            "property_type": "residential",
            "headline": "Family home",
            "description": "Four bedrooms close to schools.",
            "price": 500000.0,
            "address": Address(street="Main Road", suburb="RICHMOND", street_number="39"),
            "agents": [Agent(position=1, name="John Doe", email="jdoe@example.com")],
            "images": [Image(type="photo", url="http://example.com/m.jpg", sort_order=0)],
        }
        values.update(overrides)
        return ListingRecord(**values)

    return _make
