"""Pytest configuration and shared fixtures.

This module provides fixtures for testing the bookkeeper application,
including in-memory databases, sample books and a fake identity provider.
"""

import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Generator

import pytest

from bookkeeper.accounts.schemas import Identity
from bookkeeper.api.identity import StaticIdentityProvider
from bookkeeper.config import reset_config
from bookkeeper.db.schemas import BookAddRequest, BookResponse
from bookkeeper.db.sqlite import Database, reset_db
from bookkeeper.reading.progress import ProgressTracker
from bookkeeper.schedule.manager import PlanManager

OWNER = "auth0|reader-1"
OTHER_OWNER = "auth0|reader-2"
DAY_1 = date(2025, 3, 1)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def db() -> Database:
    """Create an in-memory database for testing."""
    database = Database(":memory:")
    database.create_tables()
    return database


@pytest.fixture(scope="function")
def temp_db_path() -> Generator[Path, None, None]:
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)
    yield db_path
    # Cleanup
    if db_path.exists():
        db_path.unlink()


@pytest.fixture
def file_db(temp_db_path: Path) -> Generator[Database, None, None]:
    """Create a file-backed database and point the global instance at it."""
    reset_db()
    reset_config()
    os.environ["BOOKKEEPER_DB_PATH"] = str(temp_db_path)

    database = Database(str(temp_db_path))
    database.create_tables()
    yield database

    reset_db()
    reset_config()
    if "BOOKKEEPER_DB_PATH" in os.environ:
        del os.environ["BOOKKEEPER_DB_PATH"]


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def tracker(db: Database) -> ProgressTracker:
    """Create a progress tracker on the test database."""
    return ProgressTracker(db)


@pytest.fixture
def plan_manager(db: Database) -> PlanManager:
    """Create a plan manager on the test database."""
    return PlanManager(db)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_book_data() -> BookAddRequest:
    """Create sample book data for testing."""
    return BookAddRequest(
        book_title="The Name of the Wind",
        total_pages=300,
        pages_read=0,
        notes="Borrowed from the library",
    )


@pytest.fixture
def created_book(tracker: ProgressTracker, sample_book_data: BookAddRequest) -> BookResponse:
    """Create and return a book in the database."""
    book, _ = tracker.add_book(OWNER, sample_book_data, today=DAY_1)
    return book


# ============================================================================
# Identity Fixtures
# ============================================================================


@pytest.fixture
def identity() -> Identity:
    """The identity behind the test token."""
    return Identity(owner_id=OWNER, email="reader@example.com", name="Test Reader")


@pytest.fixture
def identity_provider(identity: Identity) -> StaticIdentityProvider:
    """Identity provider that accepts two fixed tokens."""
    return StaticIdentityProvider({
        "good-token": identity,
        "other-token": Identity(owner_id=OTHER_OWNER, email="other@example.com"),
    })
