"""SQLite database operations.

Handles database connection, session management, and book lookups.
"""

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.pool import StaticPool

from ..errors import BookkeeperError, ConflictError, UnexpectedError
from .models import Base, Book

logger = logging.getLogger(__name__)


class Database:
    """Database connection and operations manager."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses
                     BOOKKEEPER_DB_PATH env var or default location.
        """
        if db_path is None:
            db_path = os.environ.get(
                "BOOKKEEPER_DB_PATH",
                str(Path.home() / ".bookkeeper" / "books.db"),
            )

        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"

        if not self._is_memory:
            self._ensure_directory()

        # In-memory databases share one connection so every session sees the same data
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables."""
        # Import plan and account models to register them with Base
        from ..schedule.models import ReadingPlan  # noqa: F401
        from ..accounts.models import Account  # noqa: F401

        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """Drop all database tables. Use with caution!"""
        Base.metadata.drop_all(self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager.

        Commits on success and rolls back on any error. Persistence
        failures are translated into bookkeeper errors.
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except BookkeeperError:
            session.rollback()
            raise
        except StaleDataError as e:
            session.rollback()
            logger.warning("Concurrent update rejected: %s", e)
            raise ConflictError("Record was modified by another request; reload and retry") from e
        except IntegrityError as e:
            session.rollback()
            logger.warning("Integrity violation: %s", e.orig)
            raise ConflictError("Record already exists or was modified concurrently") from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.exception("Database operation failed")
            raise UnexpectedError("Database operation failed") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ========================================================================
    # Book Lookups
    # ========================================================================

    def get_book(
        self, owner_id: str, title: str, session: Optional[Session] = None
    ) -> Optional[Book]:
        """Get an owner's book by title."""

        def _get(s: Session) -> Optional[Book]:
            stmt = (
                select(Book)
                .where(Book.owner_id == owner_id, Book.title == title)
                .limit(1)
            )
            return s.execute(stmt).scalars().first()

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                book = _get(s)
                if book:
                    s.expunge(book)
                return book

    def get_books(
        self,
        owner_id: str,
        include_complete: bool = True,
        session: Optional[Session] = None,
    ) -> list[Book]:
        """Get an owner's books, most recently updated first."""

        def _get(s: Session) -> list[Book]:
            stmt = select(Book).where(Book.owner_id == owner_id)
            if not include_complete:
                stmt = stmt.where(Book.complete.is_(False))
            stmt = stmt.order_by(Book.last_updated.desc(), Book.title)
            return list(s.execute(stmt).scalars().all())

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                books = _get(s)
                for book in books:
                    s.expunge(book)
                return books

    def get_current_book(
        self, owner_id: str, session: Optional[Session] = None
    ) -> Optional[Book]:
        """Get the most recently updated incomplete book for an owner."""

        def _get(s: Session) -> Optional[Book]:
            stmt = (
                select(Book)
                .where(Book.owner_id == owner_id, Book.complete.is_(False))
                .order_by(Book.last_updated.desc())
                .limit(1)
            )
            return s.execute(stmt).scalars().first()

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                book = _get(s)
                if book:
                    s.expunge(book)
                return book


# Global database instance
_db: Optional[Database] = None


def get_db(db_path: Optional[str] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database(db_path)
        _db.create_tables()
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    _db = None
