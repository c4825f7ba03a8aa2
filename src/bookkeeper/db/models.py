"""SQLAlchemy ORM models for local SQLite database.

Tables:
- books: One row per (owner, title) with cumulative progress
- daily_reads: Pages read per book per day
"""

from datetime import date, datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import (
    Boolean,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from .schemas import BookStatus


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys."""
    return str(uuid4())


def utc_now() -> str:
    """Current UTC time as an ISO string."""
    return datetime.now(timezone.utc).isoformat()


class Book(Base):
    """Book model - a single owner's copy of a title and its progress."""

    __tablename__ = "books"
    __table_args__ = (UniqueConstraint("owner_id", "title", name="uq_books_owner_title"),)

    # Primary key
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    # Ownership
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # Core fields
    title: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    total_pages: Mapped[int] = mapped_column(Integer, nullable=False)
    pages_read: Mapped[int] = mapped_column(Integer, default=0)
    current_page: Mapped[int] = mapped_column(Integer, default=0)
    complete: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    # Dates
    start_date: Mapped[Optional[str]] = mapped_column(String(10))  # ISO date
    end_date: Mapped[Optional[str]] = mapped_column(String(10))

    # Timestamps
    created_at: Mapped[str] = mapped_column(String(32), default=utc_now)
    last_updated: Mapped[str] = mapped_column(String(32), default=utc_now, index=True)

    # Optimistic locking, bumped by the mapper on every UPDATE
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    # Relationships
    daily_reads: Mapped[list["DailyRead"]] = relationship(
        "DailyRead",
        back_populates="book",
        cascade="all, delete-orphan",
        order_by="DailyRead.read_date",
        lazy="selectin",
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, owner='{self.owner_id}', title='{self.title}')>"

    @property
    def status(self) -> BookStatus:
        """Lifecycle state derived from pages read."""
        if self.complete:
            return BookStatus.COMPLETE
        if self.pages_read and self.pages_read > 0:
            return BookStatus.IN_PROGRESS
        return BookStatus.NOT_STARTED

    @property
    def progress_percent(self) -> int:
        """Percentage of the book read."""
        if not self.total_pages:
            return 0
        return min(100, int((self.pages_read or 0) / self.total_pages * 100))

    def get_daily_read(self, day: date) -> Optional["DailyRead"]:
        """Get the log entry for a day, if one exists."""
        key = day.isoformat()
        for entry in self.daily_reads:
            if entry.read_date == key:
                return entry
        return None


class DailyRead(Base):
    """Daily read model - pages read for one book on one day."""

    __tablename__ = "daily_reads"
    __table_args__ = (UniqueConstraint("book_id", "read_date", name="uq_daily_reads_book_date"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    book_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True
    )
    read_date: Mapped[str] = mapped_column(String(10), nullable=False, index=True)  # ISO date
    pages_read: Mapped[int] = mapped_column(Integer, default=0)

    # Timestamps
    created_at: Mapped[str] = mapped_column(String(32), default=utc_now)
    updated_at: Mapped[str] = mapped_column(String(32), default=utc_now, onupdate=utc_now)

    # Relationships
    book: Mapped["Book"] = relationship("Book", back_populates="daily_reads")

    def __repr__(self) -> str:
        return f"<DailyRead(book_id={self.book_id}, date={self.read_date}, pages={self.pages_read})>"
