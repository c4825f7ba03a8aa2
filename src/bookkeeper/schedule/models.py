"""SQLAlchemy models for reading plans."""

from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..db.models import Base, Book, generate_uuid, utc_now


class ReadingPlan(Base):
    """A pages-per-day plan for one of an owner's books."""

    __tablename__ = "reading_plans"
    __table_args__ = (UniqueConstraint("owner_id", "book_id", name="uq_reading_plans_owner_book"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    book_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True
    )
    book_title: Mapped[str] = mapped_column(String(500), nullable=False)
    pages_per_day: Mapped[int] = mapped_column(Integer, nullable=False)

    # Derived projection, recomputed on every update
    estimated_days: Mapped[int] = mapped_column(Integer, default=0)
    start_date: Mapped[Optional[str]] = mapped_column(String(10))  # ISO date
    end_date: Mapped[Optional[str]] = mapped_column(String(10))

    created_at: Mapped[str] = mapped_column(String(32), default=utc_now)
    updated_at: Mapped[Optional[str]] = mapped_column(String(32))

    # Relationships
    book: Mapped["Book"] = relationship("Book")

    def __repr__(self) -> str:
        return f"<ReadingPlan(owner='{self.owner_id}', book='{self.book_title}', ppd={self.pages_per_day})>"
