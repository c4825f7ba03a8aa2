"""Planned versus actual reading statistics.

For each day a book was read, compares the cumulative pages the plan
called for with the cumulative pages actually read.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from sqlalchemy import select

from ..db.schemas import CamelModel
from ..db.sqlite import Database, get_db
from ..errors import NotFoundError, ValidationError
from ..reading.progress import require_owner
from ..schedule.models import ReadingPlan


@dataclass
class DailyStat:
    """Cumulative plan and actual pages at one day index."""

    date: date
    plan: int
    actual: int

    @property
    def bonus(self) -> int:
        """Pages ahead of (positive) or behind (negative) the plan."""
        return self.actual - self.plan


class ReadingStatResponse(CamelModel):
    """One point of the plan/actual chart."""

    date: date
    plan: int
    actual: int
    bonus: int


def compute_reading_stats(
    entries: Iterable[tuple[date, int]], pages_per_day: int
) -> list[DailyStat]:
    """Build the running plan/actual series for a daily-read log.

    Args:
        entries: (day, pages read that day) pairs in any order
        pages_per_day: Plan's daily target

    Returns:
        One DailyStat per entry, oldest first. For the i-th entry
        (1-indexed) the plan is ``pages_per_day * i`` and the actual is
        the running sum of pages read.
    """
    if pages_per_day <= 0:
        raise ValidationError("pagesPerDay must be greater than 0")

    stats = []
    actual = 0
    for index, (day, pages) in enumerate(sorted(entries, key=lambda e: e[0]), start=1):
        actual += pages
        stats.append(DailyStat(date=day, plan=pages_per_day * index, actual=actual))
    return stats


class StatsService:
    """Serves reading stats for an owner's planned books."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize stats service.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def reading_stats(self, owner_id: str, title: str) -> list[ReadingStatResponse]:
        """Get the plan/actual series for a book.

        Raises:
            NotFoundError: If the book or its reading plan does not exist
        """
        require_owner(owner_id)

        with self.db.get_session() as session:
            book = self.db.get_book(owner_id, title, session)
            if not book:
                raise NotFoundError("No book found for this user and title")

            stmt = select(ReadingPlan).where(
                ReadingPlan.owner_id == owner_id,
                ReadingPlan.book_id == book.id,
            )
            plan = session.execute(stmt).scalars().first()
            if not plan:
                raise NotFoundError("No reading plan found for this book")
            pages_per_day = plan.pages_per_day

            entries = [
                (date.fromisoformat(entry.read_date), entry.pages_read)
                for entry in book.daily_reads
            ]

        return [
            ReadingStatResponse(
                date=stat.date, plan=stat.plan, actual=stat.actual, bonus=stat.bonus
            )
            for stat in compute_reading_stats(entries, pages_per_day)
        ]
