"""Manager for reading plans.

A plan pairs a book with a pages-per-day target. The projection
(pages remaining, estimated days, end date) is always derived from the
book's latest stored progress.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from sqlalchemy import select

from ..db.models import Book, utc_now
from ..db.sqlite import Database, get_db
from ..errors import NotFoundError, ValidationError
from ..reading.progress import require_owner
from .models import ReadingPlan
from .schemas import ReadingPlanRequest, ReadingPlanResponse

logger = logging.getLogger(__name__)


@dataclass
class PlanProjection:
    """Projected finish for a book at a given daily pace."""

    pages_remaining: int
    estimated_days: int
    end_date: date


def project_plan(
    total_pages: int,
    pages_read: int,
    pages_per_day: int,
    today: Optional[date] = None,
) -> PlanProjection:
    """Project when a book will be finished.

    Args:
        total_pages: Book's page count
        pages_read: Pages already read
        pages_per_day: Daily target, must be positive
        today: Day the projection starts from (default: today)

    Returns:
        PlanProjection; ``pages_remaining`` is negative or zero when the
        book is already finished, in which case ``estimated_days`` is 0.
    """
    if pages_per_day <= 0:
        raise ValidationError("pagesPerDay must be greater than 0")

    today = today or date.today()
    pages_remaining = total_pages - pages_read
    if pages_remaining > 0:
        estimated_days = math.ceil(pages_remaining / pages_per_day)
    else:
        estimated_days = 0

    return PlanProjection(
        pages_remaining=pages_remaining,
        estimated_days=estimated_days,
        end_date=today + timedelta(days=estimated_days),
    )


class PlanManager:
    """Creates, replaces and lists reading plans."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize the plan manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    # ========================================================================
    # Reading Plan CRUD
    # ========================================================================

    def create_or_update_plan(
        self,
        owner_id: str,
        request: ReadingPlanRequest,
        today: Optional[date] = None,
    ) -> tuple[ReadingPlanResponse, bool]:
        """Create a plan for a book, or recompute the existing one in place.

        Args:
            owner_id: Owner identifier
            request: Book title and pages-per-day target
            today: Day the projection starts from (default: today)

        Returns:
            Tuple of (plan, created)

        Raises:
            NotFoundError: If the book does not exist
        """
        require_owner(owner_id)
        today = today or date.today()

        with self.db.get_session() as session:
            book = self.db.get_book(owner_id, request.book_title, session)
            if not book:
                raise NotFoundError("No book found for this user and title")

            projection = project_plan(
                book.total_pages, book.pages_read, request.pages_per_day, today
            )

            plan = self._find_plan(session, owner_id, book.id)
            created = plan is None
            if created:
                plan = ReadingPlan(
                    owner_id=owner_id,
                    book_id=book.id,
                    book_title=book.title,
                    start_date=today.isoformat(),
                )
                session.add(plan)
            else:
                plan.updated_at = utc_now()

            plan.pages_per_day = request.pages_per_day
            plan.estimated_days = projection.estimated_days
            plan.end_date = projection.end_date.isoformat()
            session.flush()

            logger.info(
                "%s plan for '%s' (%s): %d pages/day, %d days",
                "Created" if created else "Updated",
                book.title,
                owner_id,
                plan.pages_per_day,
                plan.estimated_days,
            )
            return self._plan_to_response(plan, book, projection), created

    def get_plan(
        self, owner_id: str, title: str, today: Optional[date] = None
    ) -> ReadingPlanResponse:
        """Get the plan for one of the owner's books.

        Raises:
            NotFoundError: If the book or its plan does not exist
        """
        require_owner(owner_id)
        today = today or date.today()

        with self.db.get_session() as session:
            book = self.db.get_book(owner_id, title, session)
            if not book:
                raise NotFoundError("No book found for this user and title")

            plan = self._find_plan(session, owner_id, book.id)
            if not plan:
                raise NotFoundError("No reading plan found for this book")

            projection = project_plan(
                book.total_pages, book.pages_read, plan.pages_per_day, today
            )
            return self._plan_to_response(plan, book, projection)

    def list_plans(
        self, owner_id: str, today: Optional[date] = None
    ) -> list[ReadingPlanResponse]:
        """Get all of the owner's plans with projections from current progress."""
        require_owner(owner_id)
        today = today or date.today()

        with self.db.get_session() as session:
            stmt = (
                select(ReadingPlan, Book)
                .join(Book, ReadingPlan.book_id == Book.id)
                .where(ReadingPlan.owner_id == owner_id)
                .order_by(ReadingPlan.created_at.desc())
            )
            results = session.execute(stmt).all()

            plans = []
            for plan, book in results:
                projection = project_plan(
                    book.total_pages, book.pages_read, plan.pages_per_day, today
                )
                plans.append(self._plan_to_response(plan, book, projection))
            return plans

    def _find_plan(self, session, owner_id: str, book_id: str) -> Optional[ReadingPlan]:
        """Look up the plan for an (owner, book) pair."""
        stmt = select(ReadingPlan).where(
            ReadingPlan.owner_id == owner_id,
            ReadingPlan.book_id == book_id,
        )
        return session.execute(stmt).scalars().first()

    def _plan_to_response(
        self, plan: ReadingPlan, book: Book, projection: PlanProjection
    ) -> ReadingPlanResponse:
        """Convert plan model to response."""
        return ReadingPlanResponse(
            id=plan.id,
            user_id=plan.owner_id,
            book_title=book.title,
            total_pages=book.total_pages,
            pages_read=book.pages_read,
            pages_remaining=projection.pages_remaining,
            pages_per_day=plan.pages_per_day,
            estimated_days=projection.estimated_days,
            start_date=date.fromisoformat(plan.start_date) if plan.start_date else None,
            end_date=projection.end_date,
            created_at=plan.created_at,
            updated_at=plan.updated_at,
        )
