"""Reading progress tracking.

Records page-count submissions against a book, keeps the per-day log of
pages read, and moves the book through its lifecycle
(not started -> in progress -> complete).
"""

import logging
from datetime import date
from typing import Optional

from ..db.models import Book, DailyRead, utc_now
from ..db.schemas import BookAddRequest, BookResponse, ProgressUpdate
from ..db.sqlite import Database, get_db
from ..errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def require_owner(owner_id: Optional[str]) -> str:
    """Reject a missing owner identifier."""
    if not owner_id or not owner_id.strip():
        raise ValidationError("userId is required")
    return owner_id


def record_daily_read(book: Book, pages: int, day: date) -> Optional[DailyRead]:
    """Add pages to the book's log entry for a day.

    Same-day submissions accumulate into one entry. Non-positive deltas
    leave the log untouched.

    Returns:
        The entry that was created or updated, or None
    """
    if pages <= 0:
        return None

    entry = book.get_daily_read(day)
    if entry:
        entry.pages_read += pages
    else:
        entry = DailyRead(read_date=day.isoformat(), pages_read=pages)
        book.daily_reads.append(entry)
    return entry


class ProgressTracker:
    """Tracks page progress for an owner's books."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize progress tracker.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    # ========================================================================
    # Book Records
    # ========================================================================

    def add_book(
        self,
        owner_id: str,
        request: BookAddRequest,
        today: Optional[date] = None,
    ) -> tuple[BookResponse, bool]:
        """Create a book, or overwrite the details of an existing one.

        Args:
            owner_id: Owner identifier
            request: Validated book details
            today: Date used for defaults (default: today)

        Returns:
            Tuple of (book, created)

        Raises:
            ValidationError: If a completed book would be left short of its
                last page
        """
        require_owner(owner_id)
        today = today or date.today()

        with self.db.get_session() as session:
            book = self.db.get_book(owner_id, request.book_title, session)
            created = book is None

            if not created and book.complete and request.pages_read < request.total_pages:
                raise ValidationError("Book is already complete; pagesRead must equal totalPages")

            if created:
                book = Book(owner_id=owner_id, title=request.book_title)
                session.add(book)

            book.total_pages = request.total_pages
            book.pages_read = request.pages_read
            book.current_page = request.pages_read
            if request.notes is not None:
                book.notes = request.notes

            if request.start_date:
                book.start_date = request.start_date.isoformat()
            elif book.start_date is None and request.pages_read > 0:
                book.start_date = today.isoformat()

            if request.end_date:
                book.end_date = request.end_date.isoformat()

            if request.pages_read == request.total_pages and not book.complete:
                self._mark_complete(book, today)

            book.last_updated = utc_now()
            session.flush()

            if created:
                logger.info("Added book '%s' for %s", book.title, owner_id)
            else:
                logger.info("Updated book '%s' for %s", book.title, owner_id)

            return BookResponse.from_model(book), created

    def get_book(self, owner_id: str, title: str) -> BookResponse:
        """Get one of the owner's books by title.

        Raises:
            NotFoundError: If the owner has no book with that title
        """
        require_owner(owner_id)
        with self.db.get_session() as session:
            book = self.db.get_book(owner_id, title, session)
            if not book:
                raise NotFoundError("No book found for this user and title")
            return BookResponse.from_model(book)

    def get_current_book(
        self, owner_id: str, title: Optional[str] = None
    ) -> BookResponse:
        """Get the book the owner is currently reading.

        Args:
            owner_id: Owner identifier
            title: Specific title to fetch (default: most recently updated
                   incomplete book)
        """
        if title:
            return self.get_book(owner_id, title)

        require_owner(owner_id)
        with self.db.get_session() as session:
            book = self.db.get_current_book(owner_id, session)
            if not book:
                raise NotFoundError("No current book found for this user")
            return BookResponse.from_model(book)

    def get_history(
        self, owner_id: str, include_complete: bool = True
    ) -> list[BookResponse]:
        """Get all of the owner's books, most recently updated first."""
        require_owner(owner_id)
        with self.db.get_session() as session:
            books = self.db.get_books(owner_id, include_complete, session)
            return [BookResponse.from_model(book) for book in books]

    # ========================================================================
    # Progress Updates
    # ========================================================================

    def update_progress(
        self,
        owner_id: str,
        update: ProgressUpdate,
        today: Optional[date] = None,
    ) -> BookResponse:
        """Submit a new current page for a book.

        The difference from the previous current page is added to today's
        log entry when positive. A lower page is accepted on an unfinished
        book but never taken back out of the log.

        Args:
            owner_id: Owner identifier
            update: Title, new current page and optional notes
            today: Day the pages are credited to (default: today)

        Returns:
            The updated book

        Raises:
            ValidationError: If the page is negative, past the last page, or
                before the last page of a completed book
            NotFoundError: If the book does not exist
        """
        require_owner(owner_id)
        if update.current_page < 0:
            raise ValidationError("currentPage cannot be negative")

        today = today or date.today()

        with self.db.get_session() as session:
            book = self.db.get_book(owner_id, update.book_title, session)
            if not book:
                raise NotFoundError("No book found for this user and title")

            self._apply_progress(book, update.current_page, update.notes, today)
            session.flush()
            return BookResponse.from_model(book)

    def finish_book(
        self, owner_id: str, title: str, today: Optional[date] = None
    ) -> BookResponse:
        """Mark a book as finished by moving it to its last page."""
        require_owner(owner_id)
        today = today or date.today()

        with self.db.get_session() as session:
            book = self.db.get_book(owner_id, title, session)
            if not book:
                raise NotFoundError("No book found for this user and title")

            self._apply_progress(book, book.total_pages, None, today)
            session.flush()
            return BookResponse.from_model(book)

    def _apply_progress(
        self,
        book: Book,
        new_page: int,
        notes: Optional[str],
        today: date,
    ) -> None:
        """Move a book to a new page and log the delta."""
        if new_page > book.total_pages:
            raise ValidationError(
                f"currentPage cannot exceed totalPages ({book.total_pages})"
            )
        if book.complete and new_page < book.total_pages:
            raise ValidationError("Book is already complete; currentPage cannot go back")

        delta = new_page - (book.current_page or 0)
        record_daily_read(book, delta, today)

        book.pages_read = new_page
        book.current_page = new_page
        if notes is not None:
            book.notes = notes

        if book.start_date is None and new_page > 0:
            book.start_date = today.isoformat()

        if new_page == book.total_pages and not book.complete:
            self._mark_complete(book, today)

        book.last_updated = utc_now()
        logger.debug(
            "Progress for '%s' (%s): page %d, delta %d",
            book.title, book.owner_id, new_page, delta,
        )

    def _mark_complete(self, book: Book, today: date) -> None:
        """Flag a book complete and stamp its end date."""
        book.complete = True
        book.end_date = today.isoformat()
        logger.info("Book '%s' completed by %s", book.title, book.owner_id)
