"""Pydantic schemas for data validation.

Request and response bodies use the camelCase field names the mobile
client sends (``bookTitle``, ``pagesRead`` ...); Python code uses the
snake_case attribute names.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel


class BookStatus(str, Enum):
    """Lifecycle of a book."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


# ============================================================================
# Request Schemas
# ============================================================================


class BookAddRequest(CamelModel):
    """Schema for adding a book or overwriting an existing one's details."""

    book_title: str = Field(..., min_length=1, max_length=500, description="Book title")
    total_pages: int = Field(..., ge=1, description="Total page count")
    pages_read: int = Field(0, ge=0, description="Pages read so far")
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_ranges(self) -> "BookAddRequest":
        """Pages read cannot pass the total; end cannot precede start."""
        if self.pages_read > self.total_pages:
            raise ValueError("pagesRead cannot exceed totalPages")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class ProgressUpdate(CamelModel):
    """Schema for submitting a new current page."""

    book_title: str = Field(..., min_length=1)
    current_page: int = Field(..., description="Page the reader is now on")
    notes: Optional[str] = None


class FinishBookRequest(CamelModel):
    """Schema for marking a book as finished."""

    book_title: str = Field(..., min_length=1)


# ============================================================================
# Response Schemas
# ============================================================================


class DailyReadResponse(CamelModel):
    """One day's recorded page-count delta."""

    date: date
    pages_read: int


class BookResponse(CamelModel):
    """Schema for book responses (includes DB-generated fields)."""

    id: str
    user_id: str
    book_title: str
    total_pages: int
    pages_read: int
    current_page: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    notes: Optional[str] = None
    complete: bool = False
    status: BookStatus = BookStatus.NOT_STARTED
    progress_percent: int = 0
    daily_read: list[DailyReadResponse] = Field(default_factory=list)
    created_at: str
    last_updated: str
    version: int

    @classmethod
    def from_model(cls, book) -> "BookResponse":
        """Build a response from a Book ORM instance."""
        return cls(
            id=book.id,
            user_id=book.owner_id,
            book_title=book.title,
            total_pages=book.total_pages,
            pages_read=book.pages_read,
            current_page=book.current_page,
            start_date=date.fromisoformat(book.start_date) if book.start_date else None,
            end_date=date.fromisoformat(book.end_date) if book.end_date else None,
            notes=book.notes,
            complete=book.complete,
            status=book.status,
            progress_percent=book.progress_percent,
            daily_read=[
                DailyReadResponse(
                    date=date.fromisoformat(entry.read_date),
                    pages_read=entry.pages_read,
                )
                for entry in sorted(book.daily_reads, key=lambda e: e.read_date)
            ],
            created_at=book.created_at,
            last_updated=book.last_updated,
            version=book.version,
        )


def schema_error_message(error: ValidationError) -> str:
    """Flatten a pydantic validation error into one line."""
    messages = []
    for e in error.errors():
        location = ".".join(str(part) for part in e.get("loc", ()))
        messages.append(f"{location}: {e['msg']}" if location else e["msg"])
    return "; ".join(messages)
