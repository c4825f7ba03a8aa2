"""Pydantic schemas for reading plans."""

from datetime import date
from typing import Optional

from pydantic import Field

from ..db.schemas import CamelModel


class ReadingPlanRequest(CamelModel):
    """Schema for creating or replacing a reading plan."""

    book_title: str = Field(..., min_length=1)
    pages_per_day: int = Field(..., ge=1, description="Daily reading goal in pages")


class ReadingPlanResponse(CamelModel):
    """Response schema for a reading plan with its current projection."""

    id: str
    user_id: str
    book_title: str
    total_pages: int
    pages_read: int
    pages_remaining: int
    pages_per_day: int
    estimated_days: int
    start_date: Optional[date] = None
    end_date: date
    created_at: str
    updated_at: Optional[str] = None
