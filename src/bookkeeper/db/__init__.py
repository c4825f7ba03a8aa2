"""Database module for local SQLite storage."""

from .models import Book, DailyRead
from .schemas import (
    BookAddRequest,
    BookResponse,
    BookStatus,
    DailyReadResponse,
    FinishBookRequest,
    ProgressUpdate,
)
from .sqlite import Database, get_db

__all__ = [
    "Book",
    "DailyRead",
    "BookAddRequest",
    "BookResponse",
    "BookStatus",
    "DailyReadResponse",
    "FinishBookRequest",
    "ProgressUpdate",
    "Database",
    "get_db",
]
