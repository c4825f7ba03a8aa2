"""Reading progress tracking."""

from .progress import (
    ProgressTracker,
    record_daily_read,
    require_owner,
)

__all__ = [
    "ProgressTracker",
    "record_daily_read",
    "require_owner",
]
