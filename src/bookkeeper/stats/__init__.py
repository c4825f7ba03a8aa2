"""Reading statistics."""

from .analytics import (
    DailyStat,
    ReadingStatResponse,
    StatsService,
    compute_reading_stats,
)

__all__ = [
    "DailyStat",
    "ReadingStatResponse",
    "StatsService",
    "compute_reading_stats",
]
