"""Domain services for the spaced reading tracker."""

from .library_service import LibraryService, draft_from_details
from .lockout import LockoutState, compute_lockout
from .read_cycle import can_start_reading, finish_reading, start_reading, toggle_chapter, update_page
from .spacing import (
    FALLBACK_INTERVAL_DAYS,
    SPACED_REPETITION_TABLE,
    IntervalRange,
    ScheduledReading,
    find_interval_range,
    get_next_interval,
    reading_schedule,
)

__all__ = [
    "LibraryService",
    "draft_from_details",
    "LockoutState",
    "compute_lockout",
    "can_start_reading",
    "start_reading",
    "finish_reading",
    "update_page",
    "toggle_chapter",
    "FALLBACK_INTERVAL_DAYS",
    "SPACED_REPETITION_TABLE",
    "IntervalRange",
    "ScheduledReading",
    "find_interval_range",
    "get_next_interval",
    "reading_schedule",
]
