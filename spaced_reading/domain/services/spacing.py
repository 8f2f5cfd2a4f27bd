"""Spaced-repetition interval table.

Each page-count range carries seven waiting periods in days. Index ``i``
is the wait after finishing reading ``i + 1`` before the next one may start;
the last entry follows the seventh reading and is never needed in practice.
"""

from dataclasses import dataclass
from typing import Optional

from ..entities.book import MAX_READINGS

# Used when no range matches, which only happens for page counts below 1.
FALLBACK_INTERVAL_DAYS = 30


@dataclass(frozen=True)
class IntervalRange:
    """Waiting periods for books with ``min_pages..max_pages`` pages."""

    min_pages: int
    max_pages: Optional[int]  # None means unbounded
    intervals: tuple[int, ...]

    def contains(self, page_count: int) -> bool:
        if page_count < self.min_pages:
            return False
        return self.max_pages is None or page_count <= self.max_pages


@dataclass(frozen=True)
class ScheduledReading:
    """One reading of the seven-reading plan and the wait before it."""

    ordinal: int
    wait_days: int


SPACED_REPETITION_TABLE: tuple[IntervalRange, ...] = (
    IntervalRange(1, 10, (1, 1, 2, 4, 7, 15, 30)),
    IntervalRange(11, 20, (2, 4, 7, 15, 30, 60, 90)),
    IntervalRange(21, 30, (4, 8, 16, 30, 60, 120, 240)),
    IntervalRange(31, 50, (8, 16, 32, 64, 128, 256, 306)),
    IntervalRange(51, 100, (16, 32, 64, 128, 256, 316, 376)),
    IntervalRange(101, 500, (32, 64, 128, 256, 376, 496, 616)),
    IntervalRange(501, 1000, (64, 128, 256, 512, 752, 992, 1232)),
    IntervalRange(1001, None, (128, 256, 512, 1024, 1384, 1744, 2104)),
)


def _check_table(table: tuple[IntervalRange, ...]) -> None:
    expected_min = 1
    for interval_range in table:
        if interval_range.min_pages != expected_min:
            raise ValueError(
                f"Interval ranges must be contiguous: expected a range starting at "
                f"{expected_min}, got {interval_range.min_pages}"
            )
        if len(interval_range.intervals) != MAX_READINGS:
            raise ValueError(
                f"Range starting at {interval_range.min_pages} must have "
                f"{MAX_READINGS} intervals"
            )
        if interval_range.max_pages is None:
            return
        expected_min = interval_range.max_pages + 1
    raise ValueError("The last interval range must be unbounded")


_check_table(SPACED_REPETITION_TABLE)


def find_interval_range(page_count: int) -> Optional[IntervalRange]:
    """Return the first range containing ``page_count``, if any."""
    for interval_range in SPACED_REPETITION_TABLE:
        if interval_range.contains(page_count):
            return interval_range
    return None


def get_next_interval(page_count: int, completed_read_count: int) -> int:
    """Days to wait after ``completed_read_count`` readings before the next one.

    Args:
        page_count: Number of pages in the book.
        completed_read_count: Readings already finished (1-7).

    Returns:
        The waiting period in days. 0 when ``completed_read_count`` is outside
        1-7, and ``FALLBACK_INTERVAL_DAYS`` when no range matches ``page_count``.
    """
    index = completed_read_count - 1
    if index < 0 or index >= MAX_READINGS:
        return 0

    interval_range = find_interval_range(page_count)
    if interval_range is None:
        return FALLBACK_INTERVAL_DAYS
    return interval_range.intervals[index]


def reading_schedule(page_count: int) -> list[ScheduledReading]:
    """The full seven-reading plan for a book. The first reading is immediate."""
    return [
        ScheduledReading(
            ordinal=ordinal,
            wait_days=0 if ordinal == 1 else get_next_interval(page_count, ordinal - 1),
        )
        for ordinal in range(1, MAX_READINGS + 1)
    ]
