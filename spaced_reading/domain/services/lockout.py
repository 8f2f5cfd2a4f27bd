"""Lockout calculation for the waiting period between read cycles."""

from datetime import date, timedelta
from typing import Optional

from pydantic import BaseModel

from ..entities.book import Book, BookStatus
from .spacing import get_next_interval


class LockoutState(BaseModel):
    """Whether a new read cycle is blocked, and from which day it is allowed."""

    is_locked: bool = False
    next_available_date: Optional[date] = None


def compute_lockout(book: Book, today: date) -> LockoutState:
    """Check whether ``book`` is inside its mandatory waiting period on ``today``.

    Only finished, not yet mastered books can be locked. The unlock day is the
    calendar day of the last reading's end date plus the interval for the
    number of readings completed so far.
    """
    if book.status != BookStatus.READ:
        return LockoutState()

    last = book.last_reading
    if last is None or last.end_date is None:
        return LockoutState()

    days = get_next_interval(book.page_count, book.current_read_count)
    unlock_date = last.end_date.date() + timedelta(days=days)

    return LockoutState(
        is_locked=today < unlock_date,
        next_available_date=unlock_date,
    )
