"""Read-cycle state machine.

A book moves UNREAD -> READING -> READ -> READING -> ... until its seventh
reading is finished, at which point it is MASTERED and stays there. Status is
derived from the reading history, so the transitions below only ever append a
log entry or close the open one.
"""

import logging
from datetime import date, datetime
from typing import Optional, Union

from ..entities.book import Book, BookStatus, ReadingLog
from ..exceptions import StateError, ValidationError
from .lockout import compute_lockout

logger = logging.getLogger(__name__)


def can_start_reading(book: Book, today: date) -> bool:
    """True for unread books, and for read books whose waiting period is over."""
    if book.status == BookStatus.UNREAD:
        return True
    if book.status == BookStatus.READ:
        return not compute_lockout(book, today).is_locked
    return False


def start_reading(book: Book, now: Optional[datetime] = None) -> Book:
    """Begin the next read cycle.

    Appends a new open reading log, resets the page counter and clears the
    chapter checklist.

    Raises:
        StateError: If the book is being read, mastered, or still locked.
    """
    now = now or datetime.now()

    if book.status in (BookStatus.READING, BookStatus.MASTERED):
        raise StateError(
            f"Cannot start reading a book that is {book.status.value}",
            {"book_id": book.id},
        )

    lockout = compute_lockout(book, now.date())
    if lockout.is_locked:
        raise StateError(
            "Book is in its waiting period",
            {"book_id": book.id, "next_available_date": lockout.next_available_date},
        )

    read_count = book.current_read_count + 1
    book.readings.append(ReadingLog(read_count=read_count, start_date=now))
    book.current_page = 0
    for chapter in book.chapters:
        chapter.is_completed = False

    logger.info(f"Book {book.id}: started reading #{read_count}")
    return book


def finish_reading(book: Book, now: Optional[datetime] = None) -> Book:
    """Close the open read cycle and mark every page as read.

    Raises:
        StateError: If the book is not being read or its open log is missing.
    """
    now = now or datetime.now()

    if book.status != BookStatus.READING:
        raise StateError(
            f"Cannot finish reading a book that is {book.status.value}",
            {"book_id": book.id},
        )

    current = next(
        (log for log in book.readings if log.read_count == book.current_read_count),
        None,
    )
    if current is None:
        raise StateError(
            "No reading log for the current cycle",
            {"book_id": book.id, "read_count": book.current_read_count},
        )

    current.end_date = now
    book.current_page = book.page_count

    logger.info(f"Book {book.id}: finished reading #{current.read_count}, now {book.status.value}")
    return book


def _parse_page(new_page: Union[int, str]) -> int:
    if isinstance(new_page, bool):
        raise ValidationError("Page must be a number", {"page": new_page})
    if isinstance(new_page, int):
        return new_page
    if isinstance(new_page, str):
        try:
            return int(new_page.strip())
        except ValueError:
            pass
    raise ValidationError("Page must be a number", {"page": new_page})


def update_page(book: Book, new_page: Union[int, str]) -> Book:
    """Record the current page, clamped to ``0..page_count``.

    Reaching the last page does not finish the cycle; that always takes an
    explicit ``finish_reading``.

    Raises:
        ValidationError: If ``new_page`` is not numeric. The book is unchanged.
    """
    page = _parse_page(new_page)
    book.current_page = min(max(page, 0), book.page_count)
    return book


def toggle_chapter(book: Book, chapter_id: str) -> Book:
    """Flip one chapter's completion flag.

    Raises:
        ValueError: If the book has no chapter with that id.
    """
    chapter = book.get_chapter(chapter_id)
    chapter.is_completed = not chapter.is_completed
    return book
