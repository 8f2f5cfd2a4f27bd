"""Library service applying read-cycle operations to books in the app state."""

import logging
from datetime import date, datetime
from typing import Optional, Union

from ..entities.app_state import AppState, ReadingGoal
from ..entities.book import Book, BookDraft, BookStatus, Chapter
from ..entities.book_details import BookDetails
from ..exceptions import StateError, ValidationError
from . import read_cycle
from .lockout import LockoutState, compute_lockout

logger = logging.getLogger(__name__)


def draft_from_details(details: BookDetails) -> BookDraft:
    """Turn lookup results into a book draft.

    Chapter titles become fresh, unticked chapters.
    """
    return BookDraft(
        title=details.title,
        subtitle=details.subtitle,
        author=details.author,
        publisher=details.publisher,
        isbn=details.isbn,
        page_count=details.page_count,
        summary=details.summary,
        categories=list(details.suggested_categories),
        chapters=[Chapter(title=title) for title in details.chapters if title.strip()],
    )


class LibraryService:
    """
    Operates on the books held in an ``AppState``.

    Adds the guards that sit in front of the state machine: page updates are
    refused while a book is locked or mastered, and the chapter checklist is
    frozen while a book is locked.
    """

    def __init__(self, state: AppState):
        self.state = state

    def list_books(self) -> list[Book]:
        return list(self.state.books)

    def get_book(self, book_id: str) -> Book:
        """Retrieve a book by id.

        Raises:
            ValueError: If the book is not found.
        """
        for book in self.state.books:
            if book.id == book_id:
                return book
        raise ValueError(f"Book with id {book_id} not found")

    def add_book(self, draft: BookDraft, now: Optional[datetime] = None) -> Book:
        """Create an unread book from a draft and register its categories.

        Raises:
            ValidationError: If the draft has no title or no positive page count.
        """
        book = draft.to_book(now=now)
        self.state.books.append(book)
        self._merge_categories(book.categories)
        logger.info(f"Added book {book.id} ({book.title!r}, {book.page_count} pages)")
        return book

    def start_reading(self, book_id: str, now: Optional[datetime] = None) -> Book:
        return read_cycle.start_reading(self.get_book(book_id), now=now)

    def finish_reading(self, book_id: str, now: Optional[datetime] = None) -> Book:
        return read_cycle.finish_reading(self.get_book(book_id), now=now)

    def update_page(
        self,
        book_id: str,
        new_page: Union[int, str],
        today: Optional[date] = None,
    ) -> Book:
        """Record progress on a book.

        Raises:
            StateError: If the book is mastered or in its waiting period.
            ValidationError: If ``new_page`` is not numeric.
        """
        book = self.get_book(book_id)
        if book.status == BookStatus.MASTERED:
            raise StateError("Cannot update pages of a mastered book", {"book_id": book_id})
        self._ensure_unlocked(book, today)
        return read_cycle.update_page(book, new_page)

    def toggle_chapter(
        self,
        book_id: str,
        chapter_id: str,
        today: Optional[date] = None,
    ) -> Book:
        """Tick or untick a chapter.

        Raises:
            StateError: If the book is in its waiting period.
            ValueError: If the book or chapter is not found.
        """
        book = self.get_book(book_id)
        self._ensure_unlocked(book, today)
        return read_cycle.toggle_chapter(book, chapter_id)

    def toggle_favorite(self, book_id: str) -> Book:
        book = self.get_book(book_id)
        book.is_favorite = not book.is_favorite
        return book

    def get_lockout(self, book_id: str, today: Optional[date] = None) -> LockoutState:
        return compute_lockout(self.get_book(book_id), today or date.today())

    def add_category(self, name: str) -> list[str]:
        """Register a category name. Adding a known name is a no-op.

        Raises:
            ValidationError: If the name is blank.
        """
        name = name.strip()
        if not name:
            raise ValidationError("Category name is required")
        self._merge_categories([name])
        return list(self.state.categories)

    def update_goals(self, goals: ReadingGoal) -> ReadingGoal:
        self.state.goals = goals
        return goals

    def _merge_categories(self, names: list[str]) -> None:
        for name in names:
            if name not in self.state.categories:
                self.state.categories.append(name)

    def _ensure_unlocked(self, book: Book, today: Optional[date]) -> None:
        lockout = compute_lockout(book, today or date.today())
        if lockout.is_locked:
            raise StateError(
                "Book is in its waiting period",
                {"book_id": book.id, "next_available_date": lockout.next_available_date},
            )
