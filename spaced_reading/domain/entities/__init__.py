"""Domain entities for the spaced reading tracker."""

from .app_state import INITIAL_CATEGORIES, AppState, ReadingGoal, default_state
from .book import MAX_READINGS, Book, BookDraft, BookStatus, Chapter, ReadingLog
from .book_details import BookDetails

__all__ = [
    # Book entities
    "Book",
    "BookDraft",
    "BookStatus",
    "Chapter",
    "ReadingLog",
    "MAX_READINGS",
    # Application state
    "AppState",
    "ReadingGoal",
    "INITIAL_CATEGORIES",
    "default_state",
    # Enrichment
    "BookDetails",
]
