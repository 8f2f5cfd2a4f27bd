"""Exception hierarchy for the spaced reading tracker."""

from typing import Optional


class ReadingTrackerError(Exception):
    """Base exception for all reading tracker errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class ValidationError(ReadingTrackerError):
    """Invalid input to a mutating operation. No state was changed."""


class StateError(ReadingTrackerError):
    """Illegal read-cycle transition (e.g. starting while locked)."""


class PersistenceError(ReadingTrackerError):
    """Loading or saving the application state failed."""


class EnrichmentError(ReadingTrackerError):
    """The book metadata lookup failed."""

    def __init__(self, message: str = "Book lookup failed", query: str = ""):
        details = {"query": query} if query else {}
        super().__init__(message, details)
        self.query = query
