"""Domain interfaces for the spaced reading tracker."""

from .book_enricher import BookEnricher
from .state_store import StateStore

__all__ = ["BookEnricher", "StateStore"]
