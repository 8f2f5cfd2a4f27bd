"""Book enricher protocol."""

from typing import Protocol, runtime_checkable

from ..entities.book_details import BookDetails


@runtime_checkable
class BookEnricher(Protocol):
    """Protocol for metadata lookups used to prefill a new book."""

    async def fetch_book_details(self, query: str) -> BookDetails:
        """Look up the best matching book for a title query.

        Args:
            query: Free-text title (and optionally author) query.

        Returns:
            BookDetails: Suggested metadata for the closest match.

        Raises:
            EnrichmentError: If the lookup cannot produce a valid result.
        """
        ...
