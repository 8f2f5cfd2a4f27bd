"""Local in-memory implementation of BookEnricher."""

import logging
from typing import Dict, Optional

from ..domain.entities.book_details import BookDetails
from ..domain.exceptions import EnrichmentError
from ..domain.interfaces.book_enricher import BookEnricher

logger = logging.getLogger(__name__)


class LocalBookEnricher(BookEnricher):
    """Local implementation of the BookEnricher protocol.

    Answers lookups from a small in-memory catalog. Useful for testing and
    development without cloud credentials.
    """

    def __init__(self, catalog: Optional[list[BookDetails]] = None):
        """Initialize the local book enricher.

        Args:
            catalog: Books to answer from. A few well-known titles are used
                     when omitted.
        """
        self._catalog: Dict[str, BookDetails] = {}

        if catalog is None:
            catalog = [
                BookDetails(
                    title="Meditations",
                    author="Marcus Aurelius",
                    page_count=254,
                    summary="Private notes on Stoic philosophy by a Roman emperor.",
                    suggested_categories=["Philosophy", "History"],
                    chapters=[f"Book {n}" for n in range(1, 13)],
                ),
                BookDetails(
                    title="The Little Prince",
                    author="Antoine de Saint-Exupéry",
                    page_count=96,
                    summary="A pilot stranded in the desert meets a young prince.",
                    suggested_categories=["Fiction"],
                ),
                BookDetails(
                    title="Deep Work",
                    subtitle="Rules for Focused Success in a Distracted World",
                    author="Cal Newport",
                    publisher="Grand Central Publishing",
                    page_count=296,
                    suggested_categories=["Personal Development", "Business"],
                    chapters=["Deep Work Is Valuable", "Deep Work Is Rare", "Deep Work Is Meaningful"],
                ),
            ]
        for details in catalog:
            self.add_book(details)

    async def fetch_book_details(self, query: str) -> BookDetails:
        """Return the first catalog entry whose title matches ``query``.

        Raises:
            EnrichmentError: If the query is blank or nothing matches.
        """
        needle = query.strip().lower()
        if not needle:
            raise EnrichmentError("A title is required for the lookup")

        for key, details in self._catalog.items():
            if needle in key or key in needle:
                logger.debug(f"Local lookup matched {query!r} to {details.title!r}")
                return details

        raise EnrichmentError("No book found for the query", query=query)

    def add_book(self, details: BookDetails) -> None:
        """Add or replace a catalog entry.

        Args:
            details: The book details, keyed by lower-cased title.
        """
        self._catalog[details.title.lower()] = details
