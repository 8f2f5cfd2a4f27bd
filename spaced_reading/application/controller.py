"""Reading Tracker Controller for handling business logic and coordination."""

import asyncio
import logging
from datetime import date, datetime
from typing import Any, Callable, Optional, TypeVar, Union

from ..domain.entities import AppState, Book, BookDraft, ReadingGoal
from ..domain.interfaces.book_enricher import BookEnricher
from ..domain.interfaces.state_store import StateStore
from ..domain.services import (
    LibraryService,
    LockoutState,
    can_start_reading,
    compute_lockout,
    draft_from_details,
    reading_schedule,
)
from ..infrastructure import (
    BedrockBookEnricher,
    BedrockEnricherConfig,
    DynamoDBStateStore,
    LocalBookEnricher,
    LocalStateStore,
)
from .config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ReadingTrackerController:
    """
    Controller for coordinating reading tracker operations.

    This controller is injected with the state store and the book enricher,
    and keeps the API layer thin. Every mutation runs under a single write
    lock and is followed by a save, so concurrent requests cannot interleave
    two transitions on the same state.
    """

    def __init__(
        self,
        state_store: StateStore,
        book_enricher: BookEnricher,
    ):
        """
        Initialize the controller with injected dependencies.

        Args:
            state_store: Store the application state is loaded from and saved to
            book_enricher: Lookup used to prefill new books
        """
        self.state_store = state_store
        self.book_enricher = book_enricher
        self.state: AppState = state_store.load()
        self.library = LibraryService(self.state)
        self._write_lock = asyncio.Lock()

        logger.info(
            f"ReadingTrackerController initialized with {len(self.state.books)} books"
        )

    async def _mutate(self, operation: Callable[[], T]) -> T:
        async with self._write_lock:
            result = operation()
            await asyncio.to_thread(self.state_store.save, self.state)
        return result

    # ===== Queries =====

    def list_books(self) -> list[Book]:
        return self.library.list_books()

    def get_book(self, book_id: str) -> Book:
        return self.library.get_book(book_id)

    def get_lockout(self, book_id: str, today: Optional[date] = None) -> LockoutState:
        return self.library.get_lockout(book_id, today)

    def get_book_overview(self, book_id: str, today: Optional[date] = None) -> dict[str, Any]:
        """
        Get a book together with its lockout state and reading schedule.

        Args:
            book_id: The book identifier.
            today: Day to evaluate the lockout on. Defaults to today.

        Returns:
            Dict with the serialized book, lockout, schedule and whether a
            new read cycle can be started.
        """
        today = today or date.today()
        book = self.library.get_book(book_id)
        return {
            "book": book.model_dump(mode="json"),
            "lockout": compute_lockout(book, today).model_dump(mode="json"),
            "can_start_reading": can_start_reading(book, today),
            "schedule": self.schedule_for(book.page_count, book.current_read_count),
        }

    @staticmethod
    def schedule_for(page_count: int, current_read_count: int = 0) -> list[dict[str, Any]]:
        """The seven-reading plan, marking finished readings and the next one."""
        return [
            {
                "ordinal": entry.ordinal,
                "wait_days": entry.wait_days,
                "is_done": current_read_count >= entry.ordinal,
                "is_next": current_read_count == entry.ordinal - 1,
            }
            for entry in reading_schedule(page_count)
        ]

    def get_categories(self) -> list[str]:
        return list(self.state.categories)

    def get_goals(self) -> ReadingGoal:
        return self.state.goals

    # ===== Mutations =====

    async def add_book(self, draft: BookDraft) -> Book:
        return await self._mutate(lambda: self.library.add_book(draft))

    async def start_reading(self, book_id: str, now: Optional[datetime] = None) -> Book:
        return await self._mutate(lambda: self.library.start_reading(book_id, now=now))

    async def finish_reading(self, book_id: str, now: Optional[datetime] = None) -> Book:
        return await self._mutate(lambda: self.library.finish_reading(book_id, now=now))

    async def update_page(
        self,
        book_id: str,
        new_page: Union[int, str],
        today: Optional[date] = None,
    ) -> Book:
        return await self._mutate(lambda: self.library.update_page(book_id, new_page, today))

    async def toggle_chapter(
        self,
        book_id: str,
        chapter_id: str,
        today: Optional[date] = None,
    ) -> Book:
        return await self._mutate(lambda: self.library.toggle_chapter(book_id, chapter_id, today))

    async def toggle_favorite(self, book_id: str) -> Book:
        return await self._mutate(lambda: self.library.toggle_favorite(book_id))

    async def add_category(self, name: str) -> list[str]:
        return await self._mutate(lambda: self.library.add_category(name))

    async def update_goals(self, goals: ReadingGoal) -> ReadingGoal:
        return await self._mutate(lambda: self.library.update_goals(goals))

    # ===== Lookup =====

    async def lookup_book(self, query: str) -> BookDraft:
        """
        Prefill a book draft from the enrichment lookup.

        Nothing is committed to the state; failures propagate as
        ``EnrichmentError`` so the caller can continue by hand.
        """
        details = await self.book_enricher.fetch_book_details(query)
        return draft_from_details(details)

    def get_health_status(self) -> dict:
        """
        Get application health status.

        Returns:
            Dict containing health status information
        """
        return {
            "status": "healthy",
            "books": len(self.state.books),
            "providers": {
                "state_store": type(self.state_store).__name__,
                "book_enricher": type(self.book_enricher).__name__,
            },
        }


def build_controller(settings: Settings) -> ReadingTrackerController:
    """Wire the configured state store and book enricher into a controller."""
    if settings.state_backend == "dynamodb":
        state_store: StateStore = DynamoDBStateStore(
            table_name=settings.state_table_name,
            storage_key=settings.storage_key,
            region_name=settings.aws_region,
        )
    else:
        state_store = LocalStateStore(settings.state_file, storage_key=settings.storage_key)

    if settings.enricher_type == "bedrock":
        book_enricher: BookEnricher = BedrockBookEnricher(
            BedrockEnricherConfig(
                region=settings.aws_region,
                model_id=settings.bedrock_model_id,
                max_tokens=settings.bedrock_max_tokens,
                temperature=settings.bedrock_temperature,
                summary_language=settings.summary_language,
                aws_access_key_id=settings.aws_access_key_id,
                aws_secret_access_key=settings.aws_secret_access_key,
                aws_session_token=settings.aws_session_token,
            )
        )
    else:
        book_enricher = LocalBookEnricher()

    return ReadingTrackerController(state_store=state_store, book_enricher=book_enricher)
