"""FastAPI application entry point."""

import logging
from typing import Optional, Union

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, StrictInt
from pydantic import ValidationError as PydanticValidationError

from ..domain.entities import BookDraft, ReadingGoal
from ..domain.exceptions import EnrichmentError, StateError, ValidationError
from .config import settings
from .controller import ReadingTrackerController, build_controller

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


class PageUpdate(BaseModel):
    """Body of a page update. Numeric strings are accepted."""

    page: Union[StrictInt, str]


class CategoryCreate(BaseModel):
    name: str


class LookupRequest(BaseModel):
    query: str = Field(description="Title to look up")


def _http_error(e: Exception) -> HTTPException:
    """Map domain errors onto HTTP responses."""
    if isinstance(e, StateError):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, (ValidationError, PydanticValidationError)):
        return HTTPException(status_code=422, detail=str(e))
    if isinstance(e, EnrichmentError):
        return HTTPException(status_code=502, detail=str(e))
    if isinstance(e, ValueError):
        return HTTPException(status_code=404, detail=str(e))
    logger.error(f"Unhandled error: {e}", exc_info=True)
    return HTTPException(status_code=500, detail="Internal server error")


def create_app(controller: ReadingTrackerController) -> FastAPI:
    """Create the FastAPI app around an already wired controller."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return controller.get_health_status()

    @app.get("/books")
    async def list_books():
        """List every tracked book."""
        return {"books": [book.model_dump(mode="json") for book in controller.list_books()]}

    @app.post("/books", status_code=201)
    async def add_book(draft: BookDraft):
        """Create a new, unread book from a draft.

        Args:
            draft: Title and page count are required; everything else is optional.

        Returns:
            The created book.
        """
        try:
            book = await controller.add_book(draft)
        except Exception as e:
            raise _http_error(e)
        return book.model_dump(mode="json")

    @app.get("/books/{book_id}")
    async def get_book(book_id: str):
        """Get a book with its lockout state and reading schedule."""
        try:
            return controller.get_book_overview(book_id)
        except Exception as e:
            raise _http_error(e)

    @app.get("/books/{book_id}/lockout")
    async def get_lockout(book_id: str):
        """Check whether the book is in its waiting period today."""
        try:
            return controller.get_lockout(book_id).model_dump(mode="json")
        except Exception as e:
            raise _http_error(e)

    @app.post("/books/{book_id}/start")
    async def start_reading(book_id: str):
        """Start the next read cycle."""
        try:
            book = await controller.start_reading(book_id)
        except Exception as e:
            raise _http_error(e)
        return book.model_dump(mode="json")

    @app.post("/books/{book_id}/finish")
    async def finish_reading(book_id: str):
        """Finish the current read cycle."""
        try:
            book = await controller.finish_reading(book_id)
        except Exception as e:
            raise _http_error(e)
        return book.model_dump(mode="json")

    @app.put("/books/{book_id}/page")
    async def update_page(book_id: str, update: PageUpdate):
        """Record the current page. Reaching the last page does not finish the cycle."""
        try:
            book = await controller.update_page(book_id, update.page)
        except Exception as e:
            raise _http_error(e)
        return book.model_dump(mode="json")

    @app.post("/books/{book_id}/chapters/{chapter_id}/toggle")
    async def toggle_chapter(book_id: str, chapter_id: str):
        """Tick or untick a chapter in the checklist."""
        try:
            book = await controller.toggle_chapter(book_id, chapter_id)
        except Exception as e:
            raise _http_error(e)
        return book.model_dump(mode="json")

    @app.post("/books/{book_id}/favorite")
    async def toggle_favorite(book_id: str):
        try:
            book = await controller.toggle_favorite(book_id)
        except Exception as e:
            raise _http_error(e)
        return book.model_dump(mode="json")

    @app.get("/schedule")
    async def get_schedule(page_count: int = Query(..., ge=1, description="Pages in the book")):
        """Waiting periods of the seven-reading plan for a page count."""
        return {"page_count": page_count, "schedule": controller.schedule_for(page_count)}

    @app.post("/lookup")
    async def lookup_book(request: LookupRequest):
        """Prefill a book draft from the metadata lookup. Nothing is saved."""
        try:
            draft = await controller.lookup_book(request.query)
        except Exception as e:
            raise _http_error(e)
        return draft.model_dump(mode="json")

    @app.get("/categories")
    async def get_categories():
        return {"categories": controller.get_categories()}

    @app.post("/categories")
    async def add_category(category: CategoryCreate):
        try:
            categories = await controller.add_category(category.name)
        except Exception as e:
            raise _http_error(e)
        return {"categories": categories}

    @app.get("/goals")
    async def get_goals():
        return controller.get_goals().model_dump(mode="json")

    @app.put("/goals")
    async def update_goals(goals: ReadingGoal):
        goals = await controller.update_goals(goals)
        return goals.model_dump(mode="json")

    return app


def get_app(controller: Optional[ReadingTrackerController] = None) -> FastAPI:
    """App factory for uvicorn; wires providers from settings when none is given."""
    return create_app(controller or build_controller(settings))
