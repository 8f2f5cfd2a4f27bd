"""
End-to-end test for the reading tracker HTTP API.

This test covers the complete user flow against an in-process app:
1. Look up a book and add it from the prefilled draft
2. Start the first reading, record pages and tick chapters
3. Finish the reading and hit the waiting period
4. Error responses for unknown books, bad input and failed lookups
"""

import logging

import httpx
import pytest
import pytest_asyncio

from spaced_reading.application.api import create_app
from spaced_reading.application.controller import ReadingTrackerController
from spaced_reading.infrastructure.local_book_enricher import LocalBookEnricher
from spaced_reading.infrastructure.local_state_store import LocalStateStore

logger = logging.getLogger(__name__)


@pytest.fixture
def state_path(tmp_path):
    return tmp_path / "state.json"


@pytest_asyncio.fixture
async def client(state_path):
    controller = ReadingTrackerController(
        state_store=LocalStateStore(state_path),
        book_enricher=LocalBookEnricher(),
    )
    transport = httpx.ASGITransport(app=create_app(controller))
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
async def test_complete_reading_cycle(client, state_path):
    """Test the journey from lookup to the first waiting period."""

    logger.info("Step 1: Looking up the book")
    response = await client.post("/lookup", json={"query": "little prince"})
    assert response.status_code == 200
    draft = response.json()
    assert draft["title"] == "The Little Prince"
    assert (await client.get("/books")).json() == {"books": []}

    logger.info("Step 2: Adding the book")
    draft["chapters"] = [{"title": "Chapter I"}, {"title": "Chapter II"}]
    response = await client.post("/books", json=draft)
    assert response.status_code == 201
    book = response.json()
    book_id = book["id"]
    assert book["status"] == "unread"
    assert book["current_read_count"] == 0

    logger.info("Step 3: Starting the first reading")
    response = await client.post(f"/books/{book_id}/start")
    assert response.status_code == 200
    assert response.json()["status"] == "reading"
    assert response.json()["current_read_count"] == 1

    logger.info("Step 4: Recording progress")
    response = await client.put(f"/books/{book_id}/page", json={"page": "40"})
    assert response.status_code == 200
    assert response.json()["current_page"] == 40

    response = await client.put(f"/books/{book_id}/page", json={"page": 10_000})
    assert response.json()["current_page"] == 96
    assert response.json()["status"] == "reading"

    chapter_id = book["chapters"][0]["id"]
    response = await client.post(f"/books/{book_id}/chapters/{chapter_id}/toggle")
    assert response.status_code == 200
    assert response.json()["chapters"][0]["is_completed"] is True

    logger.info("Step 5: Finishing the reading")
    response = await client.post(f"/books/{book_id}/finish")
    assert response.status_code == 200
    assert response.json()["status"] == "read"

    response = await client.get(f"/books/{book_id}")
    overview = response.json()
    assert overview["lockout"]["is_locked"] is True
    assert overview["can_start_reading"] is False
    assert overview["schedule"][1]["is_next"] is True
    assert overview["schedule"][1]["wait_days"] == 16

    logger.info("Step 6: Waiting period blocks the next reading")
    response = await client.post(f"/books/{book_id}/start")
    assert response.status_code == 409
    response = await client.post(f"/books/{book_id}/chapters/{chapter_id}/toggle")
    assert response.status_code == 409

    assert state_path.exists()


@pytest.mark.asyncio
async def test_unknown_book_is_404(client):
    assert (await client.get("/books/missing")).status_code == 404
    assert (await client.post("/books/missing/start")).status_code == 404
    assert (await client.get("/books/missing/lockout")).status_code == 404


@pytest.mark.asyncio
async def test_invalid_input_is_422(client):
    response = await client.post("/books", json={"title": "  ", "page_count": 12})
    assert response.status_code == 422
    response = await client.post("/books", json={"title": "x" * 301, "page_count": 10})
    assert response.status_code == 422

    book_id = (await client.post("/books", json={"title": "Poems", "page_count": 8})).json()["id"]
    await client.post(f"/books/{book_id}/start")
    response = await client.put(f"/books/{book_id}/page", json={"page": "abc"})
    assert response.status_code == 422
    response = await client.put(f"/books/{book_id}/page", json={"page": True})
    assert response.status_code == 422
    assert (await client.get(f"/books/{book_id}")).json()["book"]["current_page"] == 0

    response = await client.get("/schedule", params={"page_count": 0})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_failed_lookup_is_502(client):
    response = await client.post("/lookup", json={"query": "a title nobody has written"})

    assert response.status_code == 502


@pytest.mark.asyncio
async def test_categories_goals_and_schedule(client):
    response = await client.post("/categories", json={"name": "Poetry"})
    assert response.status_code == 200
    assert "Poetry" in response.json()["categories"]
    assert (await client.post("/categories", json={"name": " "})).status_code == 422

    response = await client.put(
        "/goals",
        json={"daily_pages": 10, "daily_minutes": 15, "monthly_books": 1, "annual_books": 24},
    )
    assert response.json()["annual_books"] == 24
    assert (await client.get("/goals")).json()["daily_pages"] == 10

    response = await client.get("/schedule", params={"page_count": 5})
    assert [entry["wait_days"] for entry in response.json()["schedule"]] == [0, 1, 1, 2, 4, 7, 15]

    assert (await client.get("/health")).json()["status"] == "healthy"
