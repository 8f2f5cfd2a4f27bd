"""Book entities for the spaced reading tracker."""

import logging
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError

logger = logging.getLogger(__name__)

# A book is mastered once it has been read this many times.
MAX_READINGS = 7


def new_id() -> str:
    """Generate a fresh entity identifier."""
    return str(uuid.uuid4())


class BookStatus(str, Enum):
    """Read-cycle status of a book."""

    UNREAD = "unread"
    READING = "reading"
    READ = "read"
    MASTERED = "mastered"


class Chapter(BaseModel):
    """A checklist entry. Completion is informational only."""

    id: str = Field(default_factory=new_id, description="Unique identifier for the chapter")
    title: str = Field(min_length=1, description="Chapter title")
    is_completed: bool = Field(default=False, description="Whether the chapter is ticked off")


class ReadingLog(BaseModel):
    """One reading attempt of a book."""

    read_count: int = Field(ge=1, le=MAX_READINGS, description="1-based ordinal of this reading")
    start_date: datetime = Field(description="When the reading started")
    end_date: Optional[datetime] = Field(None, description="When the reading was finished")

    @property
    def is_open(self) -> bool:
        return self.end_date is None


def _reading_count_of(entry: Any) -> Optional[int]:
    if isinstance(entry, ReadingLog):
        return entry.read_count
    if isinstance(entry, dict):
        return entry.get("read_count")
    return None


def normalize_categories(categories: list[str]) -> list[str]:
    """Strip names and drop blanks and duplicates, keeping the first occurrence."""
    seen: list[str] = []
    for name in categories:
        name = name.strip()
        if name and name not in seen:
            seen.append(name)
    return seen


class Book(BaseModel):
    """A tracked reading target and its history of read cycles.

    ``status`` and ``current_read_count`` are derived from ``readings`` every
    time they are read. They are included when the book is serialized, but
    values supplied on input are ignored so they can never disagree with the
    reading history.
    """

    id: str = Field(default_factory=new_id, frozen=True, description="Unique identifier for the book")
    title: str = Field(min_length=1, max_length=300, description="Title of the book")
    subtitle: Optional[str] = Field(None, description="Subtitle of the book")
    author: str = Field(default="Unknown", description="Author of the book")
    publisher: Optional[str] = Field(None, description="Publisher of the book")
    isbn: Optional[str] = Field(None, description="ISBN of the book")
    cover_url: Optional[str] = Field(None, description="URL of the cover image")
    page_count: int = Field(ge=1, description="Total number of pages in the book")
    categories: list[str] = Field(default_factory=list, description="Category names")
    chapters: list[Chapter] = Field(default_factory=list, description="Chapter checklist")
    current_page: int = Field(default=0, ge=0, description="Last page recorded in the current cycle")
    is_favorite: bool = Field(default=False)
    added_at: datetime = Field(default_factory=datetime.now)
    readings: list[ReadingLog] = Field(default_factory=list, description="Reading history, oldest first")

    @model_validator(mode="before")
    @classmethod
    def _drop_derived_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)
        data.pop("status", None)
        stored_count = data.pop("current_read_count", None)

        readings = data.get("readings") or []
        derived_count = _reading_count_of(readings[-1]) if readings else 0
        if stored_count is not None and stored_count != derived_count:
            logger.warning(
                f"Book {data.get('id')}: stored read count {stored_count} does not match "
                f"reading history ({derived_count}), using the history"
            )
        return data

    @field_validator("categories")
    @classmethod
    def _normalize_categories(cls, value: list[str]) -> list[str]:
        return normalize_categories(value)

    @model_validator(mode="after")
    def _check_history(self) -> "Book":
        counts = [log.read_count for log in self.readings]
        if counts != list(range(1, len(counts) + 1)):
            raise ValueError(f"reading counts must run 1..n in order, got {counts}")
        if any(log.is_open for log in self.readings[:-1]):
            raise ValueError("only the most recent reading may be unfinished")
        if self.current_page > self.page_count:
            raise ValueError(
                f"current_page {self.current_page} exceeds page_count {self.page_count}"
            )
        return self

    @property
    def last_reading(self) -> Optional[ReadingLog]:
        return self.readings[-1] if self.readings else None

    @computed_field
    @property
    def current_read_count(self) -> int:
        """Number of read cycles completed or in progress."""
        last = self.last_reading
        return last.read_count if last else 0

    @computed_field
    @property
    def status(self) -> BookStatus:
        last = self.last_reading
        if last is None:
            return BookStatus.UNREAD
        if last.is_open:
            return BookStatus.READING
        if last.read_count >= MAX_READINGS:
            return BookStatus.MASTERED
        return BookStatus.READ

    def get_chapter(self, chapter_id: str) -> Chapter:
        for chapter in self.chapters:
            if chapter.id == chapter_id:
                return chapter
        raise ValueError(f"Chapter with id {chapter_id} not found")


class BookDraft(BaseModel):
    """Unvalidated book-creation form, possibly prefilled by a lookup."""

    title: str = ""
    subtitle: Optional[str] = None
    author: Optional[str] = None
    publisher: Optional[str] = None
    isbn: Optional[str] = None
    cover_url: Optional[str] = None
    page_count: Optional[int] = None
    summary: Optional[str] = None
    categories: list[str] = Field(default_factory=list)
    chapters: list[Chapter] = Field(default_factory=list)

    def to_book(self, now: Optional[datetime] = None) -> Book:
        """Create a fresh, unread book from the draft.

        Raises:
            ValidationError: If the title is blank, the page count is missing
                or not positive, or another field is out of range.
        """
        title = self.title.strip()
        if not title:
            raise ValidationError("Title is required")
        if self.page_count is None or self.page_count < 1:
            raise ValidationError(
                "Page count must be a positive integer", {"page_count": self.page_count}
            )

        author = (self.author or "").strip() or "Unknown"
        try:
            return Book(
                title=title,
                subtitle=self.subtitle,
                author=author,
                publisher=self.publisher,
                isbn=self.isbn,
                cover_url=self.cover_url,
                page_count=self.page_count,
                categories=self.categories,
                chapters=[chapter.model_copy() for chapter in self.chapters],
                added_at=now or datetime.now(),
            )
        except PydanticValidationError as e:
            raise ValidationError(
                "Book details are invalid",
                {"errors": [error["msg"] for error in e.errors()]},
            ) from e
