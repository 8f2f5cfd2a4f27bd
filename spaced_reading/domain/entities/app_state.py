"""Application state entities for the spaced reading tracker."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .book import Book, normalize_categories

INITIAL_CATEGORIES = [
    "Fiction",
    "Business",
    "Personal Development",
    "Technology",
    "History",
    "Philosophy",
]


class ReadingGoal(BaseModel):
    """Personal reading targets."""

    daily_pages: int = Field(default=20, ge=0)
    daily_minutes: int = Field(default=30, ge=0)
    monthly_books: int = Field(default=1, ge=0)
    annual_books: int = Field(default=12, ge=0)


class AppState(BaseModel):
    """Everything the tracker persists: the library, known categories and goals."""

    books: list[Book] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=lambda: list(INITIAL_CATEGORIES))
    goals: ReadingGoal = Field(default_factory=ReadingGoal)

    @field_validator("categories")
    @classmethod
    def _normalize_categories(cls, value: list[str]) -> list[str]:
        return normalize_categories(value)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "books": [],
                "categories": INITIAL_CATEGORIES,
                "goals": {
                    "daily_pages": 20,
                    "daily_minutes": 30,
                    "monthly_books": 1,
                    "annual_books": 12,
                },
            }
        }
    )


def default_state() -> AppState:
    """State used on first run and whenever stored data cannot be read."""
    return AppState()
