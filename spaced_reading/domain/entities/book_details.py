"""Suggested book metadata returned by an enrichment lookup."""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class BookDetails(BaseModel):
    """Metadata suggested for a title query.

    Only ``title``, ``author`` and ``page_count`` are required. Camel-case keys
    (``pageCount``, ``suggestedCategories``) are accepted as well.
    """

    model_config = ConfigDict(frozen=True)

    title: str = Field(min_length=1)
    subtitle: Optional[str] = None
    author: str = Field(min_length=1)
    publisher: Optional[str] = None
    isbn: Optional[str] = None
    page_count: int = Field(ge=1, validation_alias=AliasChoices("page_count", "pageCount"))
    summary: Optional[str] = None
    suggested_categories: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("suggested_categories", "suggestedCategories"),
    )
    chapters: list[str] = Field(default_factory=list, description="Chapter titles")
