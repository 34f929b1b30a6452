"""
Pydantic schema definitions for the catalog module.

``Book`` and ``Review`` mirror the records stored in ``books.json`` and
``reviews.json``. Field names are snake_case in Python and camelCase on
the wire and on disk (``datePublished``, ``reviewCount``, ``bookId``...),
so the same models are used to parse the documents, to write them back
and to render API responses. Fields this service does not know about
are kept as extras so that rewriting a document never drops data.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# JSON numbers: keep ints as ints so rewritten documents do not turn 4 into 4.0
Number = Union[int, float]


class CatalogueModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_document(self) -> dict:
        """Return the camelCase mapping written to disk."""
        return self.model_dump(by_alias=True, mode="json")


class Book(CatalogueModel):
    """A single book entry.

    ``title``, ``author`` and ``isbn`` are mandatory. Other keys are read
    as they come, ``null`` included, so hand-edited documents still load.
    ``rating`` and ``review_count`` exist for an average-rating rollup,
    but nothing updates them when a review is posted; they only change
    through edits to the data file.
    """

    # Declaration order is the key order written to disk
    id: str
    title: str
    author: str
    description: Optional[str] = ""
    price: Optional[Number] = 0
    isbn: Union[str, Number]
    genre: Optional[List[str]] = Field(default_factory=list)
    tags: Optional[List[str]] = Field(default_factory=list)
    # ISO 8601 calendar date (YYYY-MM-DD), kept as text
    date_published: Optional[str] = ""
    pages: Optional[Number] = 0
    language: Optional[str] = "English"
    publisher: Optional[str] = ""
    rating: Optional[Number] = 0
    review_count: Optional[Number] = 0
    in_stock: Optional[bool] = True
    featured: Optional[bool] = False


class TopRatedBook(Book):
    """A ``Book`` plus its derived ``ratingScore`` (rating * reviewCount)."""

    rating_score: Number = 0


class Review(CatalogueModel):
    """A review attached to a book through ``book_id``."""

    id: str
    book_id: str
    author: str
    rating: Optional[Number]
    title: Optional[str] = ""
    comment: str
    # Creation instant, UTC, e.g. 2024-03-01T09:30:00.000Z
    timestamp: Optional[str] = ""
    verified: Optional[bool] = False
