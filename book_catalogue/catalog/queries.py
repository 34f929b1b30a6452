"""
Read-only queries over the catalogue collections.

Every function here takes the collections it needs as arguments and
returns new lists; nothing is mutated and no I/O happens. The router
feeds them snapshots taken from the repository.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional, Sequence

from ..errors import NotFoundError, ValidationError
from .schemas import Book, Number, Review, TopRatedBook

TOP_RATED_LIMIT = 10

MISSING_DATES_MESSAGE = "Please provide both startDate and endDate query parameters."
INVALID_DATES_MESSAGE = "Invalid date format. Please use YYYY-MM-DD."


def _parse_calendar_date(value: Optional[str]) -> Optional[date]:
    """Return the calendar date at the start of ``value``, or ``None``.

    Stored values may carry a time part (``2020-05-01T10:00:00Z``); only
    the ``YYYY-MM-DD`` prefix matters for comparisons.
    """
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def list_books(books: Sequence[Book]) -> List[Book]:
    return list(books)


def find_book(books: Sequence[Book], book_id: str) -> Optional[Book]:
    return next((b for b in books if b.id == book_id), None)


def books_published_between(
    books: Sequence[Book],
    start_date: Optional[str],
    end_date: Optional[str],
) -> List[Book]:
    """Books whose ``date_published`` lies in ``[start_date, end_date]``.

    Raises
    ------
    ValidationError
        If either bound is missing or is not a ``YYYY-MM-DD`` date.
    """
    if not start_date or not end_date:
        raise ValidationError(MISSING_DATES_MESSAGE)
    try:
        start = datetime.strptime(start_date.strip(), "%Y-%m-%d").date()
        end = datetime.strptime(end_date.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(INVALID_DATES_MESSAGE) from None

    result: List[Book] = []
    for book in books:
        published = _parse_calendar_date(book.date_published)
        # Books with an unreadable date never match a range
        if published is not None and start <= published <= end:
            result.append(book)
    return result


def rating_score(book: Book) -> Number:
    """``rating * review_count``, with missing values counting as 0."""
    return (book.rating or 0) * (book.review_count or 0)


def top_rated(books: Sequence[Book], limit: int = TOP_RATED_LIMIT) -> List[TopRatedBook]:
    """Rank books by ``rating * review_count``, highest first.

    ``sorted`` is stable (also with ``reverse=True``), so books with equal
    scores keep their collection order. The score only exists on the
    returned projections.
    """
    scored: List[TopRatedBook] = []
    for book in books:
        fields = book.model_dump()
        # A ratingScore left in the data file must not shadow the computed one
        fields.pop("rating_score", None)
        fields.pop("ratingScore", None)
        scored.append(TopRatedBook(**fields, rating_score=rating_score(book)))
    scored.sort(key=lambda b: b.rating_score, reverse=True)
    return scored[: max(0, limit)]


def featured_books(books: Sequence[Book]) -> List[Book]:
    return [b for b in books if b.featured is True]


def reviews_for_book(
    books: Sequence[Book],
    reviews: Sequence[Review],
    book_id: str,
) -> List[Review]:
    """All reviews of ``book_id`` in collection order; may be empty.

    Raises
    ------
    NotFoundError
        If no book has that id.
    """
    if find_book(books, book_id) is None:
        raise NotFoundError("Book not found.")
    return [r for r in reviews if r.book_id == book_id]
