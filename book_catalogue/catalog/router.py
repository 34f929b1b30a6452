"""
Route definitions for the catalogue API.

Endpoints under /api:
- GET  /books                  : every book
- GET  /books/published        : books published between startDate and endDate
- GET  /books/top-rated        : top 10 books by rating * reviewCount
- GET  /books/{book_id}        : one book
- GET  /books/{book_id}/reviews: reviews of one book
- GET  /featured               : featured books
- POST /books                  : add a book (Basic auth)
- POST /reviews                : add a review (Basic auth)
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.security import HTTPBasicCredentials
from typing_extensions import Annotated  # Py3.8 compatibility

from ..errors import NotFoundError
from ..models import CreateBookRequest, CreateReviewRequest
from ..security import require_basic_auth
from ..storage import CatalogueRepository
from . import queries
from .schemas import Book, Review, TopRatedBook


def get_repository(request: Request) -> CatalogueRepository:
    return request.app.state.repository


Repository = Annotated[CatalogueRepository, Depends(get_repository)]
Authenticated = Annotated[HTTPBasicCredentials, Depends(require_basic_auth)]

router = APIRouter(prefix="/api", tags=["catalogue"])


@router.get("/books", response_model=List[Book])
def list_books(repo: Repository) -> List[Book]:
    return queries.list_books(repo.books)


# Static /books/... paths must be registered before /books/{book_id}.
@router.get("/books/published", response_model=List[Book])
def books_published(
    repo: Repository,
    start_date: Optional[str] = Query(default=None, alias="startDate", description="YYYY-MM-DD"),
    end_date: Optional[str] = Query(default=None, alias="endDate", description="YYYY-MM-DD"),
) -> List[Book]:
    """Books whose publication date falls in the inclusive range."""
    return queries.books_published_between(repo.books, start_date, end_date)


@router.get("/books/top-rated", response_model=List[TopRatedBook])
def books_top_rated(repo: Repository) -> List[TopRatedBook]:
    return queries.top_rated(repo.books)


@router.get("/books/{book_id}", response_model=Book)
def get_book(book_id: str, repo: Repository) -> Book:
    book = queries.find_book(repo.books, book_id)
    if book is None:
        raise NotFoundError("Book not found")
    return book


@router.get("/books/{book_id}/reviews", response_model=List[Review])
def list_book_reviews(book_id: str, repo: Repository) -> List[Review]:
    books, reviews = repo.snapshot()
    return queries.reviews_for_book(books, reviews, book_id)


@router.get("/featured", response_model=List[Book])
def list_featured(repo: Repository) -> List[Book]:
    return queries.featured_books(repo.books)


@router.post("/books", response_model=Book, status_code=status.HTTP_201_CREATED)
def add_book(req: CreateBookRequest, repo: Repository, _user: Authenticated) -> Book:
    """Add a book. ``title``, ``author`` and ``isbn`` are required."""
    return repo.add_book(req)


@router.post("/reviews", response_model=Review, status_code=status.HTTP_201_CREATED)
def add_review(req: CreateReviewRequest, repo: Repository, _user: Authenticated) -> Review:
    """Add a review to an existing book.

    ``bookId``, ``author``, ``rating`` and ``comment`` are required.
    Posting a review does not change the book's ``rating`` or
    ``reviewCount``.
    """
    return repo.add_review(req)
