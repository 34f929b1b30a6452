# book_catalogue/storage.py
import json
import logging
import math
import os
import re
import stat
import tempfile
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Tuple

from pydantic import ValidationError as SchemaError

from .catalog.schemas import Book, Review
from .errors import CatalogueLoadError, NotFoundError, PersistenceError, ValidationError
from .models import CreateBookRequest, CreateReviewRequest

logger = logging.getLogger(__name__)

BOOK_FIELDS_MESSAGE = "Missing required fields: title, author, and isbn are required."
REVIEW_FIELDS_MESSAGE = (
    "Missing required fields: bookId, author, rating, and comment are required."
)
UNKNOWN_BOOK_MESSAGE = "Book not found. Cannot add a review for a non-existent book."

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _iso_timestamp(moment: datetime) -> str:
    # 2024-03-01T09:30:00.000Z
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _file_mode(path: Path) -> int:
    """Permission bits for a rewrite of ``path``.

    An existing file keeps its mode; a new one gets 0o666 minus the umask,
    as a plain ``open(path, "w")`` would. ``mkstemp`` alone gives 0o600.
    """
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def coerce_rating(value: Any) -> Optional[int]:
    """Read an integer rating from a number or a numeric string.

    Floats are truncated, strings contribute their leading integer
    (``"4 stars"`` -> 4). Returns ``None`` when nothing usable is found.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value)
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


class CatalogueRepository:
    """Owns the book and review collections and their JSON documents.

    The collections are loaded once with :meth:`load` and rewritten in
    full by :meth:`save` after each accepted write. One re-entrant lock
    guards both collections and the save step, since FastAPI runs sync
    endpoints on a thread pool.
    """

    def __init__(self, books_path: Path, reviews_path: Path) -> None:
        self.books_path = Path(books_path)
        self.reviews_path = Path(reviews_path)
        self._books: List[Book] = []
        self._reviews: List[Review] = []
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Lifecycle

    def load(self) -> None:
        """Read both documents into memory.

        Raises
        ------
        CatalogueLoadError
            If a document is missing, is not JSON, lacks its top-level
            key or holds records that do not parse.
        """
        books = self._read_document(self.books_path, "books", Book)
        reviews = self._read_document(self.reviews_path, "reviews", Review)
        with self._lock:
            self._books = books
            self._reviews = reviews
        logger.info("Loaded %d books and %d reviews", len(books), len(reviews))

    @staticmethod
    def _read_document(path: Path, key: str, model: Any) -> list:
        try:
            with path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
            entries = raw[key]
            if not isinstance(entries, list):
                raise TypeError(f"'{key}' is not a list")
            return [model.model_validate(entry) for entry in entries]
        except (OSError, ValueError, KeyError, TypeError, SchemaError) as exc:
            raise CatalogueLoadError(f"Error reading data file {path}: {exc}") from exc

    def save(self) -> None:
        """Rewrite both documents from the in-memory collections.

        A failure is logged and swallowed. The in-memory state is kept,
        so memory and disk can disagree until the next successful save.
        """
        with self._lock:
            try:
                self._write_document(
                    self.books_path, {"books": [b.to_document() for b in self._books]}
                )
                self._write_document(
                    self.reviews_path, {"reviews": [r.to_document() for r in self._reviews]}
                )
            except (OSError, TypeError, ValueError) as exc:
                error = PersistenceError(f"Error writing data files: {exc}")
                logger.error("%s", error.message, exc_info=exc)

    @staticmethod
    def _write_document(path: Path, document: dict) -> None:
        # Temp file in the same directory, then an atomic rename over the target
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.chmod(tmp_name, _file_mode(path))
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise

    # ------------------------------------------------------------------
    # Read access

    @property
    def books(self) -> List[Book]:
        with self._lock:
            return list(self._books)

    @property
    def reviews(self) -> List[Review]:
        with self._lock:
            return list(self._reviews)

    def snapshot(self) -> Tuple[List[Book], List[Review]]:
        """Both collections, copied under one lock acquisition."""
        with self._lock:
            return list(self._books), list(self._reviews)

    # ------------------------------------------------------------------
    # Writes

    def add_book(self, req: CreateBookRequest) -> Book:
        if not req.title or not req.author or not req.isbn:
            raise ValidationError(BOOK_FIELDS_MESSAGE)

        book = Book(
            id=str(uuid.uuid4()),
            title=req.title,
            author=req.author,
            description=req.description or "",
            price=req.price or 0,
            isbn=req.isbn,
            genre=req.genre or [],
            tags=req.tags or [],
            date_published=req.date_published or _utc_now().date().isoformat(),
            pages=req.pages or 0,
            language=req.language or "English",
            publisher=req.publisher or "",
            rating=0,
            review_count=0,
            in_stock=True,
            featured=False,
        )
        with self._lock:
            self._books.append(book)
            self.save()
        logger.info("Added book %s (%s)", book.id, book.title)
        return book

    def add_review(self, req: CreateReviewRequest) -> Review:
        rating = coerce_rating(req.rating)
        if not req.book_id or not req.author or not rating or not req.comment:
            raise ValidationError(REVIEW_FIELDS_MESSAGE)

        with self._lock:
            if not any(b.id == req.book_id for b in self._books):
                raise NotFoundError(UNKNOWN_BOOK_MESSAGE)

            review = Review(
                id=f"review-{uuid.uuid4()}",
                book_id=req.book_id,
                author=req.author,
                rating=rating,
                title=req.title or "",
                comment=req.comment,
                timestamp=_iso_timestamp(_utc_now()),
                verified=False,
            )
            self._reviews.append(review)
            self.save()
        logger.info("Added review %s for book %s", review.id, review.book_id)
        return review
