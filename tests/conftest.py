"""Pytest configuration and fixtures."""

import base64
import json
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from book_catalogue.config import Settings
from book_catalogue.main import create_app
from book_catalogue.storage import CatalogueRepository

TEST_USERNAME = "medhat"
TEST_PASSWORD = "Hero97"

SEED_BOOKS = [
    {
        "id": "b1",
        "title": "First Book",
        "author": "Ann Author",
        "isbn": "111",
        "datePublished": "2020-01-01",
        "rating": 4,
        "reviewCount": 10,
        "featured": True,
    },
    {
        "id": "b2",
        "title": "Second Book",
        "author": "Ben Author",
        "isbn": "222",
        "datePublished": "2020-12-31",
        "rating": 5,
        "reviewCount": 8,
        "featured": False,
    },
    {
        "id": "b3",
        "title": "Third Book",
        "author": "Cat Author",
        "isbn": "333",
        "datePublished": "2021-01-01",
        "rating": 3,
        "reviewCount": 20,
        "featured": False,
    },
    {
        "id": "b4",
        "title": "Fourth Book",
        "author": "Dan Author",
        "isbn": "444",
        "datePublished": "2019-12-31",
        "rating": 0,
        "reviewCount": 0,
        "featured": True,
    },
]

SEED_REVIEWS = [
    {
        "id": "review-r1",
        "bookId": "b1",
        "author": "Reader One",
        "rating": 5,
        "title": "Great",
        "comment": "Loved it",
        "timestamp": "2023-01-01T00:00:00.000Z",
        "verified": False,
    },
    {
        "id": "review-r2",
        "bookId": "b3",
        "author": "Reader Two",
        "rating": 3,
        "title": "",
        "comment": "Fine",
        "timestamp": "2023-02-01T00:00:00.000Z",
        "verified": False,
    },
    {
        "id": "review-r3",
        "bookId": "b1",
        "author": "Reader Three",
        "rating": 4,
        "title": "",
        "comment": "Good",
        "timestamp": "2023-03-01T00:00:00.000Z",
        "verified": True,
    },
]


def write_documents(data_dir: Path, books: list, reviews: list) -> None:
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / "books.json").write_text(json.dumps({"books": books}), encoding="utf-8")
    (data_dir / "reviews.json").write_text(json.dumps({"reviews": reviews}), encoding="utf-8")


def basic_auth(username: str, password: str) -> dict[str, str]:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """A data directory seeded with the test books and reviews."""
    directory = tmp_path / "data"
    write_documents(directory, SEED_BOOKS, SEED_REVIEWS)
    return directory


@pytest.fixture
def settings(tmp_path: Path, data_dir: Path) -> Settings:
    return Settings(
        data_dir=data_dir,
        log_dir=tmp_path / "logging",
        auth_username=TEST_USERNAME,
        auth_password=TEST_PASSWORD,
        auth_realm="Restricted Area",
    )


@pytest.fixture
def repository(settings: Settings) -> CatalogueRepository:
    repo = CatalogueRepository(settings.books_path, settings.reviews_path)
    repo.load()
    return repo


@pytest.fixture
async def client(
    settings: Settings, repository: CatalogueRepository
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client around a freshly loaded repository."""
    app = create_app(settings, repository)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def auth_headers() -> dict[str, str]:
    """Basic auth headers with the accepted credentials."""
    return basic_auth(TEST_USERNAME, TEST_PASSWORD)
