"""Tests for application start-up, the entry point and the access log."""

import logging
import re
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from book_catalogue import __main__ as entry_point
from book_catalogue.config import Settings
from book_catalogue.errors import CatalogueLoadError
from book_catalogue.logging_config import ACCESS_LOGGER_NAME, configure_logging
from book_catalogue.main import create_app

from .conftest import TEST_USERNAME, basic_auth

COMBINED_LINE = re.compile(
    r'^\S+ - - \[\d{2}/\w{3}/\d{4}:\d{2}:\d{2}:\d{2} \+0000\] '
    r'"GET /api/books/published\?startDate=2020-01-01&endDate=2020-12-31 HTTP/1\.1" '
    r'200 \d+ "-" "test-agent"$'
)


@pytest.fixture
def access_logging(settings: Settings):
    configure_logging(settings)
    yield settings.access_log_path
    access_logger = logging.getLogger(ACCESS_LOGGER_NAME)
    for handler in list(access_logger.handlers):
        access_logger.removeHandler(handler)
        handler.close()


def test_create_app_loads_repository(settings: Settings) -> None:
    app = create_app(settings)

    assert len(app.state.repository.books) == 4
    assert app.state.credentials.realm == "Restricted Area"


def test_create_app_fails_without_data(tmp_path: Path) -> None:
    settings = Settings(data_dir=tmp_path / "empty", log_dir=tmp_path / "logging")

    with pytest.raises(CatalogueLoadError):
        create_app(settings)


def test_entry_point_exits_when_data_is_missing(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    settings = Settings(data_dir=tmp_path / "empty", log_dir=tmp_path / "logging")
    monkeypatch.setattr(entry_point, "get_settings", lambda: settings)
    monkeypatch.setattr(entry_point, "configure_logging", lambda _settings: None)

    with pytest.raises(SystemExit) as exc_info:
        entry_point.main()

    assert exc_info.value.code == 1


@pytest.mark.asyncio
async def test_requests_are_written_to_access_log(
    settings: Settings, access_logging: Path
) -> None:
    app = create_app(settings)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        await ac.get(
            "/api/books/published",
            params={"startDate": "2020-01-01", "endDate": "2020-12-31"},
            headers={"User-Agent": "test-agent"},
        )

    for handler in logging.getLogger(ACCESS_LOGGER_NAME).handlers:
        handler.flush()
    lines = access_logging.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    assert COMBINED_LINE.match(lines[0]), lines[0]


def test_configure_logging_creates_log_dir(settings: Settings, access_logging: Path) -> None:
    assert access_logging.parent.is_dir()


@pytest.mark.asyncio
async def test_access_log_records_basic_auth_user(
    settings: Settings, access_logging: Path
) -> None:
    app = create_app(settings)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        await ac.post(
            "/api/books",
            json={"title": "T", "author": "A", "isbn": "1"},
            headers=basic_auth(TEST_USERNAME, "wrong"),
        )

    for handler in logging.getLogger(ACCESS_LOGGER_NAME).handlers:
        handler.flush()
    line = access_logging.read_text(encoding="utf-8").splitlines()[-1]
    assert f" - {TEST_USERNAME} [" in line
    assert '"POST /api/books HTTP/1.1" 401 ' in line
