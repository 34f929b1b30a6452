"""Logging set-up and the request access log."""

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from .config import Settings
from .security import decode_basic_header

ACCESS_LOGGER_NAME = "book_catalogue.access"

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Console logging for the service and a file handler for the access log.

    The access log goes to ``<log_dir>/<access_log_file>`` in append mode,
    one Apache "combined" line per request. The directory is created when
    missing. Calling this again replaces the access log handler.
    """
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    settings.log_dir.mkdir(parents=True, exist_ok=True)
    access_logger = logging.getLogger(ACCESS_LOGGER_NAME)
    for handler in list(access_logger.handlers):
        access_logger.removeHandler(handler)
        handler.close()
    file_handler = logging.FileHandler(settings.access_log_path, mode="a", encoding="utf-8")
    file_handler.setFormatter(logging.Formatter("%(message)s"))
    access_logger.addHandler(file_handler)
    access_logger.setLevel(logging.INFO)
    # Keep access lines out of the console output
    access_logger.propagate = False
    logger.debug("Access log at %s", settings.access_log_path)


def _clf_time(moment: datetime) -> str:
    # 10/Oct/2000:13:55:36 +0000
    return moment.strftime("%d/%b/%Y:%H:%M:%S %z")


def _remote_user(request: Request) -> str:
    # Username from a Basic header, whether or not it was accepted
    authorization = request.headers.get("authorization")
    credentials = decode_basic_header(authorization) if authorization else None
    return credentials.username if credentials and credentials.username else "-"


def combined_log_line(request: Request, response: Response) -> str:
    """Format one request in Apache combined log format."""
    remote_user = _remote_user(request)
    client = request.client.host if request.client else "-"
    target = request.url.path
    if request.url.query:
        target = f"{target}?{request.url.query}"
    version = request.scope.get("http_version", "1.1")
    length = response.headers.get("content-length", "-")
    referrer = request.headers.get("referer", "-")
    user_agent = request.headers.get("user-agent", "-")
    return (
        f'{client} - {remote_user} [{_clf_time(datetime.now(timezone.utc))}] '
        f'"{request.method} {target} HTTP/{version}" {response.status_code} {length} '
        f'"{referrer}" "{user_agent}"'
    )


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Writes every request to the access log and times it at DEBUG level."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Any],
    ) -> Response:
        start_time = time.perf_counter()
        response: Response = await call_next(request)
        process_time = (time.perf_counter() - start_time) * 1000  # ms

        logging.getLogger(ACCESS_LOGGER_NAME).info(combined_log_line(request, response))
        logger.debug(
            "%s %s -> %s in %.2f ms",
            request.method,
            request.url.path,
            response.status_code,
            process_time,
        )
        return response
