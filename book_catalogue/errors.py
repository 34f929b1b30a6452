"""
Error taxonomy for the catalogue and the FastAPI handlers that turn it
into HTTP responses.

Read endpoints answer errors in plain text, write endpoints answer in
JSON (``{"message": ...}``). Authentication failures are always plain
text and carry a ``WWW-Authenticate`` challenge.
"""

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, Response


class CatalogueError(Exception):
    """Base class for every error raised by the catalogue."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(CatalogueError):
    """Required input is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request."


class NotFoundError(CatalogueError):
    """A referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "Book not found"


class AuthError(CatalogueError):
    """Base class for Basic auth failures."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, realm: str, message: Optional[str] = None) -> None:
        self.realm = realm
        super().__init__(message)

    @property
    def challenge(self) -> str:
        return f'Basic realm="{self.realm}"'


class AuthRequired(AuthError):
    """No credentials were sent."""

    message = "Authentication required."


class AuthInvalid(AuthError):
    """Credentials were sent but do not match."""

    message = "Authentication failed: Invalid credentials."


class PersistenceError(CatalogueError):
    """Writing the catalogue documents to disk failed."""


class CatalogueLoadError(CatalogueError):
    """The catalogue documents could not be read at start-up."""


def _is_read(request: Request) -> bool:
    return request.method in ("GET", "HEAD")


async def auth_error_handler(request: Request, exc: AuthError) -> Response:
    return PlainTextResponse(
        exc.message,
        status_code=exc.status_code,
        headers={"WWW-Authenticate": exc.challenge},
    )


async def catalogue_error_handler(request: Request, exc: CatalogueError) -> Response:
    if _is_read(request):
        return PlainTextResponse(exc.message, status_code=exc.status_code)
    return JSONResponse({"message": exc.message}, status_code=exc.status_code)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report body/parameter parsing failures as 400 like the presence checks."""
    details: List[Dict[str, Any]] = []
    for error in exc.errors():
        loc = error.get("loc", ())
        # Drop the leading "body"/"query" segment
        field = ".".join(str(x) for x in loc[1:]) if len(loc) > 1 else ".".join(map(str, loc))
        details.append({"field": field, "message": error.get("msg", "Invalid value")})
    return JSONResponse(
        {"message": "Request validation failed", "details": details},
        status_code=status.HTTP_400_BAD_REQUEST,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    # Starlette picks the handler registered for the closest class in the MRO.
    app.add_exception_handler(AuthError, auth_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(CatalogueError, catalogue_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
