# book_catalogue/main.py
from typing import Optional

from fastapi import FastAPI

from . import __version__
from .catalog import catalog_router
from .config import Settings, get_settings
from .errors import register_exception_handlers
from .logging_config import AccessLogMiddleware
from .security import BasicCredentials
from .storage import CatalogueRepository


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[CatalogueRepository] = None,
) -> FastAPI:
    """Build the API around a loaded repository.

    When no repository is given one is created from ``settings`` and
    loaded immediately, so a missing or broken data file raises
    ``CatalogueLoadError`` here instead of surfacing on a request.
    """
    settings = settings or get_settings()
    if repository is None:
        repository = CatalogueRepository(settings.books_path, settings.reviews_path)
        repository.load()

    app = FastAPI(
        title=settings.app_name,
        description="Books and reviews served from two JSON documents.",
        version=__version__,
    )
    app.state.settings = settings
    app.state.repository = repository
    app.state.credentials = BasicCredentials(
        username=settings.auth_username,
        password=settings.auth_password,
        realm=settings.auth_realm,
    )

    register_exception_handlers(app)
    app.add_middleware(AccessLogMiddleware)
    app.include_router(catalog_router)
    return app
