"""Run the catalogue API with uvicorn: ``python -m book_catalogue``."""

import logging
import sys

import uvicorn

from .config import get_settings
from .errors import CatalogueLoadError
from .logging_config import configure_logging
from .main import create_app

logger = logging.getLogger("book_catalogue")


def main() -> None:
    settings = get_settings()
    configure_logging(settings)
    try:
        app = create_app(settings)
    except CatalogueLoadError as exc:
        logger.critical("%s", exc.message)
        sys.exit(1)

    logger.info("Server is running on http://localhost:%s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
