"""
Catalog package for the book catalogue API.

``schemas`` holds the Book and Review models, ``queries`` the read-only
lookups and rankings over the in-memory collections, and ``router`` the
HTTP routes that tie them to the repository in ``book_catalogue.storage``.
"""

from .router import router as catalog_router  # noqa: F401
