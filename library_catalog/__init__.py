"""Library Catalog - in-memory catalog with an interactive menu

This package contains:
- Catalog and its record indexes (catalog.py)
- Book record (book.py)
- Error kinds (errors.py)
- Interactive menu session (session.py)
- CLI entry point (main.py)
- Seed data, settings, validators and output helpers
"""

from library_catalog.book import Book
from library_catalog.catalog import Catalog, Listing, Receipt
from library_catalog.errors import (
    AmbiguousError,
    CatalogError,
    ConflictError,
    DuplicateError,
    ErrorKind,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "Book",
    "Catalog",
    "Listing",
    "Receipt",
    "CatalogError",
    "ErrorKind",
    "ValidationError",
    "NotFoundError",
    "AmbiguousError",
    "ConflictError",
    "DuplicateError",
]
