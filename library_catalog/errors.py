from __future__ import annotations

from enum import Enum
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from library_catalog.book import Book


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"
    CONFLICT = "conflict"
    DUPLICATE = "duplicate"


class CatalogError(Exception):
    """Base class for every recoverable catalog failure.

    A failing operation never leaves the catalog partially modified, so the
    caller can report the message and carry on.
    """

    kind: ErrorKind


class ValidationError(CatalogError, ValueError):
    """Empty or malformed input."""

    kind = ErrorKind.VALIDATION


class NotFoundError(CatalogError, LookupError):
    """No record matches the lookup."""

    kind = ErrorKind.NOT_FOUND


class AmbiguousError(CatalogError, LookupError):
    """More than one record matches where a single one is required."""

    kind = ErrorKind.AMBIGUOUS

    def __init__(self, message: str, candidates: List["Book"]) -> None:
        super().__init__(message)
        self.candidates = list(candidates)


class ConflictError(CatalogError):
    """The record's current state does not allow the operation."""

    kind = ErrorKind.CONFLICT


class DuplicateError(CatalogError, ValueError):
    """An explicit id collides with a current or deleted record."""

    kind = ErrorKind.DUPLICATE
