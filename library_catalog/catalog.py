import itertools
import logging
import uuid
from datetime import datetime
from typing import Callable, Dict, List, NamedTuple, Optional, Set

from library_catalog.book import Book
from library_catalog.errors import (
    AmbiguousError,
    ConflictError,
    DuplicateError,
    NotFoundError,
    ValidationError,
)
from library_catalog.validators import ISBNValidator, TextValidator

logger = logging.getLogger(__name__)


class Listing(NamedTuple):
    books: List[Book]
    total: int
    available: int
    issued: int


class Receipt(NamedTuple):
    """What a return handed back: the record and who had it since when."""

    book: Book
    borrower: str
    issued_at: datetime


def uuid_ids() -> Callable[[], str]:
    return lambda: str(uuid.uuid4())


def counter_ids(start: int = 1) -> Callable[[], str]:
    counter = itertools.count(start)
    return lambda: str(next(counter))


def id_factory_for(strategy: str) -> Callable[[], str]:
    """Map a configured id strategy name ('uuid' or 'counter') to a generator."""
    strategy = (strategy or "uuid").lower().strip()
    if strategy == "counter":
        return counter_ids()
    if strategy == "uuid":
        return uuid_ids()
    raise ValueError(f"Unknown id strategy: {strategy}")


class Catalog:
    """Owns the book records and every operation on them.

    Records are held in two indexes: by id, and by lowercased title (copies
    in insertion order). Both are updated together; every check runs before
    the first mutation so a failed call changes nothing.
    """

    def __init__(
        self,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
        strict_isbn: bool = False,
    ) -> None:
        self._books_by_id: Dict[str, Book] = {}
        self._books_by_title: Dict[str, List[Book]] = {}
        self._retired_ids: Set[str] = set()
        self._next_id = id_factory or uuid_ids()
        self._now = clock or datetime.now
        self.strict_isbn = strict_isbn

    def __len__(self) -> int:
        return len(self._books_by_id)

    def __contains__(self, book_id: object) -> bool:
        return book_id in self._books_by_id

    # ------------------------- Core operations ------------------------- #
    def add(self, title: str, author: str, isbn: Optional[str] = None, book_id: Optional[str] = None) -> str:
        """Add a new copy and return its id.

        Raises ValidationError for a blank title or author (or a bad ISBN in
        strict mode) and DuplicateError when ``book_id`` is taken or was
        used by a deleted record.
        """
        if not TextValidator.validate_title(title) or not TextValidator.validate_author(author):
            logger.warning("Rejected add: blank title or author")
            raise ValidationError("Title and author cannot be empty")
        if isbn is not None and not isbn.strip():
            isbn = None
        if isbn and self.strict_isbn and not ISBNValidator.is_valid_isbn(isbn):
            raise ValidationError(f"Invalid ISBN: {isbn}")

        if book_id is None:
            book_id = self._fresh_id()
        elif book_id in self._books_by_id or book_id in self._retired_ids:
            raise DuplicateError("Book with this ID already exists")

        book = Book(book_id=book_id, title=title, author=author, isbn=isbn)
        self._books_by_id[book.id] = book
        self._books_by_title.setdefault(self._key(book.title), []).append(book)
        logger.info(f"Book added: id={book.id} title={book.title!r}")
        return book.id

    def delete(self, title: str) -> Book:
        """Remove the single copy with this title."""
        books = self._find_by_title(title)
        if not books:
            raise NotFoundError(f"Book not found: {title}")
        if len(books) > 1:
            raise AmbiguousError("Multiple books found with this title. Please specify which book to delete", books)
        return self._remove(books[0])

    def delete_by_id(self, book_id: str) -> Book:
        book = self._books_by_id.get(book_id)
        if book is None:
            raise NotFoundError(f"No book with id {book_id}")
        return self._remove(book)

    def issue(self, title: str, borrower: str) -> Book:
        """Lend the first available copy of ``title`` (in insertion order)."""
        if not TextValidator.validate_borrower(borrower):
            raise ValidationError("Borrower name cannot be empty")

        available = [book for book in self._find_by_title(title) if not book.issued]
        if not available:
            raise NotFoundError("No available copies of this book")

        book = available[0]
        book.issue(borrower.strip(), self._now())
        logger.info(f"Book issued: id={book.id} to={book.borrower!r}")
        return book

    def return_book(self, title: str) -> Receipt:
        issued = [book for book in self._find_by_title(title) if book.issued]
        if not issued:
            raise NotFoundError("No issued copies of this book found")
        if len(issued) > 1:
            raise AmbiguousError("Multiple issued copies found. Please specify which copy to return", issued)
        return self._return(issued[0])

    def return_by_id(self, book_id: str) -> Receipt:
        book = self._books_by_id.get(book_id)
        if book is None:
            raise NotFoundError(f"No book with id {book_id}")
        if not book.issued:
            raise ConflictError(f"Book is not issued: {book.title}")
        return self._return(book)

    def search(self, query: str) -> List[Book]:
        """Case-insensitive substring match on title or author, sorted by title."""
        needle = (query or "").lower()
        results = [
            book
            for book in self._books_by_id.values()
            if needle in book.title.lower() or needle in book.author.lower()
        ]
        return self._sorted(results)

    def list_books(self) -> Listing:
        books = self._sorted(self._books_by_id.values())
        issued = sum(1 for book in books if book.issued)
        return Listing(books=books, total=len(books), available=len(books) - issued, issued=issued)

    def find_by_id(self, book_id: str) -> Optional[Book]:
        return self._books_by_id.get(book_id)

    def get_statistics(self) -> Dict[str, int]:
        listing = self.list_books()
        return {
            "total_books": listing.total,
            "available": listing.available,
            "issued": listing.issued,
            "unique_authors": len({book.author for book in listing.books}),
        }

    # ------------------------- Internals ------------------------- #
    @staticmethod
    def _key(title: Optional[str]) -> str:
        return (title or "").strip().lower()

    @staticmethod
    def _sorted(books) -> List[Book]:
        return sorted(books, key=lambda book: book.title)

    def _find_by_title(self, title: str) -> List[Book]:
        return list(self._books_by_title.get(self._key(title), []))

    def _fresh_id(self) -> str:
        new_id = self._next_id()
        while new_id in self._books_by_id or new_id in self._retired_ids:
            new_id = self._next_id()
        return new_id

    def _remove(self, book: Book) -> Book:
        if book.issued:
            raise ConflictError("Cannot delete an issued book. Please return it first.")

        key = self._key(book.title)
        bucket = self._books_by_title[key]
        del self._books_by_id[book.id]
        bucket.remove(book)
        if not bucket:
            del self._books_by_title[key]
        self._retired_ids.add(book.id)
        logger.info(f"Book deleted: id={book.id} title={book.title!r}")
        return book

    def _return(self, book: Book) -> Receipt:
        receipt = Receipt(book=book, borrower=book.borrower, issued_at=book.issued_at)
        book.mark_returned()
        logger.info(f"Book returned: id={book.id} from={receipt.borrower!r}")
        return receipt
