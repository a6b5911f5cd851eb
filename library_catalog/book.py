from __future__ import annotations

from datetime import datetime


class Book:
    """A single copy held by the catalog."""

    def __init__(self, book_id: str, title: str, author: str, isbn: str | None = None) -> None:
        self.id = book_id
        self.title = title.strip()
        self.author = author.strip()
        isbn = isbn.strip() if isbn else None
        self.isbn = isbn or None
        self.issued = False
        self.borrower: str | None = None
        self.issued_at: datetime | None = None

    @property
    def available(self) -> bool:
        return not self.issued

    def issue(self, borrower: str, when: datetime) -> None:
        self.issued = True
        self.borrower = borrower
        self.issued_at = when

    def mark_returned(self) -> None:
        self.issued = False
        self.borrower = None
        self.issued_at = None

    def __str__(self) -> str:
        text = f"Title: {self.title}, Author: {self.author}"
        if self.isbn:
            text += f", ISBN: {self.isbn}"
        if self.issued:
            text += f" (Issued to: {self.borrower})"
        else:
            text += " (Available)"
        return text

    def __repr__(self) -> str:
        return f"Book(id={self.id!r}, title={self.title!r}, issued={self.issued})"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "isbn": self.isbn,
            "issued": self.issued,
            "borrower": self.borrower,
            "issued_at": self.issued_at.isoformat() if self.issued_at else None,
        }
