import re
from typing import Optional

ISBN10 = re.compile(r"\d{9}[\dX]")
ISBN13 = re.compile(r"\d{13}")


class ISBNValidator:
    """ISBN-10 / ISBN-13 checksum validation, used when strict ISBN mode is on."""

    @staticmethod
    def normalize_isbn(raw: Optional[str]) -> str:
        return re.sub(r"[^0-9X]", "", (raw or "").upper())

    @staticmethod
    def is_valid_isbn(isbn: Optional[str]) -> bool:
        s = ISBNValidator.normalize_isbn(isbn)
        if ISBN10.fullmatch(s):
            digits = [10 if ch == "X" else int(ch) for ch in s]
            return sum(w * d for w, d in zip(range(10, 0, -1), digits)) % 11 == 0
        if ISBN13.fullmatch(s):
            # weights alternate 1, 3; the check digit is included in the sum
            return sum(int(ch) * (3 if i % 2 else 1) for i, ch in enumerate(s)) % 10 == 0
        return False


class TextValidator:
    """Checks for the free-text fields of a record."""

    @staticmethod
    def is_blank(text: Optional[str]) -> bool:
        return text is None or not text.strip()

    @staticmethod
    def validate_title(title: Optional[str]) -> bool:
        return not TextValidator.is_blank(title)

    @staticmethod
    def validate_author(author: Optional[str]) -> bool:
        return not TextValidator.is_blank(author)

    @staticmethod
    def validate_borrower(name: Optional[str]) -> bool:
        return not TextValidator.is_blank(name)
