"""Interactive menu over a single Catalog.

One line is read, one catalog call is made, one result is printed, then the
next line is read. Catalog errors become an ``Outcome`` and the loop carries
on; only a closed input stream (``EOFError``) leaves ``run()``.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, Optional, TextIO

from rich.console import Console
from rich.markup import escape

from library_catalog.catalog import Catalog
from library_catalog.config import settings
from library_catalog.errors import AmbiguousError, CatalogError, ErrorKind
from library_catalog.ui_helpers import (
    print_candidates,
    print_list_result,
    print_search_result,
    render_menu,
    say,
)


class MenuChoice(IntEnum):
    DISPLAY = 1
    ISSUE = 2
    RETURN = 3
    ADD = 4
    DELETE = 5
    SEARCH = 6
    EXIT = 7


MENU_ITEMS = [
    (MenuChoice.DISPLAY, "Display All Books"),
    (MenuChoice.ISSUE, "Issue Book"),
    (MenuChoice.RETURN, "Return Book"),
    (MenuChoice.ADD, "Add Book"),
    (MenuChoice.DELETE, "Delete Book"),
    (MenuChoice.SEARCH, "Search Books"),
    (MenuChoice.EXIT, "Exit"),
]


@dataclass
class Outcome:
    ok: bool
    message: str = ""
    error: Optional[ErrorKind] = None
    exit: bool = False


def parse_choice(raw: str) -> MenuChoice:
    """Turn a menu line into a choice; ValueError carries the message to show."""
    try:
        number = int((raw or "").strip())
    except ValueError:
        raise ValueError("Invalid input. Please enter a number.") from None
    try:
        return MenuChoice(number)
    except ValueError:
        raise ValueError(f"Invalid option. Please choose between 1-{len(MenuChoice)}.") from None


class Session:
    def __init__(
        self,
        catalog: Catalog,
        console: Optional[Console] = None,
        stream: Optional[TextIO] = None,
        output_mode: str = "plain",
        pause: bool = True,
        app_name: Optional[str] = None,
    ) -> None:
        self.catalog = catalog
        self.console = console or Console()
        self.stream = stream
        self.output_mode = output_mode
        self.pause = pause
        self.app_name = app_name or settings.app_name
        self._handlers: Dict[MenuChoice, Callable[[], Outcome]] = {
            MenuChoice.DISPLAY: self.display_books,
            MenuChoice.ISSUE: self.issue_book,
            MenuChoice.RETURN: self.return_book,
            MenuChoice.ADD: self.add_book,
            MenuChoice.DELETE: self.delete_book,
            MenuChoice.SEARCH: self.search_books,
            MenuChoice.EXIT: self.exit,
        }

    # ------------------------- Loop ------------------------- #
    def run(self) -> int:
        """Run the menu until Exit; returns the exit status."""
        say(self.console, f"Welcome to the {self.app_name}!")
        while True:
            render_menu(self.console, self.app_name, MENU_ITEMS, self.output_mode)
            raw = self.read_line(f"Choose an option (1-{len(MenuChoice)}): ")
            try:
                choice = parse_choice(raw)
            except ValueError as e:
                say(self.console, str(e))
                continue

            outcome = self.execute(choice)
            self.report(outcome)
            if outcome.exit:
                return 0
            if self.pause:
                self.read_line("\nPress Enter to continue...")

    def read_line(self, prompt: str) -> str:
        """Read one trimmed line. Raises EOFError once the input is exhausted."""
        line = self.console.input(prompt, markup=False, stream=self.stream)
        # readline() returns "" only at end of stream; a blank line is "\n"
        if self.stream is not None and line == "":
            raise EOFError("input stream closed")
        return line.strip()

    def execute(self, choice: MenuChoice) -> Outcome:
        handler = self._handlers[MenuChoice(choice)]
        try:
            return handler()
        except CatalogError as e:
            return Outcome(ok=False, message=str(e), error=e.kind)

    def report(self, outcome: Outcome) -> None:
        if not outcome.message:
            return
        if outcome.ok:
            self.console.print(f"[green]{escape(outcome.message)}[/]", soft_wrap=True)
        else:
            self.console.print(f"[bold red]Error:[/] {escape(outcome.message)}", soft_wrap=True)

    # ------------------------- Commands ------------------------- #
    def display_books(self) -> Outcome:
        print_list_result(self.console, self.catalog.list_books(), self.output_mode)
        return Outcome(ok=True)

    def issue_book(self) -> Outcome:
        title = self.read_line("Enter the title of the book to issue: ")
        borrower = self.read_line("Enter borrower's name: ")
        book = self.catalog.issue(title, borrower)
        return Outcome(ok=True, message=f"Book issued successfully: {book.title} to {book.borrower}")

    def return_book(self) -> Outcome:
        title = self.read_line("Enter the title of the book to return: ")
        try:
            receipt = self.catalog.return_book(title)
        except AmbiguousError as e:
            book_id = self._pick_candidate(e)
            if book_id is None:
                return Outcome(ok=False, message=str(e), error=e.kind)
            receipt = self.catalog.return_by_id(book_id)
        return Outcome(
            ok=True,
            message=f"Book returned successfully: {receipt.book.title} from {receipt.borrower}",
        )

    def add_book(self) -> Outcome:
        title = self.read_line("Enter the title: ")
        author = self.read_line("Enter the author: ")
        isbn = self.read_line("Enter ISBN (optional, press Enter to skip): ")
        book_id = self.catalog.add(title, author, isbn or None)
        book = self.catalog.find_by_id(book_id)
        return Outcome(ok=True, message=f"Book added successfully: {book.title}")

    def delete_book(self) -> Outcome:
        title = self.read_line("Enter the title of the book to delete: ")
        try:
            book = self.catalog.delete(title)
        except AmbiguousError as e:
            book_id = self._pick_candidate(e)
            if book_id is None:
                return Outcome(ok=False, message=str(e), error=e.kind)
            book = self.catalog.delete_by_id(book_id)
        return Outcome(ok=True, message=f"Book deleted: {book.title}")

    def search_books(self) -> Outcome:
        query = self.read_line("Enter search query (title or author): ")
        print_search_result(self.console, query, self.catalog.search(query), self.output_mode)
        return Outcome(ok=True)

    def exit(self) -> Outcome:
        return Outcome(ok=True, message=f"Thank you for using the {self.app_name}!", exit=True)

    # ------------------------- Helpers ------------------------- #
    def _pick_candidate(self, error: AmbiguousError) -> Optional[str]:
        """List the ambiguous copies and ask for one. None means cancelled."""
        say(self.console, f"{len(error.candidates)} copies match:")
        print_candidates(self.console, error.candidates)
        raw = self.read_line("Enter the number of the copy (press Enter to cancel): ")
        if not raw:
            return None
        if raw.isdigit() and 1 <= int(raw) <= len(error.candidates):
            return error.candidates[int(raw) - 1].id
        say(self.console, "Invalid selection.")
        return None
