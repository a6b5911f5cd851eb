import io
import json

import pytest
from rich.console import Console

from library_catalog.errors import ErrorKind
from library_catalog.seed import load_seed
from library_catalog.session import MenuChoice, Session, parse_choice


def make_session(catalog, text, mode="plain", pause=False):
    out = io.StringIO()
    console = Console(file=out, width=200, color_system=None)
    session = Session(
        catalog,
        console=console,
        stream=io.StringIO(text),
        output_mode=mode,
        pause=pause,
        app_name="Library Management System",
    )
    return session, out


def test_parse_choice():
    assert parse_choice(" 3 ") is MenuChoice.RETURN
    assert parse_choice("7") is MenuChoice.EXIT


@pytest.mark.parametrize("raw, message", [
    ("abc", "Invalid input. Please enter a number."),
    ("", "Invalid input. Please enter a number."),
    ("0", "Invalid option. Please choose between 1-7."),
    ("8", "Invalid option. Please choose between 1-7."),
])
def test_parse_choice_rejects(raw, message):
    with pytest.raises(ValueError, match=message):
        parse_choice(raw)


def test_menu_and_exit(catalog):
    session, out = make_session(catalog, "7\n")

    assert session.run() == 0

    output = out.getvalue()
    assert "Welcome to the Library Management System!" in output
    for line in ("1. Display All Books", "2. Issue Book", "3. Return Book", "4. Add Book",
                 "5. Delete Book", "6. Search Books", "7. Exit"):
        assert line in output
    assert "Thank you for using the Library Management System!" in output


def test_invalid_choices_reprompt(catalog):
    session, out = make_session(catalog, "abc\n9\n7\n")

    assert session.run() == 0

    output = out.getvalue()
    assert "Invalid input. Please enter a number." in output
    assert "Invalid option. Please choose between 1-7." in output
    assert output.count("7. Exit") == 3


def test_closed_stream_raises_eof(catalog):
    session, _ = make_session(catalog, "1\n")
    with pytest.raises(EOFError):
        session.run()


def test_closed_stream_inside_command(catalog):
    session, _ = make_session(catalog, "2\nDune\n")
    with pytest.raises(EOFError):
        session.run()


def test_add_book_through_menu(catalog):
    session, out = make_session(catalog, "4\nDune\nFrank Herbert\n\n7\n")

    session.run()

    assert "Book added successfully: Dune" in out.getvalue()
    book = catalog.list_books().books[0]
    assert (book.title, book.author, book.isbn) == ("Dune", "Frank Herbert", None)


def test_errors_are_reported_and_loop_continues(catalog):
    session, out = make_session(catalog, "4\n\nSomeone\n\n5\nMissing\n7\n")

    assert session.run() == 0

    output = out.getvalue()
    assert "Error: Title and author cannot be empty" in output
    assert "Error: Book not found: Missing" in output
    assert len(catalog) == 0


def test_issue_and_return_scenario(catalog):
    catalog.add("Dune", "Frank Herbert")
    session, out = make_session(catalog, "2\nDune\nAlice\n2\nDune\nBob\n3\nDune\n2\nDune\nBob\n7\n")

    session.run()

    output = out.getvalue()
    assert "Book issued successfully: Dune to Alice" in output
    assert "Error: No available copies of this book" in output
    assert "Book returned successfully: Dune from Alice" in output
    assert "Book issued successfully: Dune to Bob" in output
    assert catalog.list_books().books[0].borrower == "Bob"


def test_execute_returns_outcome(catalog):
    session, _ = make_session(catalog, "Missing\n")

    outcome = session.execute(MenuChoice.DELETE)

    assert outcome.ok is False
    assert outcome.error is ErrorKind.NOT_FOUND
    assert outcome.exit is False


def test_delete_ambiguous_pick_copy(catalog):
    catalog.add("Dune", "Frank Herbert")
    second = catalog.add("Dune", "Brian Herbert")
    session, out = make_session(catalog, "5\nDune\n2\n7\n")

    session.run()

    output = out.getvalue()
    assert "2 copies match:" in output
    assert "1. Title: Dune, Author: Frank Herbert (Available)" in output
    assert "Book deleted: Dune" in output
    assert second not in catalog
    assert len(catalog) == 1


def test_delete_ambiguous_cancelled(catalog):
    catalog.add("Dune", "Frank Herbert")
    catalog.add("Dune", "Brian Herbert")
    session, _ = make_session(catalog, "Dune\n\n")

    outcome = session.execute(MenuChoice.DELETE)

    assert outcome.ok is False
    assert outcome.error is ErrorKind.AMBIGUOUS
    assert len(catalog) == 2


def test_delete_ambiguous_invalid_selection(catalog):
    catalog.add("Dune", "Frank Herbert")
    catalog.add("Dune", "Brian Herbert")
    session, out = make_session(catalog, "Dune\n5\n")

    outcome = session.execute(MenuChoice.DELETE)

    assert outcome.error is ErrorKind.AMBIGUOUS
    assert "Invalid selection." in out.getvalue()
    assert len(catalog) == 2


def test_return_ambiguous_pick_copy(catalog):
    catalog.add("Dune", "Frank Herbert")
    catalog.add("Dune", "Frank Herbert")
    catalog.issue("Dune", "Alice")
    catalog.issue("Dune", "Bob")
    session, _ = make_session(catalog, "Dune\n2\n")

    outcome = session.execute(MenuChoice.RETURN)

    assert outcome.ok is True
    assert outcome.message == "Book returned successfully: Dune from Bob"
    assert [b.borrower for b in catalog.list_books().books] == ["Alice", None]


def test_delete_issued_reports_conflict(catalog):
    catalog.add("Dune", "Frank Herbert")
    catalog.issue("Dune", "Alice")
    session, _ = make_session(catalog, "Dune\n")

    outcome = session.execute(MenuChoice.DELETE)

    assert outcome.error is ErrorKind.CONFLICT
    assert outcome.message == "Cannot delete an issued book. Please return it first."


def test_pause_waits_for_enter(catalog):
    session, out = make_session(catalog, "1\n\n7\n", pause=True)

    assert session.run() == 0
    assert "Press Enter to continue..." in out.getvalue()


def test_display_books_plain(catalog):
    load_seed(catalog)
    catalog.issue("Mastery", "Alice")
    session, out = make_session(catalog, "")

    session.display_books()

    output = out.getvalue()
    assert "=== Library Inventory ===" in output
    assert "Total books: 7" in output
    assert "Available: 6" in output
    assert "Issued: 1" in output
    assert "Title: Mastery, Author: Robert Greene (Issued to: Alice)" in output
    assert "Title: Data Structures, Author: Mark Allen Weiss (Available)" in output


def test_display_books_empty(catalog):
    session, out = make_session(catalog, "")
    session.display_books()
    assert "No books available in the library." in out.getvalue()


def test_display_books_json(catalog, fixed_now):
    catalog.add("Dune", "Frank Herbert", "9780441013593")
    catalog.issue("Dune", "Alice")
    session, out = make_session(catalog, "", mode="json")

    session.display_books()

    payload = json.loads(out.getvalue())
    assert payload["total"] == 1
    assert payload["issued"] == 1
    assert payload["books"][0]["borrower"] == "Alice"
    assert payload["books"][0]["issued_at"] == fixed_now.isoformat()


def test_search_through_menu(catalog):
    load_seed(catalog)
    session, out = make_session(catalog, "6\nrobert\n6\nxyz\n7\n")

    session.run()

    output = out.getvalue()
    assert "Found 3 book(s):" in output
    assert "No books found matching: xyz" in output


def test_rich_mode_renders_tables(catalog):
    load_seed(catalog)
    session, out = make_session(catalog, "6\nrobert\n7\n", mode="rich")

    session.run()

    output = out.getvalue()
    assert "Display All Books" in output
    assert "Mastery" in output
    assert "3 result(s)" in output
