import os
import json
from typing import Any, Dict, Iterable, List, Sequence, Tuple
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.markup import escape
from rich import box

from library_catalog.book import Book
from library_catalog.catalog import Listing
from library_catalog.config import settings

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"
OUTPUT_MODES = {"plain", "json", "rich"}


def set_output_mode(mode: str) -> bool:
    mode = (mode or "").lower().strip()
    if mode in OUTPUT_MODES:
        os.environ[OUTPUT_MODE_ENV] = mode
        return True
    return False


def get_output_mode() -> str:
    mode = os.environ.get(OUTPUT_MODE_ENV, settings.output_mode).lower().strip()
    return mode if mode in OUTPUT_MODES else "plain"


def say(console: Console, text: str) -> None:
    """Print literal text: no markup, no highlighting, no wrapping."""
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def _book_table(title: str, books: Iterable[Book]) -> Table:
    table = Table(title=title, show_lines=True, header_style="bold cyan")
    table.add_column("Title", style="white")
    table.add_column("Author", style="white")
    table.add_column("ISBN", style="magenta", no_wrap=True)
    table.add_column("Status")
    for b in books:
        status = f"[yellow]Issued to {escape(b.borrower or '')}[/]" if b.issued else "[green]Available[/]"
        table.add_row(escape(b.title), escape(b.author), escape(b.isbn or "-"), status)
    return table


def print_list_result(console: Console, listing: Listing, mode: str = "plain") -> None:
    """Print the inventory in the requested output mode.
    - plain: counts followed by one line per book
    - json: object with counts and a 'books' array
    - rich: Rich table with a counts footer
    """
    if mode == "json":
        payload = {
            "total": listing.total,
            "available": listing.available,
            "issued": listing.issued,
            "books": [b.to_dict() for b in listing.books],
        }
        say(console, json.dumps(payload, ensure_ascii=False))
        return

    if not listing.books:
        say(console, "No books available in the library.")
        return

    if mode == "rich":
        console.print(_book_table("📚 Library Inventory", listing.books))
        console.print(
            f"[dim]Total: {listing.total} | Available: {listing.available} | Issued: {listing.issued}[/]"
        )
    else:
        say(console, "\n=== Library Inventory ===")
        say(console, f"Total books: {listing.total}")
        say(console, f"Available: {listing.available}")
        say(console, f"Issued: {listing.issued}")
        say(console, "\nBooks:")
        for b in listing.books:
            say(console, str(b))


def print_search_result(console: Console, query: str, books: List[Book], mode: str = "plain") -> None:
    if mode == "json":
        say(console, json.dumps([b.to_dict() for b in books], ensure_ascii=False))
        return

    if not books:
        say(console, f"No books found matching: {query}")
        return

    if mode == "rich":
        console.print(_book_table(f"🔎 Search results for '{escape(query)}'", books))
        console.print(f"[dim]📊 {len(books)} result(s)[/]")
    else:
        say(console, f"Found {len(books)} book(s):")
        for b in books:
            say(console, str(b))


def print_stats_result(console: Console, stats: Dict[str, Any], mode: str = "plain") -> None:
    total = stats.get("total_books", 0)
    available = stats.get("available", 0)
    issued = stats.get("issued", 0)
    authors = stats.get("unique_authors", 0)

    if mode == "json":
        say(console, json.dumps(
            {"total_books": total, "available": available, "issued": issued, "unique_authors": authors}
        ))
    elif mode == "rich":
        content = (
            f"[bold]Total Books:[/] {total}\n"
            f"[bold]Available:[/] {available}\n"
            f"[bold]Issued:[/] {issued}\n"
            f"[bold]Unique Authors:[/] {authors}"
        )
        console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        say(console, f"Total Books: {total}")
        say(console, f"Available: {available}")
        say(console, f"Issued: {issued}")
        say(console, f"Unique Authors: {authors}")


def print_candidates(console: Console, books: Sequence[Book]) -> None:
    for i, b in enumerate(books, 1):
        say(console, f"{i}. {b}")


def render_menu(console: Console, app_name: str, items: Sequence[Tuple[int, str]], mode: str = "plain") -> None:
    if mode == "rich":
        table = Table.grid(padding=(0, 2))
        table.add_column(justify="right", style="bold cyan", width=4)
        table.add_column(justify="left", style="white")
        for key, label in items:
            table.add_row(f"[reverse]{key}[/]", label)
        console.print(Panel(table, title=app_name, border_style="cyan", box=box.HEAVY, padding=(1, 2)))
        return

    say(console, f"\n=== {app_name} ===")
    for key, label in items:
        say(console, f"{key}. {label}")
