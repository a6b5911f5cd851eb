import logging
from typing import Optional

import typer
from rich.console import Console

from library_catalog.catalog import Catalog, id_factory_for
from library_catalog.config import settings
from library_catalog.seed import load_seed, read_seed_file
from library_catalog.session import Session
from library_catalog.ui_helpers import (
    get_output_mode,
    print_list_result,
    print_search_result,
    print_stats_result,
    set_output_mode,
)

APP_NAME = settings.app_name

console = Console()
logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    """Send log records to stderr so they never mix into the menu output."""
    level_name = (level or settings.log_level or "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def build_catalog(seed: bool = True, seed_file: Optional[str] = None) -> Catalog:
    """Create the session's catalog, preloaded from a seed file or the default seed."""
    catalog = Catalog(id_factory=id_factory_for(settings.id_strategy), strict_isbn=settings.strict_isbn)
    if seed_file:
        load_seed(catalog, read_seed_file(seed_file))
    elif seed:
        load_seed(catalog)
    return catalog


def _load_catalog(no_seed: bool, seed_file: Optional[str]) -> Catalog:
    seed_file = seed_file or settings.seed_file
    try:
        return build_catalog(seed=settings.seed_enabled and not no_seed, seed_file=seed_file)
    except FileNotFoundError:
        print(f"Seed file not found: {seed_file}")
    except ValueError as e:
        print(f"Could not load catalog: {e}")
    raise typer.Exit(code=1)


def _run_menu(no_seed: bool, seed_file: Optional[str], no_pause: bool) -> None:
    catalog = _load_catalog(no_seed, seed_file)
    session = Session(
        catalog,
        console=console,
        output_mode=get_output_mode(),
        pause=settings.pause_after_command and not no_pause,
        app_name=APP_NAME,
    )
    try:
        status = session.run()
    except EOFError:
        logger.error("Input stream closed; exiting")
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        raise typer.Exit(code=130)
    raise typer.Exit(code=status)


# --- Typer CLI Application ---
app = typer.Typer(help="Library catalog CLI")

SEED_FILE_OPTION = typer.Option(None, "--seed-file", help="CSV or JSON file to preload instead of the default seed")
NO_SEED_OPTION = typer.Option(False, "--no-seed", help="Start with an empty catalog")


@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
):
    """Global options; with no command the interactive menu starts."""
    configure_logging()
    if output and not set_output_mode(output):
        print(f"Unsupported output mode: {output}. Use plain, json or rich.")
        raise typer.Exit(code=2)
    if ctx.invoked_subcommand is None:
        _run_menu(no_seed=False, seed_file=None, no_pause=False)


@app.command("menu")
def cli_menu(
    no_seed: bool = NO_SEED_OPTION,
    seed_file: Optional[str] = SEED_FILE_OPTION,
    no_pause: bool = typer.Option(False, "--no-pause", help="Do not wait for Enter after each command"),
):
    """Run the interactive menu."""
    _run_menu(no_seed=no_seed, seed_file=seed_file, no_pause=no_pause)


@app.command("list")
def cli_list(no_seed: bool = NO_SEED_OPTION, seed_file: Optional[str] = SEED_FILE_OPTION):
    """List the seeded catalog with its counts."""
    catalog = _load_catalog(no_seed, seed_file)
    print_list_result(console, catalog.list_books(), get_output_mode())


@app.command("search")
def cli_search(
    query: str = typer.Argument(..., help="Text to match against title or author"),
    no_seed: bool = NO_SEED_OPTION,
    seed_file: Optional[str] = SEED_FILE_OPTION,
):
    """Search the seeded catalog by title or author."""
    catalog = _load_catalog(no_seed, seed_file)
    print_search_result(console, query, catalog.search(query), get_output_mode())


@app.command("stats")
def cli_stats(no_seed: bool = NO_SEED_OPTION, seed_file: Optional[str] = SEED_FILE_OPTION):
    """Show catalog statistics."""
    catalog = _load_catalog(no_seed, seed_file)
    print_stats_result(console, catalog.get_statistics(), get_output_mode())


if __name__ == "__main__":
    app()
