"""Command-line interface for bookkeeper.

Built with Typer for commands and Rich for output.
"""

from datetime import date
from typing import Optional

import typer
from pydantic import ValidationError as SchemaError
from rich.console import Console
from rich.table import Table

from .config import get_config
from .db import get_db
from .db.schemas import BookAddRequest, BookResponse, ProgressUpdate, schema_error_message
from .errors import BookkeeperError
from .log import setup_logging

# Create the main app
app = typer.Typer(
    name="bookkeeper",
    help="Track your reading progress and reading plans.",
    no_args_is_help=True,
)

# Rich console for pretty output
console = Console()

USER_OPTION = typer.Option(
    ..., "--user", "-u", envvar="BOOKKEEPER_USER", help="Owner identifier"
)


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse a YYYY-MM-DD option."""
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        print_error(f"Invalid date: {value} (expected YYYY-MM-DD)")
        raise typer.Exit(1)


def format_book_table(books: list[BookResponse], title: str = "Books") -> Table:
    """Create a rich table for displaying books."""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Title", style="cyan", no_wrap=False, max_width=40)
    table.add_column("Status", style="yellow")
    table.add_column("Page", justify="right")
    table.add_column("Progress", justify="right")
    table.add_column("Started")
    table.add_column("Finished")

    for book in books:
        table.add_row(
            book.book_title,
            book.status.value.replace("_", " "),
            f"{book.current_page}/{book.total_pages}",
            f"{book.progress_percent}%",
            book.start_date.isoformat() if book.start_date else "-",
            book.end_date.isoformat() if book.end_date else "-",
        )

    return table


def show_book(book: BookResponse) -> None:
    """Print a book's progress summary."""
    console.print(f"[bold cyan]{book.book_title}[/bold cyan]")
    console.print(
        f"  Page {book.current_page} of {book.total_pages} "
        f"({book.progress_percent}%) - {book.status.value.replace('_', ' ')}"
    )
    if book.notes:
        console.print(f"  Notes: {book.notes}")
    if book.daily_read:
        latest = book.daily_read[-1]
        console.print(f"  Last logged: {latest.pages_read} pages on {latest.date.isoformat()}")


@app.callback()
def main_callback() -> None:
    """Configure logging before any command runs."""
    setup_logging(get_config().log_level)


# ============================================================================
# Book Commands
# ============================================================================


@app.command()
def add(
    title: str = typer.Argument(..., help="Book title"),
    total_pages: int = typer.Option(..., "--pages", "-p", help="Total page count"),
    pages_read: int = typer.Option(0, "--read", "-r", help="Pages already read"),
    start: Optional[str] = typer.Option(None, "--start", help="Start date (YYYY-MM-DD)"),
    end: Optional[str] = typer.Option(None, "--end", help="End date (YYYY-MM-DD)"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Notes"),
    user: str = USER_OPTION,
) -> None:
    """Add a book, or update the details of one you already track."""
    from .reading import ProgressTracker

    try:
        request = BookAddRequest(
            book_title=title,
            total_pages=total_pages,
            pages_read=pages_read,
            start_date=parse_date(start),
            end_date=parse_date(end),
            notes=notes,
        )
    except SchemaError as e:
        print_error(schema_error_message(e))
        raise typer.Exit(1)

    try:
        book, created = ProgressTracker(get_db()).add_book(user, request)
    except BookkeeperError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"{'Added' if created else 'Updated'}: {book.book_title}")
    show_book(book)


@app.command()
def progress(
    title: str = typer.Argument(..., help="Book title"),
    page: int = typer.Argument(..., help="Page you are now on"),
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="Notes"),
    user: str = USER_OPTION,
) -> None:
    """Record the page you have reached in a book."""
    from .reading import ProgressTracker

    try:
        book = ProgressTracker(get_db()).update_progress(
            user, ProgressUpdate(book_title=title, current_page=page, notes=notes)
        )
    except SchemaError as e:
        print_error(schema_error_message(e))
        raise typer.Exit(1)
    except BookkeeperError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Updated progress: {book.book_title}")
    show_book(book)


@app.command()
def finish(
    title: str = typer.Argument(..., help="Book title"),
    user: str = USER_OPTION,
) -> None:
    """Mark a book as finished."""
    from .reading import ProgressTracker

    try:
        book = ProgressTracker(get_db()).finish_book(user, title)
    except BookkeeperError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Finished: {book.book_title}")
    show_book(book)


@app.command()
def current(
    title: Optional[str] = typer.Argument(None, help="Book title (default: latest unfinished)"),
    user: str = USER_OPTION,
) -> None:
    """Show the book you are currently reading."""
    from .reading import ProgressTracker

    try:
        book = ProgressTracker(get_db()).get_current_book(user, title)
    except BookkeeperError as e:
        print_error(str(e))
        raise typer.Exit(1)

    show_book(book)


@app.command()
def history(
    unfinished: bool = typer.Option(False, "--unfinished", help="Hide finished books"),
    user: str = USER_OPTION,
) -> None:
    """List your books, most recently updated first."""
    from .reading import ProgressTracker

    try:
        books = ProgressTracker(get_db()).get_history(user, include_complete=not unfinished)
    except BookkeeperError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not books:
        print_info("No books yet. Add one with 'bookkeeper add'.")
        return

    console.print(format_book_table(books, title="Reading History"))


# ============================================================================
# Plan Commands
# ============================================================================


@app.command()
def plan(
    title: str = typer.Argument(..., help="Book title"),
    pages_per_day: int = typer.Argument(..., help="Pages to read per day"),
    user: str = USER_OPTION,
) -> None:
    """Create or replace the reading plan for a book."""
    from .schedule import PlanManager, ReadingPlanRequest

    try:
        request = ReadingPlanRequest(book_title=title, pages_per_day=pages_per_day)
        result, created = PlanManager(get_db()).create_or_update_plan(user, request)
    except SchemaError as e:
        print_error(schema_error_message(e))
        raise typer.Exit(1)
    except BookkeeperError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"{'Created' if created else 'Updated'} plan: {result.book_title}")
    console.print(f"  {result.pages_per_day} pages/day, {max(result.pages_remaining, 0)} pages left")
    console.print(
        f"  Estimated {result.estimated_days} days, finishing {result.end_date.isoformat()}"
    )


@app.command()
def plans(
    title: Optional[str] = typer.Argument(None, help="Only show this book's plan"),
    user: str = USER_OPTION,
) -> None:
    """List your reading plans with current projections."""
    from .schedule import PlanManager

    try:
        manager = PlanManager(get_db())
        results = [manager.get_plan(user, title)] if title else manager.list_plans(user)
    except BookkeeperError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not results:
        print_info("No reading plans yet. Create one with 'bookkeeper plan'.")
        return

    table = Table(title="Reading Plans", show_header=True, header_style="bold magenta")
    table.add_column("Title", style="cyan", max_width=40)
    table.add_column("Pages/Day", justify="right")
    table.add_column("Remaining", justify="right")
    table.add_column("Days", justify="right")
    table.add_column("Finish", style="green")

    for result in results:
        table.add_row(
            result.book_title,
            str(result.pages_per_day),
            str(max(result.pages_remaining, 0)),
            str(result.estimated_days),
            result.end_date.isoformat(),
        )

    console.print(table)


@app.command()
def stats(
    title: str = typer.Argument(..., help="Book title"),
    user: str = USER_OPTION,
) -> None:
    """Compare pages read against the plan, day by day."""
    from .stats import StatsService

    try:
        series = StatsService(get_db()).reading_stats(user, title)
    except BookkeeperError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not series:
        print_info("No reading logged for this book yet.")
        return

    table = Table(title=f"Reading Stats: {title}", show_header=True, header_style="bold magenta")
    table.add_column("Date")
    table.add_column("Plan", justify="right")
    table.add_column("Actual", justify="right")
    table.add_column("Bonus", justify="right")

    for stat in series:
        style = "green" if stat.bonus >= 0 else "red"
        bonus = f"+{stat.bonus}" if stat.bonus >= 0 else str(stat.bonus)
        table.add_row(
            stat.date.isoformat(),
            str(stat.plan),
            str(stat.actual),
            f"[{style}]{bonus}[/{style}]",
        )

    console.print(table)


# ============================================================================
# Server Commands
# ============================================================================


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", help="Port"),
    debug: bool = typer.Option(False, "--debug", help="Enable Flask debug mode"),
) -> None:
    """Run the HTTP API."""
    from .api import run_server

    config = get_config()
    errors = config.validate()
    if errors:
        for error in errors:
            print_error(error)
        raise typer.Exit(1)

    try:
        run_server(host=host, port=port, debug=debug)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"bookkeeper version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
