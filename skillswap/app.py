"""SkillSwap matching command line entry point."""

import logging
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from skillswap.config import LOG_PATH, ensure_data_dir, load_settings
from skillswap.errors import RepositoryUnavailable, UserNotFound
from skillswap.matching.engine import MatchEngine
from skillswap.output.export import EXPORT_FORMATS, export_matches
from skillswap.storage.database import get_engine, get_session, init_db
from skillswap.storage.fixtures import find_existing_rows, load_fixture_data, read_fixture
from skillswap.storage.sql_repository import SqlAlchemyRepository

app = typer.Typer(help="SkillSwap skill exchange matching")
console = Console()


def configure_logging(verbose: bool = False) -> None:
    """Configure application logging."""
    ensure_data_dir()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO if verbose else logging.WARNING)

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    log_path = str(LOG_PATH.resolve())
    has_file_handler = any(
        isinstance(handler, logging.FileHandler)
        and handler.baseFilename == log_path
        for handler in root_logger.handlers
    )
    if not has_file_handler:
        file_handler = logging.FileHandler(LOG_PATH, encoding="utf-8")
        file_handler.setLevel(logging.WARNING)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if verbose and not any(isinstance(h, RichHandler) for h in root_logger.handlers):
        root_logger.addHandler(RichHandler(console=console, show_path=False))


@app.command("init-db")
def init_db_command(
    settings_path: Optional[Path] = typer.Option(None, "--settings", help="Settings YAML"),
):
    """Create the database tables."""
    settings = load_settings(settings_path)
    init_db(settings.database_url)
    console.print(f"[green]Initialized database[/green] {settings.database_url}")


@app.command()
def seed(
    fixture: Path = typer.Argument(..., help="YAML fixture of users, skills and exchanges"),
    settings_path: Optional[Path] = typer.Option(None, "--settings", help="Settings YAML"),
):
    """Load a YAML fixture into the database."""
    settings = load_settings(settings_path)
    init_db(settings.database_url)

    data = read_fixture(fixture)
    try:
        with get_session() as session:
            existing = find_existing_rows(data, session)
            if not existing:
                counts = load_fixture_data(data, session)
    except SQLAlchemyError as e:
        console.print(f"[red]Could not load fixture:[/red] {e}")
        raise typer.Exit(code=1)

    if existing:
        console.print("[red]Fixture rows already exist:[/red]")
        for table, ids in existing.items():
            console.print(f"  {table}: {', '.join(str(i) for i in ids)}")
        raise typer.Exit(code=1)

    summary = ", ".join(f"{count} {table}" for table, count in counts.items())
    console.print(f"[green]Seeded[/green] {summary or 'nothing'}")


@app.command()
def matches(
    user_id: int = typer.Argument(..., help="User to compute matches for"),
    advanced: bool = typer.Option(False, "--advanced", help="Show the score breakdown"),
    export_path: Optional[Path] = typer.Option(None, "--export", help="Write matches to .json or .csv"),
    settings_path: Optional[Path] = typer.Option(None, "--settings", help="Settings YAML"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log pipeline progress"),
):
    """Compute and display ranked matches for a user."""
    configure_logging(verbose)

    if export_path and export_path.suffix.lower() not in EXPORT_FORMATS:
        console.print(
            f"[red]Unsupported export format:[/red] {export_path.suffix or export_path.name} "
            f"(use {' or '.join(EXPORT_FORMATS)})"
        )
        raise typer.Exit(code=3)

    settings = load_settings(settings_path)
    get_engine(settings.database_url)

    engine = MatchEngine(SqlAlchemyRepository(), settings)
    try:
        results = engine.compute_advanced_matches(user_id)
    except UserNotFound as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)
    except RepositoryUnavailable as e:
        console.print(f"[red]Database unavailable:[/red] {e}")
        raise typer.Exit(code=2)

    if not results:
        console.print("[yellow]No matches found[/yellow]")
        return

    columns = ["#", "User", "Offers", "For your", "Score"]
    if advanced:
        columns += ["Rating", "Location", "Activity", "Completion", "Response", "Mutual", "Pref"]

    table = Table(*columns, title=f"Matches for user {user_id}")
    for i, match in enumerate(results, 1):
        row = [str(i), match.user_name, match.offered_skill, match.seeking_skill, str(match.match_score)]
        if advanced:
            row += [
                f"{match.user_rating:.1f}" if match.user_rating else "-",
                str(match.location_score),
                str(match.activity_score),
                f"{match.completion_rate:.0%}",
                match.response_time,
                "yes" if match.mutual_interest else "no",
                str(match.recommendation_score),
            ]
        table.add_row(*row)
    console.print(table)

    if export_path:
        export_matches(results, str(export_path), user_id=user_id)
        console.print(f"[green]Saved matches to[/green] {export_path}")


def main() -> None:
    """Entry point for the application."""
    load_dotenv()
    app()


if __name__ == "__main__":
    main()
