"""
Recall: terminal front-end for the SM-2 review core.

A Rich terminal interface over ItemStore, SessionManager and ReviewRunner.

Commands:
- recall add       - Track a new concept
- recall import    - Add concepts from a JSON file (skips known names)
- recall due       - List items due for review
- recall review    - Run an interactive review session
- recall stats     - Show learning statistics
- recall sessions  - Show recent sessions
"""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from .config import get_settings
from .errors import RecallError
from .item_store import ItemStore
from .persistence import JsonFileBackend
from .review_runner import ReviewRunner
from .session_manager import SessionManager


# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="recall",
    help="Recall: spaced repetition review from the terminal",
    no_args_is_help=True,
)
console = Console()

RATING_LABELS = {
    "1": "[red]Again[/red]",
    "2": "[yellow]Hard[/yellow]",
    "3": "[green]Good[/green]",
    "4": "[cyan]Easy[/cyan]",
}


@dataclass
class Services:
    items: ItemStore
    sessions: SessionManager


def build_services(data_dir: Path | None = None) -> Services:
    """Wire the stores against the JSON backend."""
    settings = get_settings()
    backend = JsonFileBackend(data_dir or settings.recall_data_dir)
    items = ItemStore(backend, config=settings.get_sm2_config())
    sessions = SessionManager(items, default_size=settings.review_session_size)
    return Services(items=items, sessions=sessions)


@app.callback()
def callback(
    ctx: typer.Context,
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        help="Directory with item and session JSON files",
    ),
) -> None:
    """Recall: spaced repetition review from the terminal."""
    ctx.obj = data_dir


def _services(ctx: typer.Context) -> Services:
    return build_services(ctx.obj)


def _fmt_time(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "-"


# =============================================================================
# Display Helpers
# =============================================================================

def display_item(runner: ReviewRunner) -> None:
    """Display the current card."""
    item = runner.current_item
    position, total = runner.progress
    panel = Panel(
        f"[bold]{item.concept}[/bold]\n\n{item.description}",
        title=f"Card {position}/{total}",
        title_align="left",
        border_style="cyan",
        padding=(1, 2),
    )
    console.print(panel)


def _display_session_summary(runner: ReviewRunner) -> None:
    """Display end-of-session summary."""
    console.print(Panel(
        f"[bold]Session Complete![/bold]\n\n"
        f"Reviewed: {len(runner.reviewed)}\n"
        f"Skipped: {len(runner.skipped)}\n"
        f"Score: {runner.score:.0f}%",
        title="Summary",
        border_style="green",
    ))


# =============================================================================
# Commands
# =============================================================================

@app.command()
def add(
    ctx: typer.Context,
    concept: str = typer.Argument(..., help="Concept name"),
    description: str = typer.Argument("", help="Concept description"),
    difficulty: int = typer.Option(3, "--difficulty", "-d", min=1, max=5, help="Seed difficulty 1-5"),
) -> None:
    """Track a new concept."""
    services = _services(ctx)
    item = services.items.add(services.items.create_item(concept, description, difficulty))
    console.print(f"[green]Added[/green] {item.concept} [dim]({item.id})[/dim]")


@app.command("import")
def import_concepts(
    ctx: typer.Context,
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON list of {name, description}"),
) -> None:
    """Add concepts from a JSON file, skipping names already tracked."""
    with open(path, "r", encoding="utf-8") as f:
        concepts = json.load(f)

    if not isinstance(concepts, list):
        console.print("[red]Expected a JSON list of {name, description} objects[/red]")
        raise typer.Exit(1)

    services = _services(ctx)
    try:
        created = services.items.add_concepts_if_absent(concepts)
    except RecallError as e:
        console.print(f"[red]Error importing concepts: {e}[/red]")
        raise typer.Exit(1)

    console.print(
        f"[green]Imported {len(created)} new concepts[/green] "
        f"[dim]({len(concepts) - len(created)} already tracked)[/dim]"
    )


@app.command()
def due(ctx: typer.Context) -> None:
    """List items due for review."""
    services = _services(ctx)
    items = services.items.get_due()

    if not items:
        console.print("[green]Nothing due for review![/green]")
        return

    table = Table(title=f"{len(items)} due")
    table.add_column("Concept")
    table.add_column("Interval")
    table.add_column("Ease")
    table.add_column("Reps")
    table.add_column("Due since")

    for item in items:
        table.add_row(
            item.concept,
            f"{item.interval}d",
            f"{item.ease_factor:.2f}",
            str(item.repetition_count),
            _fmt_time(item.next_review),
        )

    console.print(table)


@app.command()
def review(
    ctx: typer.Context,
    max_items: Optional[int] = typer.Option(
        None,
        "--max", "-m",
        min=0,
        help="Maximum items in this session",
    ),
) -> None:
    """
    Start an interactive review session.

    Rate each card 1-4, press s to skip or q to finish early.
    """
    services = _services(ctx)

    # No session record for an empty review
    limit = services.sessions.default_size if max_items is None else max_items
    if limit == 0 or services.items.count_due() == 0:
        console.print("\n[green]Nothing due for review![/green]")
        console.print("All caught up. Check back tomorrow.")
        raise typer.Exit(0)

    session = services.sessions.create_session(max_items=limit)
    runner = ReviewRunner(services.sessions, session)
    console.print(f"\n[bold]Session: {runner.total} cards[/bold]")
    console.print("[dim]1=Again 2=Hard 3=Good 4=Easy  s=skip  q=finish[/dim]\n")

    try:
        while runner.current_item is not None:
            display_item(runner)
            choice = Prompt.ask(
                "Rating",
                choices=["1", "2", "3", "4", "s", "q"],
            )

            if choice == "q":
                runner.complete()
                break
            if choice == "s":
                runner.skip()
                continue

            try:
                updated = runner.rate(int(choice))
            except RecallError as e:
                console.print(f"[red]Error processing review: {e}[/red]")
                continue

            console.print(
                f"{RATING_LABELS[choice]}  next review in "
                f"[bold]{updated.interval}d[/bold]\n"
            )
    except KeyboardInterrupt:
        console.print("\n\n[yellow]Session interrupted.[/yellow]")
        runner.complete()

    _display_session_summary(runner)


@app.command()
def stats(ctx: typer.Context) -> None:
    """Show learning statistics."""
    services = _services(ctx)
    item_stats = services.items.get_stats()
    session_stats = services.sessions.get_stats()

    console.print("\n[bold cyan]Learning Statistics[/bold cyan]")
    console.print("=" * 40)

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("Items tracked", str(item_stats["total_items"]))
    table.add_row("Items due", str(item_stats["items_due"]))
    table.add_row("Total reviews", str(item_stats["total_reviews"]))
    table.add_row("Avg rating (recent)", f"{item_stats['avg_rating_recent']:.2f}")
    table.add_row("Retention rate", f"{item_stats['retention_rate_percent']:.1f}%")
    table.add_row("Sessions completed", str(session_stats["sessions_completed"]))
    table.add_row("Avg session score", f"{session_stats['avg_session_score']:.1f}%")

    console.print(table)


@app.command()
def sessions(
    ctx: typer.Context,
    limit: int = typer.Option(10, "--limit", "-l", help="Number of sessions to show"),
) -> None:
    """Show recent review sessions."""
    services = _services(ctx)
    history = services.sessions.get_history(limit=limit)

    if not history:
        console.print("[dim]No sessions yet.[/dim]")
        return

    table = Table()
    table.add_column("Started")
    table.add_column("Cards")
    table.add_column("Completed")
    table.add_column("Score")

    for s in history:
        table.add_row(
            _fmt_time(s.created_at),
            str(s.total_items),
            _fmt_time(s.completed_at),
            f"{s.score:.0f}%" if s.score is not None else "-",
        )

    console.print(table)


# =============================================================================
# Entry Point
# =============================================================================

def configure_logging() -> None:
    """Route loguru output to stderr (and an optional file) at the configured level."""
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level, rotation="1 MB")


def main() -> None:
    """CLI entry point."""
    configure_logging()
    app()


if __name__ == "__main__":
    main()
