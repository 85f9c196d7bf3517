"""
Word Castle: terminal vocabulary trainer.

A Rich terminal interface for learning word packs and reviewing them
on a spaced-repetition ladder.

Commands:
- wordcastle learn      - Learn words from a category
- wordcastle review     - Review the words that are due
- wordcastle due        - List due words
- wordcastle stats      - Show progress and today's goal
- wordcastle category   - List or select categories
- wordcastle reward     - Add stars earned elsewhere
- wordcastle mistakes   - Show the wrong-answer log
- wordcastle reset      - Clear progress (backup first)
- wordcastle restore    - Restore progress from a backup
"""
from __future__ import annotations

import sys
from datetime import timedelta
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.prompt import Confirm, Prompt
from rich.table import Table

from .break_reminder import BreakReminder
from .catalog import Catalog, CatalogError, Word
from .config import Settings, get_settings
from .ladder import format_duration
from .models import LearnerStats
from .progress import review_reward
from .scheduler import build_review_queue, overdue_by
from .session import LearnerSession
from .snapshot import to_epoch_ms
from .state_store import ProgressStore

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="wordcastle",
    help="Word Castle: vocabulary trainer with spaced review",
    no_args_is_help=True,
)
console = Console()


def _open_store(settings: Settings) -> ProgressStore:
    return ProgressStore(
        settings.state_db_path,
        settings.storage_key,
        daily_goal=settings.daily_goal,
        initial_stars=settings.initial_stars,
        default_category=settings.default_category,
    )


def _open_session(settings: Settings) -> LearnerSession:
    session = LearnerSession(_open_store(settings), ladder=settings.ladder)
    if not session.last_save_ok:
        console.print("[yellow]Warning: progress could not be saved.[/yellow]")
    return session


def _load_catalog(settings: Settings) -> Catalog:
    try:
        return Catalog.load(settings.catalog_path)
    except CatalogError as e:
        console.print(f"\n[red]{e}[/red]")
        raise typer.Exit(1)


# =============================================================================
# Display Helpers
# =============================================================================


def display_word(word: Word, index: int, total: int, reveal: bool = True) -> None:
    """Display a word card."""
    header = f"Word {index}/{total}  |  {word.category}"
    content = f"[bold]{word.native_text}[/bold]"
    if reveal:
        content += f"\n\n[cyan]{word.target_text}[/cyan]"

    console.print(Panel(
        content,
        title=header,
        title_align="left",
        border_style="magenta",
        padding=(1, 2),
    ))


def display_goal(stats: LearnerStats) -> None:
    """Show today's goal as a progress bar."""
    color = "yellow" if stats.goal_reached else "magenta"
    console.print(
        f"\n[bold]Today:[/bold] {stats.items_learned_today}/{stats.daily_goal} words"
        + ("  [yellow]Goal reached![/yellow]" if stats.goal_reached else "")
    )
    console.print(ProgressBar(total=1.0, completed=stats.daily_progress, width=40, complete_style=color))


def _warn_if_unsaved(session: LearnerSession) -> None:
    if not session.last_save_ok:
        console.print("[yellow]Warning: the last change could not be saved.[/yellow]")


def _take_break(reminder: BreakReminder, session: LearnerSession) -> None:
    console.print()
    console.print(Panel(
        "[bold]Time to rest your eyes![/bold]\n\n"
        "Look out of the window for a while, or tell someone about the words you just learned.",
        title="[bold]Break[/bold]",
        border_style="yellow",
    ))
    Prompt.ask("[dim]Press Enter when you're back[/dim]", default="", show_default=False)
    reminder.acknowledge(session.clock())


# =============================================================================
# Commands
# =============================================================================


@app.command()
def learn(
    category: Optional[str] = typer.Option(
        None,
        "--category", "-c",
        help="Category to learn (defaults to the current one)",
    ),
    limit: int = typer.Option(
        0,
        "--limit", "-l",
        min=0,
        help="Stop after this many words (0 = whole category)",
    ),
) -> None:
    """
    Learn the words of a category.

    Every word you confirm is added to your review schedule.
    """
    settings = get_settings()
    catalog = _load_catalog(settings)
    session = _open_session(settings)

    name = category or session.state.current_category
    words = catalog.words(name)
    if not words:
        console.print(f"\n[red]Unknown or empty category: {name}[/red]")
        raise typer.Exit(1)

    session.select_category(name)
    if limit:
        words = words[:limit]

    console.print(f"\n[bold magenta]{name}[/bold magenta] - {len(words)} words")
    reminder = BreakReminder(session.clock(), timedelta(minutes=settings.break_reminder_minutes))

    try:
        for i, word in enumerate(words, 1):
            display_word(word, i, len(words))
            if Confirm.ask("Got it?", default=True):
                session.learned(word.id)
                _warn_if_unsaved(session)
            if reminder.is_due(session.clock()):
                _take_break(reminder, session)
    except KeyboardInterrupt:
        console.print("\n\n[yellow]Lesson interrupted.[/yellow]")

    display_goal(session.state.stats)


@app.command()
def review() -> None:
    """
    Review the words that are due.

    Finishing the whole queue earns stars for every card.
    """
    settings = get_settings()
    catalog = _load_catalog(settings)
    session = _open_session(settings)

    queue = build_review_queue(session.due_items(), catalog)
    if queue.total_cards == 0:
        console.print("\n[green]Nothing due for review![/green]")
        console.print("All caught up. Come back later.")
        raise typer.Exit(0)

    console.print(f"\n[bold]Review: {queue.total_cards} words due[/bold]")
    reminder = BreakReminder(session.clock(), timedelta(minutes=settings.break_reminder_minutes))
    completed = 0
    remembered_count = 0

    try:
        for i, word in enumerate(queue.words, 1):
            display_word(word, i, queue.total_cards, reveal=False)
            Prompt.ask("[dim]Press Enter to reveal[/dim]", default="", show_default=False)
            console.print(f"  [cyan]{word.target_text}[/cyan]")

            remembered = Confirm.ask("Did you remember it?", default=True)
            before = session.state.ledger[word.id]
            session.reviewed(word.id, remembered)
            if remembered:
                remembered_count += 1
                console.print("[green]Well done![/green]")
            else:
                session.log_wrong_word({
                    "wordId": word.id,
                    "lastReviewTime": to_epoch_ms(before.last_review_time),
                    "stage": before.stage,
                })
                console.print("[red]Back to the start for this one.[/red]")
            _warn_if_unsaved(session)
            completed += 1

            if reminder.is_due(session.clock()):
                _take_break(reminder, session)
    except KeyboardInterrupt:
        console.print("\n\n[yellow]Review interrupted.[/yellow]")

    if completed == queue.total_cards:
        stars = review_reward(queue.total_cards, settings.review_reward_per_item)
        session.award_stars(stars)
        console.print(f"\n[yellow]+{stars} stars[/yellow]")

    console.print(Panel(
        f"[bold]Review complete![/bold]\n\n"
        f"Cards reviewed: {completed}\n"
        f"Remembered: {remembered_count}\n"
        f"Stars: {session.state.stats.stars}",
        title="Summary",
        border_style="green",
    ))


@app.command()
def due(
    limit: int = typer.Option(20, "--limit", "-l", min=1, help="Number of words to list"),
) -> None:
    """List the words due for review, most overdue first."""
    settings = get_settings()
    catalog = _load_catalog(settings)
    session = _open_session(settings)

    now = session.clock()
    entries = session.due_items(now)
    if not entries:
        console.print("\n[green]Nothing due for review![/green]")
        return

    table = Table(title=f"Due words ({len(entries)})")
    table.add_column("ID")
    table.add_column("Word")
    table.add_column("Stage", justify="right")
    table.add_column("Overdue", justify="right")

    for entry in entries[:limit]:
        word = catalog.get(entry.item_id)
        text = f"{word.native_text} / {word.target_text}" if word else "[dim]?[/dim]"
        lateness = overdue_by(entry, now, session.ladder)
        table.add_row(entry.item_id, text, str(entry.stage), format_duration(lateness))

    console.print(table)


@app.command()
def stats() -> None:
    """Show learning statistics and progress."""
    settings = get_settings()
    session = _open_session(settings)
    state = session.state
    s = state.stats

    console.print("\n[bold cyan]Learning Statistics[/bold cyan]")
    console.print("=" * 40)

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("Stars", str(s.stars))
    table.add_row("Words mastered", str(s.items_mastered))
    table.add_row("Words tracked", str(len(state.ledger)))
    table.add_row("Due now", str(len(session.due_items())))
    table.add_row("Graduated", str(session.count_graduated()))
    table.add_row("Streak (days)", str(s.streak_days))
    table.add_row("Study minutes", str(s.study_minutes))
    table.add_row("Current category", state.current_category or "-")

    console.print(table)
    display_goal(s)


@app.command()
def category(
    name: Optional[str] = typer.Argument(None, help="Category to select"),
) -> None:
    """List categories, or select the current one."""
    settings = get_settings()
    catalog = _load_catalog(settings)
    session = _open_session(settings)

    if name is None:
        current = session.state.current_category
        for cat in catalog.categories:
            marker = "[magenta]*[/magenta]" if cat == current else " "
            console.print(f"{marker} {cat} [dim]({len(catalog.words(cat))} words)[/dim]")
        return

    if name not in catalog.categories:
        console.print(f"[red]Unknown category: {name}[/red]")
        raise typer.Exit(1)

    session.select_category(name)
    console.print(f"[green]Current category: {name}[/green]")


@app.command()
def reward(
    amount: int = typer.Argument(..., min=0, help="Stars to add"),
) -> None:
    """Add stars earned in games or tests."""
    session = _open_session(get_settings())
    session.award_stars(amount)
    _warn_if_unsaved(session)
    console.print(f"[yellow]+{amount} stars[/yellow] (total {session.state.stats.stars})")


@app.command()
def mistakes(
    limit: int = typer.Option(20, "--limit", "-l", min=1, help="Number of entries to show"),
) -> None:
    """Show the most recent entries of the wrong-answer log."""
    settings = get_settings()
    catalog = _load_catalog(settings)
    session = _open_session(settings)

    wrong = session.state.wrong_words
    if not wrong:
        console.print("[green]No mistakes recorded.[/green]")
        return

    table = Table(title=f"Mistakes ({len(wrong)})")
    table.add_column("ID")
    table.add_column("Word")
    for record in list(reversed(wrong))[:limit]:
        item_id = str(record.get("wordId", record.get("id", "?")))
        word = catalog.get(item_id)
        table.add_row(item_id, f"{word.native_text} / {word.target_text}" if word else "[dim]?[/dim]")
    console.print(table)


@app.command()
def reset(
    confirm: bool = typer.Option(
        False,
        "--yes", "-y",
        help="Skip confirmation",
    ),
) -> None:
    """Clear all progress (a backup is written first)."""
    if not confirm and not Confirm.ask("Reset ALL progress?", default=False):
        raise typer.Exit(0)

    store = _open_store(get_settings())
    backup = store.reset()
    store.close()

    if backup is None:
        console.print("[dim]Nothing to reset.[/dim]")
    else:
        console.print(f"[green]Progress reset.[/green] Backup: {backup}")


@app.command()
def restore(
    backup_file: Optional[Path] = typer.Argument(None, help="Backup file (defaults to the newest)"),
) -> None:
    """Restore progress from a backup."""
    store = _open_store(get_settings())
    used = store.restore(backup_file)
    store.close()

    if used is None:
        console.print("[red]No backup found.[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Restored progress from {used.name}[/green]")


# =============================================================================
# Entry Point
# =============================================================================


def configure_logging(settings: Settings) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )
    if settings.log_file:
        logger.add(settings.log_file, level="DEBUG", rotation="1 MB")


def main() -> None:
    """CLI entry point."""
    configure_logging(get_settings())
    app()


if __name__ == "__main__":
    main()
