"""
Recall: command-line front end for the reminder scheduler.

A Rich terminal interface over the scheduling engine.

Commands:
- recall add          - Add a reminder (with night-window check)
- recall card         - Add a flashcard
- recall check        - Preview night-window conflicts without adding
- recall list         - List items
- recall show         - Show one item's timeline and progress
- recall review       - Record a flashcard review
- recall recategorize - Override an item's category
- recall reclassify   - Re-run automatic classification
- recall delete       - Delete items
- recall pending      - List pending alerts
- recall cancel-all   - Drop every pending alert
- recall remind       - Deliver alerts that are due
- recall study        - Review flashcards interactively
"""
from __future__ import annotations

import sys
from datetime import datetime
from typing import List, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from recall.config import get_settings
from recall.constants import Category, ItemKind, ReviewDifficulty
from recall.factory import build_orchestrator
from recall.models import TrackableItem
from recall.notifications import SQLiteNotificationSink
from recall.scheduling import NightConflict
from recall.scheduling.orchestrator import SchedulingOrchestrator


# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="recall",
    help="Recall: forgetting-curve reminders",
    no_args_is_help=True,
)
console = Console()


# =============================================================================
# Styling
# =============================================================================

STYLES = {
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "ok": "bold green",
    "dim": "dim",
    "category": {
        Category.SHORT: "green",
        Category.MEDIUM: "yellow",
        Category.LONG: "magenta",
    },
}

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def style_category(item_or_category: TrackableItem | Category) -> str:
    """Get styled category string."""
    if isinstance(item_or_category, TrackableItem):
        category = item_or_category.category
        suffix = "*" if item_or_category.category_is_manual_override else ""
    else:
        category, suffix = item_or_category, ""
    color = STYLES["category"].get(category, "white")
    return f"[{color}]{category.value}{suffix}[/{color}]"


def fmt(moment: datetime | None) -> str:
    return moment.strftime(TIME_FORMAT) if moment else "-"


# =============================================================================
# Display Helpers
# =============================================================================

def conflict_message(conflict: NightConflict) -> str:
    """Compose the postponement prompt from a conflict."""
    count = conflict.conflict_count
    noun = "reminder" if count == 1 else "reminders"
    return (
        f"It is currently nighttime in {conflict.region}. "
        f"Learning tends to stick better after a good night's sleep. "
        f"Postpone {count} {noun} until the morning?"
    )


def display_conflict(conflict: NightConflict) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Scheduled")
    table.add_column("Postponed to")
    for original, postponed in zip(conflict.conflicting_dates, conflict.postponed_dates):
        table.add_row(fmt(original), fmt(postponed))

    console.print(Panel(
        conflict_message(conflict),
        title="[bold]Night-time reminders[/bold]",
        border_style="yellow",
    ))
    console.print(table)


def display_timeline(engine: SchedulingOrchestrator, item: TrackableItem) -> None:
    now = engine.clock()
    table = Table(title=f"Timeline for {item.id[:8]}")
    table.add_column("#", justify="right")
    table.add_column("When")
    table.add_column("Status")
    for index, moment in enumerate(engine.reminder_timeline(item), start=1):
        status = "[dim]past[/dim]" if moment <= now else "[cyan]upcoming[/cyan]"
        table.add_row(str(index), fmt(moment), status)
    console.print(table)


def resolve_item(engine: SchedulingOrchestrator, item_ref: str) -> TrackableItem:
    """Find an item by full id or unique id prefix, or exit with an error."""
    exact = engine.get(item_ref)
    if exact is not None:
        return exact

    matches = [item for item in engine.items if item.id.startswith(item_ref)]
    if len(matches) == 1:
        return matches[0]

    reason = "ambiguous id prefix" if matches else "no such item"
    console.print(f"[red]{reason}: {item_ref}[/red]")
    raise typer.Exit(1)


def choose_conflict(
    engine: SchedulingOrchestrator,
    content: str,
    category: Optional[Category],
    answer: Optional[str],
    postpone: Optional[bool],
) -> Optional[NightConflict]:
    """Run the pre-flight check and decide whether to install the postponed schedule."""
    conflict = engine.evaluate_conflict(content, category, answer=answer)
    if conflict is None:
        return None

    display_conflict(conflict)
    if postpone is None:
        postpone = Confirm.ask("Postpone?", default=True)
    return conflict if postpone else None


# =============================================================================
# Commands
# =============================================================================

@app.command()
def add(
    content: str = typer.Argument(..., help="Text to remember"),
    category: Optional[Category] = typer.Option(
        None,
        "--category", "-c",
        help="Override automatic classification",
    ),
    postpone: Optional[bool] = typer.Option(
        None,
        "--postpone/--keep-night",
        help="Answer the night-window prompt up front",
    ),
) -> None:
    """Add a reminder scheduled along the forgetting curve."""
    if not content.strip():
        console.print("[red]Content is empty.[/red]")
        raise typer.Exit(1)

    engine = build_orchestrator()
    conflict = choose_conflict(engine, content, category, None, postpone)
    item = engine.add_item(content, manual_category=category, resolved_conflict=conflict)

    console.print(f"[green]Added reminder {item.id}[/green] ({style_category(item)})")
    display_timeline(engine, item)


@app.command()
def card(
    front: str = typer.Argument(..., help="Question side"),
    back: str = typer.Argument(..., help="Answer side"),
    category: Optional[Category] = typer.Option(None, "--category", "-c", help="Override classification"),
    postpone: Optional[bool] = typer.Option(
        None,
        "--postpone/--keep-night",
        help="Answer the night-window prompt up front",
    ),
) -> None:
    """Add a flashcard; it is due for study right away."""
    if not front.strip():
        console.print("[red]Front is empty.[/red]")
        raise typer.Exit(1)

    engine = build_orchestrator()
    conflict = choose_conflict(engine, front, category, back, postpone)
    item = engine.add_flashcard(front, back, manual_category=category, resolved_conflict=conflict)

    console.print(f"[green]Added flashcard {item.id}[/green] ({style_category(item)})")
    display_timeline(engine, item)


@app.command()
def check(
    content: str = typer.Argument(..., help="Text to check"),
    category: Optional[Category] = typer.Option(None, "--category", "-c", help="Category to assume"),
    answer: Optional[str] = typer.Option(None, "--answer", "-a", help="Flashcard back"),
) -> None:
    """Show which reminders would land in the night window if added now."""
    engine = build_orchestrator(load=False)
    conflict = engine.evaluate_conflict(content, category, answer=answer)
    if conflict is None:
        console.print("[green]No night-time reminders.[/green]")
        return
    display_conflict(conflict)


@app.command("list")
def list_items(
    kind: Optional[ItemKind] = typer.Option(None, "--kind", "-k", help="Only this kind"),
    category: Optional[Category] = typer.Option(None, "--category", "-c", help="Only this category"),
    due: bool = typer.Option(False, "--due", help="Only flashcards due today"),
) -> None:
    """List items, newest first."""
    engine = build_orchestrator()
    items = engine.due_today() if due else list(engine.items)
    if kind:
        items = [i for i in items if i.kind is kind]
    if category:
        items = [i for i in items if i.category is category]

    if not items:
        console.print("[dim]No items.[/dim]")
        return

    table = Table()
    table.add_column("ID")
    table.add_column("Kind")
    table.add_column("Category")
    table.add_column("Content")
    table.add_column("Next")
    table.add_column("x", justify="right")

    for item in items:
        table.add_row(
            item.id[:8],
            item.kind.value,
            style_category(item),
            item.content if len(item.content) <= 40 else item.content[:37] + "...",
            fmt(engine.next_upcoming(item)),
            f"{item.progress.current_interval_multiplier:.2f}" if item.is_reviewable else "",
        )
    console.print(table)


@app.command()
def show(item_ref: str = typer.Argument(..., help="Item id or prefix")) -> None:
    """Show an item's timeline and review progress."""
    engine = build_orchestrator()
    item = resolve_item(engine, item_ref)

    body = item.content if item.answer is None else f"{item.content}\n\n[dim]{item.answer}[/dim]"
    console.print(Panel(body, title=f"{item.kind.value} {item.id}", border_style="cyan"))
    console.print(f"Created: {fmt(item.created_at)}   Category: {style_category(item)}")

    if item.is_reviewable:
        p = item.progress
        console.print(
            f"Reviews: {p.total_reviews} (easy {p.easy_count}, good {p.good_count}, hard {p.hard_count})"
            f"   Interval multiplier: {p.current_interval_multiplier:.2f}x"
        )
    display_timeline(engine, item)


@app.command()
def review(
    item_ref: str = typer.Argument(..., help="Flashcard id or prefix"),
    difficulty: ReviewDifficulty = typer.Argument(..., help="How hard recall felt"),
) -> None:
    """Record a review and reschedule with the adjusted interval."""
    engine = build_orchestrator()
    item = resolve_item(engine, item_ref)
    updated = engine.record_review(item.id, difficulty)
    if updated is None:
        console.print(f"[red]{item.id} is not a flashcard.[/red]")
        raise typer.Exit(1)

    console.print(
        f"[green]Recorded {difficulty.value}.[/green] "
        f"Multiplier {updated.progress.current_interval_multiplier:.2f}x, "
        f"next reminder {fmt(engine.next_upcoming(updated))}"
    )


@app.command()
def recategorize(
    item_ref: str = typer.Argument(..., help="Item id or prefix"),
    category: Category = typer.Argument(..., help="New category"),
) -> None:
    """Override an item's category (sticks through reclassification)."""
    engine = build_orchestrator()
    item = resolve_item(engine, item_ref)
    updated = engine.update_category(item.id, category)
    console.print(f"[green]{updated.id[:8]} is now {style_category(updated)}[/green]")


@app.command()
def reclassify(item_ref: str = typer.Argument(..., help="Item id or prefix")) -> None:
    """Re-run automatic classification on an item."""
    engine = build_orchestrator()
    item = resolve_item(engine, item_ref)
    updated = engine.reclassify(item.id)
    if item.category_is_manual_override:
        console.print("[yellow]Category was set manually; left unchanged.[/yellow]")
    elif updated.category is item.category:
        console.print(f"Category unchanged ({style_category(updated)})")
    else:
        console.print(f"[green]{style_category(item)} -> {style_category(updated)}[/green]")


@app.command()
def delete(
    item_refs: List[str] = typer.Argument(..., help="Item ids or prefixes"),
    confirm: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete items and cancel their reminders."""
    engine = build_orchestrator()
    items = [resolve_item(engine, ref) for ref in item_refs]

    if not confirm and not Confirm.ask(f"Delete {len(items)} item(s)?", default=False):
        raise typer.Exit(0)

    removed = engine.delete_items(item.id for item in items)
    console.print(f"[green]Deleted {len(removed)} item(s).[/green]")


@app.command()
def pending() -> None:
    """List pending alerts (diagnostics)."""
    engine = build_orchestrator(load=False)
    alerts = engine.pending_notifications()
    if not alerts:
        console.print("[dim]No pending notifications.[/dim]")
        return

    table = Table(title=f"Pending notifications ({len(alerts)})")
    table.add_column("Key")
    table.add_column("Fires at")
    table.add_column("Body")
    for alert in alerts:
        table.add_row(alert.key, fmt(alert.fire_at), alert.body)
    console.print(table)


@app.command("cancel-all")
def cancel_all(
    confirm: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Drop every pending alert (items are kept)."""
    if not confirm and not Confirm.ask("Cancel ALL pending notifications?", default=False):
        raise typer.Exit(0)

    engine = build_orchestrator(load=False)
    engine.cancel_all_pending()
    console.print("[green]All pending notifications cancelled.[/green]")


@app.command()
def remind() -> None:
    """Print and clear alerts whose time has come."""
    engine = build_orchestrator(load=False)
    sink = engine.sink
    if not isinstance(sink, SQLiteNotificationSink):
        console.print("[red]Configured sink cannot deliver alerts.[/red]")
        raise typer.Exit(1)

    due = sink.pop_due(engine.clock())
    if not due:
        console.print("[dim]Nothing to recall right now.[/dim]")
        return
    for alert in due:
        console.print(Panel(alert.body, title=f"Time to recall! ({fmt(alert.fire_at)})", border_style="cyan"))


@app.command()
def study() -> None:
    """Review every flashcard, one at a time."""
    engine = build_orchestrator()
    queue = engine.study_queue()
    if not queue:
        console.print("[dim]No flashcards yet. Add one with 'recall card'.[/dim]")
        return

    reviewed = 0
    for index, item in enumerate(queue, start=1):
        console.print(Panel(item.content, title=f"Card {index}/{len(queue)}", border_style="cyan"))
        Prompt.ask("[dim]Press Enter to reveal[/dim]", default="", show_default=False)
        console.print(Panel(item.answer or "", border_style="green"))

        choice = Prompt.ask(
            "How was it?",
            choices=[d.value for d in ReviewDifficulty] + ["skip", "quit"],
            default=ReviewDifficulty.GOOD.value,
        )
        if choice == "quit":
            break
        if choice == "skip":
            continue
        engine.record_review(item.id, ReviewDifficulty(choice))
        reviewed += 1

    console.print(f"\n[bold green]Session complete![/bold green] Reviewed {reviewed} card(s).")


# =============================================================================
# Entry Point
# =============================================================================

def main() -> None:
    """CLI entry point."""
    settings = get_settings()

    # Configure logging
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format="<level>{message}</level>",
    )
    if settings.log_file:
        logger.add(
            settings.log_file,
            level=settings.log_level,
            rotation="1 MB",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
        )

    app()


if __name__ == "__main__":
    main()
