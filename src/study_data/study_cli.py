"""
Study Data CLI.

A Rich terminal view over the shared study store, for inspection and
maintenance outside the practice tools.

Commands:
- study-data stats       - Overall statistics
- study-data weaknesses  - Weak topics, worst first
- study-data due         - Spaced-repetition items due for review
- study-data daily       - Today's mixed review set
- study-data record      - Record a practice result batch
- study-data export      - Dump the store as JSON
- study-data import      - Replace the store from a JSON export
- study-data reset       - Discard all study data
"""
from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from config import get_settings

from .daily_review import ReviewItem, ReviewItemType
from .registry import TOPICS, topic_display
from .service import StudyDataService

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="study-data",
    help="Study Data: shared progress store for the practice tools",
    no_args_is_help=True,
)
console = Console()


# =============================================================================
# Display Helpers
# =============================================================================

def _service() -> StudyDataService:
    return StudyDataService.from_settings()


def format_percent(value: int | None) -> str:
    return "-" if value is None else f"{value}%"


def format_timestamp(timestamp_ms: int | None) -> str:
    if not timestamp_ms:
        return "never"
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M")


def colored(text: str, color: str) -> str:
    """Wrap text in a colour tag, expanding short hex codes Rich cannot parse."""
    if color.startswith("#") and len(color) == 4:
        color = "#" + "".join(c * 2 for c in color[1:])
    return f"[{color}]{escape(text)}[/{color}]"


def describe_review_item(item: ReviewItem) -> str:
    """One-line description of a daily review entry."""
    if item.type is ReviewItemType.WRONG_ANSWER_RETEST and item.wrong_answer:
        return item.wrong_answer.stem or item.wrong_answer.id
    if item.type is ReviewItemType.SPACED_REP and item.due_item:
        return f"{item.due_item.key} (box {item.due_item.box})"
    suggested = ", ".join(item.suggested_tools) or "any tool"
    return f"{item.display_name} at {item.score}% - try {suggested}"


# =============================================================================
# Commands
# =============================================================================

@app.command()
def stats() -> None:
    """Show overall statistics."""
    overall = _service().get_overall_stats()

    console.print("\n[bold cyan]Study Statistics[/bold cyan]")
    console.print("=" * 40)

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("Total attempts", str(overall.total_attempts))
    table.add_row("Accuracy", format_percent(overall.accuracy))
    table.add_row("Streak (days)", str(overall.streak))
    table.add_row("Tracked items", str(overall.exposure_count))
    table.add_row("Items due", str(overall.due_items_count))
    table.add_row("Dosage streak", f"{overall.dosage_stats.streak} (best {overall.dosage_stats.best})")
    table.add_row(
        "Wrong answers",
        f"{overall.wrong_answer_stats.total} logged, "
        f"{overall.wrong_answer_stats.due_for_retest_count} due, "
        f"{overall.wrong_answer_stats.mastered_count} mastered",
    )
    console.print(table)

    topic_table = Table(title="Topic Scores")
    topic_table.add_column("Topic")
    topic_table.add_column("Score", justify="right")
    for topic, score in overall.concept_scores.items():
        topic_table.add_row(colored(topic_display(topic), TOPICS[topic].color), format_percent(score))
    console.print(topic_table)
    console.print(f"[dim]Store: {get_settings().get_storage_path()}[/dim]")


@app.command()
def weaknesses() -> None:
    """List weak topics, worst first."""
    entries = _service().get_weaknesses()
    if not entries:
        console.print("[green]No weak topics right now.[/green]")
        return

    table = Table(title="Weak Topics")
    table.add_column("Topic")
    table.add_column("Score", justify="right")
    table.add_column("Flagged by")
    for entry in entries:
        table.add_row(
            colored(entry.display_name, entry.color),
            f"{entry.score}%",
            ", ".join(entry.flagged_by_names) or "-",
        )
    console.print(table)


@app.command()
def due(
    limit: int = typer.Option(0, "--limit", "-l", help="Maximum items (0 = all)"),
) -> None:
    """Show spaced-repetition items due for review."""
    items = _service().get_due_items(limit=limit or None)
    if not items:
        console.print("[green]Nothing due.[/green]")
        return

    table = Table(title=f"Due Items ({len(items)})")
    table.add_column("Key")
    table.add_column("Box", justify="right")
    table.add_column("Last seen")
    table.add_column("Overdue (days)", justify="right")
    for item in items:
        table.add_row(item.key, str(item.box), format_timestamp(item.last_seen_at), str(item.days_overdue))
    console.print(table)


@app.command()
def daily() -> None:
    """Show today's mixed review set."""
    items = _service().generate_daily_10()
    if not items:
        console.print("[green]Nothing to review today.[/green]")
        return

    table = Table(title="Daily Review")
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Tool")
    table.add_column("Item")
    for index, item in enumerate(items, start=1):
        table.add_row(str(index), item.type.value, item.tool or "-", describe_review_item(item))
    console.print(table)


@app.command()
def record(
    tool: str = typer.Argument(..., help="Tool identifier"),
    topic: str = typer.Argument(..., help="Topic identifier"),
    correct: int = typer.Argument(..., min=0, help="Correct answers"),
    total: int = typer.Argument(..., min=0, help="Questions attempted"),
) -> None:
    """Record a practice result batch."""
    if correct > total:
        console.print("[red]Correct answers cannot exceed the total.[/red]")
        raise typer.Exit(1)

    accuracy = _service().record_result(tool, topic, correct, total)
    console.print(f"[green]Recorded {correct}/{total}[/green] - {tool} on {topic}: {format_percent(accuracy)}")


@app.command()
def export(
    output: Optional[Path] = typer.Option(
        None,
        "--output", "-o",
        help="Write to this file instead of stdout",
    ),
) -> None:
    """Export the full store as JSON."""
    payload = _service().export_data()
    if output is None:
        typer.echo(payload)
        return

    output.write_text(payload, encoding="utf-8")
    console.print(f"[green]Exported to {output}[/green]")


@app.command("import")
def import_(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON export to load"),
) -> None:
    """Replace the store with a JSON export."""
    if not _service().import_data(source.read_text(encoding="utf-8")):
        console.print(Panel(f"[red]{source} is not a valid study-data export.[/red]", border_style="red"))
        raise typer.Exit(1)
    console.print(f"[green]Imported {source}[/green]")


@app.command()
def reset(
    confirm: bool = typer.Option(
        False,
        "--yes", "-y",
        help="Skip confirmation",
    ),
) -> None:
    """Discard all study data."""
    if not confirm and not Confirm.ask("Reset ALL study data? This cannot be undone!", default=False):
        raise typer.Exit(0)

    _service().reset_all()
    console.print("[green]All study data has been reset.[/green]")


# =============================================================================
# Entry Point
# =============================================================================

def main() -> None:
    """CLI entry point."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=get_settings().study_data_log_level.upper(),
        format="<level>{message}</level>",
    )

    app()


if __name__ == "__main__":
    main()
