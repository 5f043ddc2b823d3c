"""Output formatters for different formats."""

import json
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from rich.table import Table
from rich.text import Text

from takify.models import Task, TaskStats

from .console import get_console

console = get_console()


def format_error(message: str) -> None:
    """Format and display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def format_warning(message: str) -> None:
    """Format and display a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def format_info(message: str) -> None:
    """Format and display an info message."""
    console.print(f"[bold blue]Info:[/bold blue] {message}")


# ============================================================================
# Task rendering
# ============================================================================

CATEGORY_ICONS = {
    "work": "💼",
    "personal": "👤",
    "shopping": "🛒",
    "other": "📌",
}

PRIORITY_COLORS = {
    "high": "red",
    "medium": "yellow",
    "low": "green",
}


def get_progress_color(progress: int) -> str:
    """Get color based on progress percentage."""
    if progress >= 75:
        return "green"
    if progress >= 50:
        return "yellow"
    if progress >= 25:
        return "dark_orange"
    return "red"


def get_progress_bar(percentage: float) -> str:
    """Get a progress bar representation."""
    filled = int(percentage / 10)
    empty = 10 - filled
    return "▓" * filled + "░" * empty


def format_deadline(deadline: datetime | None) -> str:
    """Render a deadline in local time."""
    if deadline is None:
        return "-"
    return deadline.astimezone().strftime("%Y-%m-%d %H:%M")


def task_to_dict(task: Task) -> dict[str, Any]:
    return task.model_dump(mode="json", exclude={"owner_id"})


def format_tasks_table(tasks: Iterable[Task], wide: bool = False) -> None:
    """Format tasks as a Rich table."""
    tasks = list(tasks)
    if not tasks:
        console.print("[yellow]No tasks found[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("", width=1)
    table.add_column("Title")
    table.add_column("Category")
    table.add_column("Priority")
    table.add_column("Progress", no_wrap=True)
    table.add_column("Deadline", no_wrap=True)
    if wide:
        table.add_column("Created", no_wrap=True)
        table.add_column("Description")

    for task in tasks:
        title = Text(task.title)
        if task.completed:
            title.stylize("strike dim")
        color = get_progress_color(task.progress)
        row = [
            task.id if wide else task.id[:8],
            "✓" if task.completed else "○",
            title,
            f"{CATEGORY_ICONS.get(task.category, '📌')} {task.category}",
            Text(task.priority, style=PRIORITY_COLORS[task.priority]),
            Text(f"{get_progress_bar(task.progress)} {task.progress}%", style=color),
            format_deadline(task.deadline),
        ]
        if wide:
            row += [format_deadline(task.created_at), task.description or "-"]
        table.add_row(*row)

    console.print(table)


def format_stats(stats: TaskStats) -> None:
    console.print(
        f"[bold]{stats.total}[/bold] tasks · "
        f"[green]{stats.completed} completed[/green] · "
        f"[yellow]{stats.pending} pending[/yellow] · "
        f"[red]{stats.high_priority} high priority[/red] · "
        f"avg progress {stats.average_progress:.0f}%"
    )


def format_tasks(tasks: Iterable[Task], output_format: str = "pretty") -> None:
    """Format and display tasks based on format."""
    tasks = list(tasks)
    if output_format == "json":
        print(json.dumps([task_to_dict(t) for t in tasks], indent=2, default=str))
    elif output_format in ("table", "wide"):
        format_tasks_table(tasks, wide=output_format == "wide")
    else:
        format_tasks_table(tasks)
