"""Task commands - list, add, toggle, progress, delete."""

import typer

from takify.models import CATEGORIES, PRIORITIES, TaskDraft, ValidationError
from takify.services.app_context import get_app_context
from takify.services.task_view_model import TaskViewModel
from takify.utils.typer_helpers import SuggestingGroup
from takify.utils.ui.console import get_console
from takify.utils.ui.formatters import format_stats, format_success, format_tasks

from .decorators import command_wrapper

app = typer.Typer(cls=SuggestingGroup, help="Task commands")
console = get_console()


def resolve_task_id(vm: TaskViewModel, ref: str) -> str:
    """Resolve a full task id or a unique id prefix."""
    tasks = vm.tasks
    if ref in tasks:
        return ref
    matches = [task_id for task_id in tasks if task_id.startswith(ref)]
    if not matches:
        raise ValidationError(f"No task matches '{ref}'")
    if len(matches) > 1:
        raise ValidationError(f"'{ref}' is ambiguous: matches {len(matches)} tasks")
    return matches[0]


def _ready_timeout() -> float:
    return float(get_app_context().config.api.timeout)


@app.command("list")
@command_wrapper
async def list_tasks(
    filter_type: str | None = typer.Option(
        None, "--filter", "-f", help="all, pending, completed or high-priority"
    ),
    sort: str | None = typer.Option(
        None, "--sort", "-s", help="priority, deadline or created_at"
    ),
    direction: str | None = typer.Option(None, "--direction", "-d", help="asc or desc"),
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
    json_opt: bool = typer.Option(
        False, "--json", help="Output as JSON (alias for --output json)"
    ),
) -> None:
    """List tasks."""
    if json_opt:
        output = "json"

    async with get_app_context().view_model(ready_timeout=_ready_timeout()) as vm:
        if filter_type:
            vm.set_filter(filter_type)
        if sort and sort != vm.sort_field:
            vm.set_sort(sort)
        if direction:
            vm.set_sort_direction(direction)

        format_tasks(vm.projection(), output)
        if output == "pretty":
            format_stats(vm.stats())


@app.command("add")
@command_wrapper
async def add_task(
    title: str = typer.Argument(..., help="Task title"),
    description: str = typer.Option("", "--description", "-D", help="Task description"),
    category: str = typer.Option(
        "personal", "--category", "-c", help=", ".join(CATEGORIES)
    ),
    priority: str = typer.Option("medium", "--priority", "-p", help=", ".join(PRIORITIES)),
    deadline: str = typer.Option(
        "", "--deadline", help="Deadline as ISO date/time, e.g. 2025-06-01T17:00"
    ),
) -> None:
    """Add a task."""
    if category not in CATEGORIES:
        raise ValidationError(f"Unknown category '{category}'")
    if priority not in PRIORITIES:
        raise ValidationError(f"Unknown priority '{priority}'")

    draft = TaskDraft(
        title=title,
        description=description,
        category=category,
        priority=priority,
        deadline=deadline,
    )
    async with get_app_context().view_model(ready_timeout=_ready_timeout()) as vm:
        task_id = await vm.add(draft)
    format_success(f"Task added: {task_id}")


@app.command("toggle")
@command_wrapper
async def toggle_task(
    task_id: str = typer.Argument(..., help="Task ID or unique prefix"),
) -> None:
    """Mark a task completed, or reopen a completed one."""
    async with get_app_context().view_model(ready_timeout=_ready_timeout()) as vm:
        resolved = resolve_task_id(vm, task_id)
        was_completed = vm.tasks[resolved].completed
        await vm.toggle_completion(resolved)
    format_success(f"Task {'reopened' if was_completed else 'completed'}: {resolved}")


@app.command("progress")
@command_wrapper
async def set_progress(
    task_id: str = typer.Argument(..., help="Task ID or unique prefix"),
    value: int = typer.Argument(..., help="Progress from 0 to 100"),
) -> None:
    """Set a task's progress. 100 marks it completed."""
    async with get_app_context().view_model(ready_timeout=_ready_timeout()) as vm:
        resolved = resolve_task_id(vm, task_id)
        await vm.set_progress(resolved, value)
    format_success(f"Progress of {resolved} set to {value}%")


@app.command("delete")
@command_wrapper
async def delete_task(
    task_id: str = typer.Argument(..., help="Task ID or unique prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Delete a task."""
    async with get_app_context().view_model(ready_timeout=_ready_timeout()) as vm:
        resolved = resolve_task_id(vm, task_id)
        title = vm.tasks[resolved].title
        if not yes and not typer.confirm(f"Delete task '{title}'?"):
            console.print("[yellow]Cancelled[/yellow]")
            return
        await vm.remove(resolved)
    format_success(f"Task deleted: {resolved}")
