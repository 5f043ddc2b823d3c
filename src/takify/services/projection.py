"""Filtering and sorting of task lists.

All functions are pure and return new lists; the input order is the
tie-breaker, since every sort here is stable.
"""

from __future__ import annotations

from collections.abc import Iterable

from takify.models import (
    FILTER_TYPES,
    PRIORITY_RANK,
    SORT_FIELDS,
    FilterType,
    SortDirection,
    SortField,
    Task,
    TaskStats,
    ValidationError,
)


def filter_tasks(tasks: Iterable[Task], filter_type: FilterType) -> list[Task]:
    """Keep the tasks matching ``filter_type``."""
    if filter_type == "all":
        return list(tasks)
    if filter_type == "pending":
        return [t for t in tasks if not t.completed]
    if filter_type == "completed":
        return [t for t in tasks if t.completed]
    if filter_type == "high-priority":
        return [t for t in tasks if t.priority == "high"]
    raise ValidationError(
        f"Unknown filter '{filter_type}'. Expected one of: {', '.join(FILTER_TYPES)}"
    )


def sort_tasks(
    tasks: Iterable[Task], sort_field: SortField, direction: SortDirection
) -> list[Task]:
    """Stable sort; ``desc`` puts the largest value first.

    For ``priority`` the largest value is ``high``. For ``deadline``, tasks
    without one always come last, in their original order, whichever the
    direction.
    """
    descending = direction == "desc"
    items = list(tasks)

    if sort_field == "priority":
        return sorted(items, key=lambda t: PRIORITY_RANK[t.priority], reverse=descending)
    if sort_field == "created_at":
        return sorted(items, key=lambda t: t.created_at, reverse=descending)
    if sort_field == "deadline":
        with_deadline = [t for t in items if t.deadline is not None]
        without_deadline = [t for t in items if t.deadline is None]
        with_deadline.sort(key=lambda t: t.deadline, reverse=descending)
        return with_deadline + without_deadline
    raise ValidationError(
        f"Unknown sort field '{sort_field}'. Expected one of: {', '.join(SORT_FIELDS)}"
    )


def project_tasks(
    tasks: Iterable[Task],
    filter_type: FilterType,
    sort_field: SortField,
    direction: SortDirection,
) -> list[Task]:
    """Filter, then sort."""
    return sort_tasks(filter_tasks(tasks, filter_type), sort_field, direction)


def summarize_tasks(tasks: Iterable[Task]) -> TaskStats:
    items = list(tasks)
    if not items:
        return TaskStats()
    completed = sum(1 for t in items if t.completed)
    return TaskStats(
        total=len(items),
        completed=completed,
        pending=len(items) - completed,
        high_priority=sum(1 for t in items if t.priority == "high"),
        average_progress=round(sum(t.progress for t in items) / len(items), 1),
    )
