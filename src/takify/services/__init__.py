"""Services module for Takify - business logic layer."""

from .projection import filter_tasks, project_tasks, sort_tasks, summarize_tasks
from .session import Session, SessionProvider
from .task_view_model import TaskViewModel, parse_deadline

__all__ = [
    "TaskViewModel",
    "parse_deadline",
    "Session",
    "SessionProvider",
    "filter_tasks",
    "sort_tasks",
    "project_tasks",
    "summarize_tasks",
]
