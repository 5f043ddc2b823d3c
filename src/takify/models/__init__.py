"""Takify domain models.

Pydantic models for task records and the payloads exchanged with the
remote store, plus the application's exception hierarchy.
"""

from .config_models import AppConfig
from .core import (
    CATEGORIES,
    FILTER_TYPES,
    PRIORITIES,
    PRIORITY_RANK,
    SORT_DIRECTIONS,
    SORT_FIELDS,
    Category,
    FilterType,
    Priority,
    SortDirection,
    SortField,
    Task,
    TaskCreate,
    TaskDraft,
    TaskStats,
    TaskUpdate,
)
from .exceptions import (
    AuthError,
    SessionRequiredError,
    StoreError,
    SubscriptionError,
    TakifyError,
    ValidationError,
)

__all__ = [
    # Task models
    "Task",
    "TaskCreate",
    "TaskDraft",
    "TaskUpdate",
    "TaskStats",
    # Enumerations
    "Category",
    "Priority",
    "SortField",
    "SortDirection",
    "FilterType",
    "CATEGORIES",
    "PRIORITIES",
    "SORT_FIELDS",
    "SORT_DIRECTIONS",
    "FILTER_TYPES",
    "PRIORITY_RANK",
    # Config models
    "AppConfig",
    # Errors
    "TakifyError",
    "ValidationError",
    "StoreError",
    "SubscriptionError",
    "SessionRequiredError",
    "AuthError",
]
