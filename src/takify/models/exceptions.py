"""Custom exceptions for Takify."""

from __future__ import annotations


class TakifyError(Exception):
    """Base exception for all Takify errors."""


class ValidationError(TakifyError, ValueError):
    """Raised when user input is rejected before reaching the store."""


class StoreError(TakifyError):
    """Raised when the remote store fails to create, update or delete a task."""

    def __init__(self, message: str, task_id: str | None = None):
        super().__init__(message)
        self.task_id = task_id


class SubscriptionError(TakifyError):
    """Raised when the live task feed is interrupted."""


class SessionRequiredError(TakifyError):
    """Raised when a store operation is attempted without an attached owner."""


class AuthError(TakifyError):
    """Raised when the backend rejects a login or signup."""
