"""Repository abstraction layer for Takify.

Defines the contract the task view-model needs from a remote task store,
following the Ports & Adapters pattern. Concrete stores live in
``takify.adapters``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from takify.models import Task, TaskCreate, TaskUpdate


class TaskStore(ABC):
    """Abstract base class for a remote, owner-scoped task store.

    All operations assume an authenticated session. Invoking them without
    one is a caller error.
    """

    @abstractmethod
    def subscribe(self, owner_id: str) -> AsyncIterator[list[Task]]:
        """Open a live feed of the owner's tasks.

        Each item is the full current snapshot of the owner's records. The
        feed is infinite until closed (``aclose()``) and delivers a fresh
        snapshot after every create, update or delete affecting the owner.
        Calling ``subscribe`` again starts an independent feed.

        Args:
            owner_id: Identifier of the authenticated user

        Returns:
            Async iterator of task snapshots

        Raises:
            SubscriptionError: If the feed is interrupted for good
        """
        raise NotImplementedError("TaskStore.subscribe() must be implemented by adapter")

    @abstractmethod
    async def create(self, record: TaskCreate) -> str:
        """Store a new task.

        Args:
            record: The task without an id

        Returns:
            The new unique task id

        Raises:
            StoreError: On transport or permission failure
        """
        raise NotImplementedError("TaskStore.create() must be implemented by adapter")

    @abstractmethod
    async def update(self, task_id: str, updates: TaskUpdate) -> None:
        """Merge the set fields of ``updates`` into an existing task.

        Args:
            task_id: Unique identifier for the task
            updates: Fields to merge

        Raises:
            StoreError: If the task does not exist or is not owned by the caller
        """
        raise NotImplementedError("TaskStore.update() must be implemented by adapter")

    @abstractmethod
    async def delete(self, task_id: str) -> None:
        """Delete a task. Deleting an unknown id succeeds without effect.

        Args:
            task_id: Unique identifier for the task

        Raises:
            StoreError: On transport or permission failure
        """
        raise NotImplementedError("TaskStore.delete() must be implemented by adapter")
