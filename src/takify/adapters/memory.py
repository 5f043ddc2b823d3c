"""In-process task store with a live feed.

Keeps task documents in a dict and pushes a full snapshot to every feed of
the affected owner after each write. Useful for embedding the view-model
without a backend and as the reference store in tests.
"""

from __future__ import annotations

import asyncio
import uuid
from collections import defaultdict
from collections.abc import AsyncIterator

from takify.models import StoreError, Task, TaskCreate, TaskUpdate
from takify.repositories.repository import TaskStore
from takify.utils.logger import get_logger


class InMemoryTaskStore(TaskStore):
    """Task store backed by a dict of ``Task`` records."""

    def __init__(self, tasks: list[Task] | None = None):
        self._records: dict[str, Task] = {t.id: t for t in tasks or []}
        self._feeds: dict[str, set[asyncio.Queue[list[Task]]]] = defaultdict(set)

    def snapshot(self, owner_id: str) -> list[Task]:
        """Return the owner's current tasks in insertion order."""
        return [t for t in self._records.values() if t.owner_id == owner_id]

    def _publish(self, owner_id: str) -> None:
        snapshot = self.snapshot(owner_id)
        for queue in self._feeds.get(owner_id, ()):
            queue.put_nowait(snapshot)

    async def subscribe(self, owner_id: str) -> AsyncIterator[list[Task]]:
        queue: asyncio.Queue[list[Task]] = asyncio.Queue()
        self._feeds[owner_id].add(queue)
        get_logger().debug("memory store: feed opened for %s", owner_id)
        queue.put_nowait(self.snapshot(owner_id))
        try:
            while True:
                yield await queue.get()
        finally:
            self._feeds[owner_id].discard(queue)
            if not self._feeds[owner_id]:
                del self._feeds[owner_id]
            get_logger().debug("memory store: feed closed for %s", owner_id)

    async def create(self, record: TaskCreate) -> str:
        task_id = uuid.uuid4().hex
        self._records[task_id] = Task(id=task_id, **record.model_dump())
        self._publish(record.owner_id)
        return task_id

    async def update(self, task_id: str, updates: TaskUpdate) -> None:
        existing = self._records.get(task_id)
        if existing is None:
            raise StoreError(f"Task '{task_id}' not found", task_id=task_id)
        self._records[task_id] = existing.model_copy(update=updates.to_fields())
        self._publish(existing.owner_id)

    async def delete(self, task_id: str) -> None:
        existing = self._records.pop(task_id, None)
        if existing is not None:
            self._publish(existing.owner_id)
