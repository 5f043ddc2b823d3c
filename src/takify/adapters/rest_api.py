"""REST API adapter - TaskStore implementation over the Takify backend.

Writes go straight to the HTTP API. The live feed polls the owner's tasks
and emits a snapshot whenever it differs from the last one emitted; local
writes wake every open feed so they show up without waiting a full
interval.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import httpx
from pydantic import ValidationError as PydanticValidationError

from takify.api.client import APIClient
from takify.api.tasks import TasksAPI
from takify.models import StoreError, SubscriptionError, Task, TaskCreate, TaskUpdate
from takify.repositories.repository import TaskStore
from takify.utils.logger import get_logger

_AUTH_FAILURES = (401, 403)


class RestApiTaskStore(TaskStore):
    """Task store implementation using the REST API."""

    def __init__(self, client: APIClient, poll_interval: float = 5.0):
        """Initialize REST API task store.

        Args:
            client: API client used for all requests
            poll_interval: Seconds between feed polls when nothing wakes it
        """
        self._client = client
        self._tasks_api: TasksAPI | None = None
        self.poll_interval = poll_interval
        self._wakeups: set[asyncio.Event] = set()

    @property
    def tasks_api(self) -> TasksAPI:
        """Get or create TasksAPI instance."""
        if self._tasks_api is None:
            self._tasks_api = TasksAPI(self._client)
        return self._tasks_api

    def _wake(self) -> None:
        for event in self._wakeups:
            event.set()

    @staticmethod
    def _to_tasks(documents: list[dict]) -> list[Task]:
        tasks = []
        for document in documents:
            try:
                tasks.append(Task.model_validate(document))
            except PydanticValidationError as e:
                task_id = document.get("id") if isinstance(document, dict) else None
                get_logger().warning("skipping malformed task document %s: %s", task_id, e)
        return tasks

    async def subscribe(self, owner_id: str) -> AsyncIterator[list[Task]]:
        logger = get_logger()
        wakeup = asyncio.Event()
        self._wakeups.add(wakeup)
        last: list[dict] | None = None
        try:
            while True:
                try:
                    # The poll loop is the retry; no per-request backoff
                    documents = await self.tasks_api.list_tasks(owner_id, retry=0)
                except httpx.HTTPStatusError as e:
                    if e.response.status_code in _AUTH_FAILURES:
                        raise SubscriptionError(
                            f"Task feed rejected ({e.response.status_code})"
                        ) from e
                    logger.warning("task feed poll failed: %s", e)
                except httpx.RequestError as e:
                    logger.warning("task feed poll failed: %s", e)
                except ValueError as e:
                    logger.warning("task feed poll returned invalid JSON: %s", e)
                else:
                    if not isinstance(documents, list):
                        logger.warning(
                            "task feed poll returned %s, expected a list",
                            type(documents).__name__,
                        )
                    elif documents != last:
                        last = documents
                        yield self._to_tasks(documents)

                try:
                    await asyncio.wait_for(wakeup.wait(), timeout=self.poll_interval)
                except TimeoutError:
                    pass
                wakeup.clear()
        finally:
            self._wakeups.discard(wakeup)

    async def create(self, record: TaskCreate) -> str:
        try:
            task_id = await self.tasks_api.create_task(record.to_document())
        except (httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            # ValueError covers a 2xx body that is not JSON
            raise StoreError(f"Failed to create task: {e}") from e
        self._wake()
        return task_id

    async def update(self, task_id: str, updates: TaskUpdate) -> None:
        try:
            await self.tasks_api.update_task(task_id, updates.to_fields())
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise StoreError(f"Task '{task_id}' not found", task_id=task_id) from e
            raise StoreError(f"Failed to update task: {e}", task_id=task_id) from e
        except httpx.RequestError as e:
            raise StoreError(f"Failed to update task: {e}", task_id=task_id) from e
        self._wake()

    async def delete(self, task_id: str) -> None:
        try:
            await self.tasks_api.delete_task(task_id)
        except httpx.HTTPStatusError as e:
            if e.response.status_code != 404:
                raise StoreError(f"Failed to delete task: {e}", task_id=task_id) from e
        except httpx.RequestError as e:
            raise StoreError(f"Failed to delete task: {e}", task_id=task_id) from e
        self._wake()
