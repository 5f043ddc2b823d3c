"""Task view-model - live task state for the signed-in user.

The view-model owns a subscription to the store's feed for one owner,
replaces its task map with every snapshot the feed delivers, forwards user
actions to the store and exposes a filtered, sorted projection of the
current tasks.

Writes are never applied locally: a created or updated task shows up
once the store's feed delivers the next snapshot.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from contextlib import aclosing
from datetime import UTC, datetime

from takify.models import (
    FILTER_TYPES,
    SORT_DIRECTIONS,
    SORT_FIELDS,
    AppConfig,
    FilterType,
    SessionRequiredError,
    SortDirection,
    SortField,
    StoreError,
    SubscriptionError,
    Task,
    TaskCreate,
    TaskDraft,
    TaskStats,
    TaskUpdate,
    ValidationError,
)
from takify.models.core import ensure_aware
from takify.repositories.repository import TaskStore
from takify.services.projection import project_tasks, summarize_tasks
from takify.services.session import Session, SessionProvider
from takify.utils.logger import get_logger

ChangeListener = Callable[[], None]


def parse_deadline(value: datetime | str | None) -> datetime | None:
    """Parse a draft deadline. Empty input means no deadline.

    Raises:
        ValidationError: If the string is not an ISO-8601 date/time
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)
    text = value.strip()
    if not text:
        return None
    try:
        return ensure_aware(datetime.fromisoformat(text))
    except ValueError as e:
        raise ValidationError(f"Invalid deadline '{value}': expected ISO date/time") from e


class TaskViewModel:
    """In-memory view of one owner's tasks, kept in sync with a TaskStore.

    The view-model is either detached (no owner, no tasks, no feed) or
    attached to an owner with a live feed. ``attach`` and ``bind`` must be
    called from a running event loop.
    """

    def __init__(
        self,
        store: TaskStore,
        *,
        filter_type: FilterType = "all",
        sort_field: SortField = "created_at",
        sort_direction: SortDirection = "desc",
        clock: Callable[[], datetime] | None = None,
    ):
        self.store = store
        self._filter_type = filter_type
        self._sort_field = sort_field
        self._sort_direction = sort_direction
        self._clock = clock or (lambda: datetime.now(UTC))

        self._tasks: dict[str, Task] = {}
        self._tasks_version = 0
        self._projection_cache: tuple[tuple, tuple[Task, ...]] | None = None

        self._owner_id: str | None = None
        self._feed_task: asyncio.Task | None = None
        self._generation = 0
        self._ready = asyncio.Event()
        self._received = False

        self._listeners: list[ChangeListener] = []

        self.stale = False
        self.last_error: SubscriptionError | None = None

    @classmethod
    def from_config(cls, store: TaskStore, config: AppConfig) -> TaskViewModel:
        """Create a view-model with the configured initial filter and sort."""
        return cls(
            store,
            filter_type=config.view.filter_type,
            sort_field=config.view.sort_field,
            sort_direction=config.view.sort_direction,
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def tasks(self) -> dict[str, Task]:
        return dict(self._tasks)

    @property
    def owner_id(self) -> str | None:
        return self._owner_id

    @property
    def is_attached(self) -> bool:
        return self._owner_id is not None

    @property
    def filter_type(self) -> FilterType:
        return self._filter_type

    @property
    def sort_field(self) -> SortField:
        return self._sort_field

    @property
    def sort_direction(self) -> SortDirection:
        return self._sort_direction

    def add_listener(self, listener: ChangeListener) -> Callable[[], None]:
        """Call ``listener`` after every state change. Returns a remover."""
        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    # ------------------------------------------------------------------
    # Subscription lifecycle
    # ------------------------------------------------------------------

    def attach(self, owner_id: str) -> None:
        """Start following ``owner_id``'s tasks.

        Re-attaching to the current owner does nothing; attaching to another
        owner detaches first.
        """
        if owner_id == self._owner_id:
            return
        if self._owner_id is not None:
            self.detach()

        loop = asyncio.get_running_loop()
        self._generation += 1
        self._owner_id = owner_id
        self._ready = asyncio.Event()
        self._received = False
        self.stale = False
        self.last_error = None
        self._feed_task = loop.create_task(self._consume(owner_id, self._generation))
        get_logger().info("view-model attached to %s", owner_id)

    def detach(self) -> None:
        """Stop the feed and clear all tasks.

        No snapshot is applied after this returns, even if the feed task has
        not finished unwinding yet.
        """
        if self._owner_id is None and self._feed_task is None:
            return

        self._generation += 1
        if self._feed_task is not None and not self._feed_task.done():
            self._feed_task.cancel()
        self._feed_task = None

        owner_id, self._owner_id = self._owner_id, None
        self._tasks = {}
        self._tasks_version += 1
        # Wake pending wait_ready calls; they see the detach and raise
        self._ready.set()
        self._ready = asyncio.Event()
        self._received = False
        self.stale = False
        self.last_error = None
        get_logger().info("view-model detached from %s", owner_id)
        self._notify()

    async def aclose(self) -> None:
        """Detach and wait until the feed has been closed."""
        task = self._feed_task
        self.detach()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    def bind(self, provider: SessionProvider) -> Callable[[], None]:
        """Attach and detach following ``provider``'s session.

        Attaches immediately if a session is already present. Returns a
        callable that stops following the provider.
        """

        def on_session(session: Session | None) -> None:
            if session is None:
                self.detach()
            else:
                self.attach(session.user_id)

        remove = provider.add_listener(on_session)
        if provider.current is not None:
            on_session(provider.current)
        return remove

    async def wait_ready(self, timeout: float | None = None) -> None:
        """Wait for the first snapshot after ``attach``.

        Raises:
            SessionRequiredError: If not attached, or detached while waiting
            SubscriptionError: If the feed failed before delivering anything
            TimeoutError: If nothing arrived within ``timeout`` seconds
        """
        if self._owner_id is None:
            raise SessionRequiredError("Not signed in")
        ready = self._ready
        async with asyncio.timeout(timeout):
            await ready.wait()
        if ready is not self._ready:
            raise SessionRequiredError("Session ended while waiting for tasks")
        if not self._received and self.last_error is not None:
            raise self.last_error

    async def _consume(self, owner_id: str, generation: int) -> None:
        logger = get_logger()
        feed = self.store.subscribe(owner_id)
        try:
            async with aclosing(feed):
                async for snapshot in feed:
                    if generation != self._generation:
                        return
                    self._apply_snapshot(owner_id, snapshot)
            error = SubscriptionError("Task feed ended")
        except SubscriptionError as e:
            error = e
        except Exception as e:
            logger.exception("task feed for %s crashed", owner_id)
            error = SubscriptionError(f"Task feed failed: {e}")
            error.__cause__ = e

        if generation != self._generation:
            return
        logger.warning("task feed for %s interrupted: %s", owner_id, error)
        self.stale = True
        self.last_error = error
        self._ready.set()
        self._notify()

    def _apply_snapshot(self, owner_id: str, snapshot: list[Task]) -> None:
        tasks = {t.id: t for t in snapshot if t.owner_id == owner_id}
        if len(tasks) != len(snapshot):
            get_logger().warning(
                "dropped %d foreign or duplicate records from feed",
                len(snapshot) - len(tasks),
            )
        self._tasks = tasks
        self._tasks_version += 1
        self._received = True
        self.stale = False
        self.last_error = None
        self._ready.set()
        get_logger().debug("snapshot applied: %d tasks", len(tasks))
        self._notify()

    # ------------------------------------------------------------------
    # Store operations
    # ------------------------------------------------------------------

    def _require_owner(self) -> str:
        if self._owner_id is None:
            raise SessionRequiredError("Not signed in")
        return self._owner_id

    async def add(self, draft: TaskDraft) -> str:
        """Create a task from ``draft`` and return its id.

        The new task is not inserted locally; it appears with the next
        snapshot. ``draft`` is left untouched so it can be resubmitted.

        Raises:
            ValidationError: If the title is blank or the deadline unparsable
            SessionRequiredError: If not attached
            StoreError: If the store rejects the task
        """
        if not draft.title.strip():
            raise ValidationError("Task title cannot be empty")
        deadline = parse_deadline(draft.deadline)
        owner_id = self._require_owner()

        record = TaskCreate(
            title=draft.title,
            description=draft.description,
            category=draft.category,
            priority=draft.priority,
            completed=False,
            progress=0,
            deadline=deadline,
            created_at=self._clock(),
            owner_id=owner_id,
        )
        try:
            task_id = await self.store.create(record)
        except StoreError as e:
            get_logger().error("failed to add task: %s", e)
            raise
        get_logger().info("task added: %s", task_id)
        return task_id

    async def toggle_completion(self, task_id: str) -> None:
        """Flip a task's completion. Unknown ids are ignored.

        Completing sets progress to 100; reopening keeps the stored progress.
        """
        task = self._tasks.get(task_id)
        if task is None:
            get_logger().debug("toggle ignored, unknown task %s", task_id)
            return
        self._require_owner()

        completed = not task.completed
        progress = 100 if completed else task.progress
        await self._update(task_id, TaskUpdate(completed=completed, progress=progress))

    async def set_progress(self, task_id: str, value: int) -> None:
        """Set a task's progress; completion follows ``value == 100``."""
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 100:
            raise ValidationError(f"Progress must be an integer from 0 to 100, got {value!r}")
        self._require_owner()
        await self._update(task_id, TaskUpdate(progress=value, completed=value == 100))

    async def remove(self, task_id: str) -> None:
        self._require_owner()
        try:
            await self.store.delete(task_id)
        except StoreError as e:
            get_logger().error("failed to delete task %s: %s", task_id, e)
            raise
        get_logger().info("task deleted: %s", task_id)

    async def _update(self, task_id: str, updates: TaskUpdate) -> None:
        try:
            await self.store.update(task_id, updates)
        except StoreError as e:
            get_logger().error("failed to update task %s: %s", task_id, e)
            raise
        get_logger().info("task updated: %s %s", task_id, updates.to_fields())

    # ------------------------------------------------------------------
    # Filter, sort, projection
    # ------------------------------------------------------------------

    def set_filter(self, filter_type: FilterType) -> None:
        if filter_type not in FILTER_TYPES:
            raise ValidationError(
                f"Unknown filter '{filter_type}'. Expected one of: {', '.join(FILTER_TYPES)}"
            )
        if filter_type != self._filter_type:
            self._filter_type = filter_type
            self._notify()

    def set_sort(self, sort_field: SortField) -> None:
        """Sort by ``sort_field``.

        Selecting the active field flips the direction; selecting another
        field makes it active with direction ``desc``.
        """
        if sort_field not in SORT_FIELDS:
            raise ValidationError(
                f"Unknown sort field '{sort_field}'. Expected one of: {', '.join(SORT_FIELDS)}"
            )
        if sort_field == self._sort_field:
            self._sort_direction = "asc" if self._sort_direction == "desc" else "desc"
        else:
            self._sort_field = sort_field
            self._sort_direction = "desc"
        self._notify()

    def set_sort_direction(self, direction: SortDirection) -> None:
        if direction not in SORT_DIRECTIONS:
            raise ValidationError(
                f"Unknown sort direction '{direction}'. Expected one of: "
                f"{', '.join(SORT_DIRECTIONS)}"
            )
        if direction != self._sort_direction:
            self._sort_direction = direction
            self._notify()

    def projection(self) -> tuple[Task, ...]:
        """The current tasks, filtered then sorted.

        Cached until the tasks, the filter or the sort change.
        """
        key = (self._tasks_version, self._filter_type, self._sort_field, self._sort_direction)
        if self._projection_cache is None or self._projection_cache[0] != key:
            projected = project_tasks(
                self._tasks.values(),
                self._filter_type,
                self._sort_field,
                self._sort_direction,
            )
            self._projection_cache = (key, tuple(projected))
        return self._projection_cache[1]

    def stats(self) -> TaskStats:
        """Summary counts over all current tasks, ignoring the filter."""
        return summarize_tasks(self._tasks.values())
