"""Tests for RestApiTaskStore with a mocked TasksAPI."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from takify.adapters.rest_api import RestApiTaskStore
from takify.api.client import APIClient
from takify.models import StoreError, SubscriptionError, TaskCreate, TaskUpdate
from takify.models.config_models import APIConfig


def _status_error(status: int) -> httpx.HTTPStatusError:
    request = httpx.Request("GET", "http://test/v1/tasks")
    response = httpx.Response(status, request=request)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


def _doc(task_id: str, **overrides) -> dict:
    doc = {
        "id": task_id,
        "title": f"Task {task_id}",
        "description": "",
        "category": "work",
        "priority": "medium",
        "completed": False,
        "progress": 0,
        "deadline": None,
        "createdAt": "2025-01-01T12:00:00+00:00",
        "userId": "user-1",
    }
    doc.update(overrides)
    return doc


@pytest.fixture
def mock_tasks_api():
    api = MagicMock()
    api.list_tasks = AsyncMock(return_value=[_doc("t1")])
    api.create_task = AsyncMock(return_value="new-id")
    api.update_task = AsyncMock()
    api.delete_task = AsyncMock()
    return api


@pytest.fixture
def store(mock_tasks_api):
    store = RestApiTaskStore(MagicMock(), poll_interval=0.01)
    store._tasks_api = mock_tasks_api
    return store


async def _next(feed, timeout: float = 1.0):
    return await asyncio.wait_for(feed.__anext__(), timeout)


class TestRestApiFeed:
    @pytest.mark.asyncio
    async def test_first_poll_yields_snapshot(self, store, mock_tasks_api):
        feed = store.subscribe("user-1")

        snapshot = await _next(feed)

        assert [t.id for t in snapshot] == ["t1"]
        assert snapshot[0].owner_id == "user-1"
        mock_tasks_api.list_tasks.assert_awaited_with("user-1", retry=0)
        await feed.aclose()

    @pytest.mark.asyncio
    async def test_unchanged_polls_are_not_emitted(self, store, mock_tasks_api):
        mock_tasks_api.list_tasks.side_effect = [
            [_doc("t1")],
            [_doc("t1")],
            [_doc("t1")],
            [_doc("t1"), _doc("t2")],
        ]
        feed = store.subscribe("user-1")
        await _next(feed)

        snapshot = await _next(feed)

        assert [t.id for t in snapshot] == ["t1", "t2"]
        assert mock_tasks_api.list_tasks.await_count == 4
        await feed.aclose()

    @pytest.mark.asyncio
    async def test_transient_errors_keep_polling(self, store, mock_tasks_api):
        mock_tasks_api.list_tasks.side_effect = [
            httpx.ConnectError("offline"),
            _status_error(503),
            [_doc("t1")],
        ]
        feed = store.subscribe("user-1")

        snapshot = await _next(feed)

        assert [t.id for t in snapshot] == ["t1"]
        await feed.aclose()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403])
    async def test_auth_failure_ends_feed(self, store, mock_tasks_api, status):
        mock_tasks_api.list_tasks.side_effect = _status_error(status)
        feed = store.subscribe("user-1")

        with pytest.raises(SubscriptionError):
            await _next(feed)

    @pytest.mark.asyncio
    async def test_malformed_documents_skipped(self, store, mock_tasks_api):
        mock_tasks_api.list_tasks.return_value = [
            _doc("good"),
            _doc("bad", priority="urgent"),
            {"id": "worse"},
        ]
        feed = store.subscribe("user-1")

        snapshot = await _next(feed)

        assert [t.id for t in snapshot] == ["good"]
        await feed.aclose()

    @pytest.mark.asyncio
    async def test_write_wakes_feed(self, mock_tasks_api):
        store = RestApiTaskStore(MagicMock(), poll_interval=60)
        store._tasks_api = mock_tasks_api
        feed = store.subscribe("user-1")
        await _next(feed)
        mock_tasks_api.list_tasks.return_value = [_doc("t1", completed=True, progress=100)]

        await store.update("t1", TaskUpdate(completed=True, progress=100))
        snapshot = await _next(feed)

        assert snapshot[0].completed is True
        await feed.aclose()
        assert store._wakeups == set()


class TestRestApiWrites:
    @pytest.mark.asyncio
    async def test_create_sends_wire_document(self, store, mock_tasks_api):
        record = TaskCreate(
            title="Write report",
            priority="high",
            created_at=datetime(2025, 1, 1, tzinfo=UTC),
            owner_id="user-1",
        )

        task_id = await store.create(record)

        assert task_id == "new-id"
        document = mock_tasks_api.create_task.call_args[0][0]
        assert document["userId"] == "user-1"
        assert document["createdAt"].startswith("2025-01-01")
        assert document["priority"] == "high"

    @pytest.mark.asyncio
    async def test_create_failure(self, store, mock_tasks_api):
        mock_tasks_api.create_task.side_effect = _status_error(400)

        with pytest.raises(StoreError):
            await store.create(
                TaskCreate(title="x", created_at=datetime(2025, 1, 1, tzinfo=UTC), owner_id="u")
            )

    @pytest.mark.asyncio
    async def test_update_sends_only_set_fields(self, store, mock_tasks_api):
        await store.update("t1", TaskUpdate(progress=40))

        mock_tasks_api.update_task.assert_awaited_once_with("t1", {"progress": 40})

    @pytest.mark.asyncio
    async def test_update_missing_task(self, store, mock_tasks_api):
        mock_tasks_api.update_task.side_effect = _status_error(404)

        with pytest.raises(StoreError, match="not found") as exc_info:
            await store.update("gone", TaskUpdate(progress=1))
        assert exc_info.value.task_id == "gone"

    @pytest.mark.asyncio
    async def test_update_network_failure(self, store, mock_tasks_api):
        mock_tasks_api.update_task.side_effect = httpx.ReadTimeout("slow")

        with pytest.raises(StoreError):
            await store.update("t1", TaskUpdate(progress=1))

    @pytest.mark.asyncio
    async def test_delete_missing_task_is_success(self, store, mock_tasks_api):
        mock_tasks_api.delete_task.side_effect = _status_error(404)

        await store.delete("gone")

    @pytest.mark.asyncio
    async def test_delete_forbidden(self, store, mock_tasks_api):
        mock_tasks_api.delete_task.side_effect = _status_error(403)

        with pytest.raises(StoreError):
            await store.delete("t1")


def _http_store(handler, poll_interval: float = 0.01) -> RestApiTaskStore:
    client = APIClient(
        config=APIConfig(endpoint="https://api.test/api", retry=0),
        transport=httpx.MockTransport(handler),
    )
    return RestApiTaskStore(client, poll_interval=poll_interval)


class TestRestApiUnexpectedBodies:
    @pytest.mark.asyncio
    async def test_create_with_html_body_raises_store_error(self):
        store = _http_store(lambda request: httpx.Response(200, text="<html>proxy</html>"))

        with pytest.raises(StoreError, match="Failed to create task"):
            await store.create(
                TaskCreate(title="x", created_at=datetime(2025, 1, 1, tzinfo=UTC), owner_id="u")
            )
        await store._client.close()

    @pytest.mark.asyncio
    async def test_create_with_list_body_raises_store_error(self):
        store = _http_store(lambda request: httpx.Response(201, json=["not", "an", "object"]))

        with pytest.raises(StoreError):
            await store.create(
                TaskCreate(title="x", created_at=datetime(2025, 1, 1, tzinfo=UTC), owner_id="u")
            )
        await store._client.close()

    @pytest.mark.asyncio
    async def test_feed_survives_non_json_poll(self):
        bodies = iter(
            [
                httpx.Response(200, text="<html>gateway</html>"),
                httpx.Response(200, json={"tasks": "maintenance"}),
            ]
        )

        def handler(request: httpx.Request) -> httpx.Response:
            response = next(bodies, None)
            if response is None:
                response = httpx.Response(200, json=[_doc("t1")])
            return response

        store = _http_store(handler)
        feed = store.subscribe("user-1")

        snapshot = await _next(feed)

        assert [t.id for t in snapshot] == ["t1"]
        await feed.aclose()
        await store._client.close()

    @pytest.mark.asyncio
    async def test_non_object_documents_skipped(self, store, mock_tasks_api):
        mock_tasks_api.list_tasks.return_value = ["junk", _doc("t1")]
        feed = store.subscribe("user-1")

        snapshot = await _next(feed)

        assert [t.id for t in snapshot] == ["t1"]
        await feed.aclose()
