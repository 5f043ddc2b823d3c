"""Tests for task models."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from takify.models import (
    StoreError,
    Task,
    TaskCreate,
    TaskUpdate,
    TakifyError,
    ValidationError,
)


def test_task_from_wire_document():
    """Wire documents use camelCase keys for createdAt and userId."""
    task = Task.from_document(
        "abc",
        {
            "title": "Buy milk",
            "description": "",
            "category": "shopping",
            "priority": "low",
            "completed": False,
            "progress": 0,
            "deadline": None,
            "createdAt": "2025-01-01T12:00:00+00:00",
            "userId": "user-1",
        },
    )

    assert task.id == "abc"
    assert task.owner_id == "user-1"
    assert task.created_at == datetime(2025, 1, 1, 12, 0, tzinfo=UTC)
    assert task.deadline is None


def test_task_to_document_uses_wire_keys_and_drops_id(make_task):
    doc = make_task("t1").to_document()

    assert "id" not in doc
    assert doc["userId"] == "user-1"
    assert doc["createdAt"].startswith("2025-01-01T12:00:00")
    assert "owner_id" not in doc


def test_naive_datetimes_become_aware():
    task = Task(
        id="t1",
        title="x",
        created_at=datetime(2025, 1, 1, 9, 0),
        deadline=datetime(2025, 1, 2, 9, 0),
        owner_id="u",
    )

    assert task.created_at.tzinfo is not None
    assert task.deadline.tzinfo is not None


@pytest.mark.parametrize("progress", [-1, 101])
def test_task_progress_out_of_range_rejected(progress):
    with pytest.raises(PydanticValidationError):
        Task(
            id="t1",
            title="x",
            progress=progress,
            created_at=datetime(2025, 1, 1, tzinfo=UTC),
            owner_id="u",
        )


def test_task_rejects_unknown_priority():
    with pytest.raises(PydanticValidationError):
        Task(
            id="t1",
            title="x",
            priority="urgent",
            created_at=datetime(2025, 1, 1, tzinfo=UTC),
            owner_id="u",
        )


def test_task_create_document_has_initial_state():
    record = TaskCreate(
        title="Write report",
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
        owner_id="user-1",
    )

    doc = record.to_document()

    assert doc["completed"] is False
    assert doc["progress"] == 0
    assert doc["userId"] == "user-1"
    assert doc["category"] == "personal"
    assert doc["priority"] == "medium"


def test_task_update_only_sends_set_fields():
    assert TaskUpdate(progress=40).to_fields() == {"progress": 40}
    assert TaskUpdate(completed=False, progress=0).to_fields() == {
        "completed": False,
        "progress": 0,
    }


def test_error_hierarchy():
    assert issubclass(ValidationError, TakifyError)
    assert issubclass(ValidationError, ValueError)
    err = StoreError("boom", task_id="t1")
    assert err.task_id == "t1"
    assert str(err) == "boom"
