"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem/API state.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import pytest

from takify.models import Task

BASE_TIME = datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True, scope="session")
def isolated_log_dir(tmp_path_factory):
    """Send the application log to a temporary directory."""
    log_dir = str(tmp_path_factory.mktemp("logs"))
    with patch("takify.utils.logger.user_log_dir", return_value=log_dir):
        yield log_dir


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches the platform config dir so config files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from takify.services.config_service import ConfigService, get_config_service

    tmpdir = str(tmp_path)
    get_config_service.cache_clear()
    with patch("takify.services.config_service.user_config_dir", return_value=tmpdir):
        yield ConfigService()
    get_config_service.cache_clear()


# ---------------------------------------------------------------------------
# Task factory
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_task():
    """Build Task records with sensible defaults.

    ``created`` is an offset in minutes from a fixed base time, so tests can
    order records without spelling out datetimes.
    """

    def _make(
        task_id: str,
        *,
        title: str | None = None,
        priority: str = "medium",
        completed: bool = False,
        progress: int = 0,
        deadline: datetime | None = None,
        created: int = 0,
        owner_id: str = "user-1",
        category: str = "personal",
    ) -> Task:
        return Task(
            id=task_id,
            title=title or f"Task {task_id}",
            category=category,
            priority=priority,
            completed=completed,
            progress=progress,
            deadline=deadline,
            created_at=BASE_TIME + timedelta(minutes=created),
            owner_id=owner_id,
        )

    return _make
