"""Application wiring.

Builds the collaborators once at startup and hands them to the commands,
so nothing below the command layer looks anything up globally.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache

from takify.adapters.rest_api import RestApiTaskStore
from takify.api.auth import AuthAPI
from takify.api.client import APIClient
from takify.repositories.repository import TaskStore
from takify.services.auth_service import AuthService
from takify.services.config_service import ConfigService, get_config_service
from takify.services.session import SessionProvider
from takify.services.task_view_model import TaskViewModel
from takify.utils.logger import set_log_level


class AppContext:
    """Holds the configured session provider, store and services."""

    def __init__(
        self,
        config_service: ConfigService,
        session_provider: SessionProvider,
        client: APIClient,
        store: TaskStore,
        auth_service: AuthService,
    ):
        self.config_service = config_service
        self.session_provider = session_provider
        self.client = client
        self.store = store
        self.auth_service = auth_service

    @property
    def config(self):
        return self.config_service.config

    async def close(self) -> None:
        await self.client.close()

    @asynccontextmanager
    async def view_model(self, ready_timeout: float | None = None) -> AsyncIterator[TaskViewModel]:
        """A view-model bound to the session, with its first snapshot loaded."""
        vm = TaskViewModel.from_config(self.store, self.config)
        unbind = vm.bind(self.session_provider)
        try:
            await vm.wait_ready(timeout=ready_timeout)
            yield vm
        finally:
            unbind()
            await vm.aclose()


def build_app_context(config_service: ConfigService | None = None) -> AppContext:
    """Create the application context from configuration and stored credentials."""
    config_service = config_service or get_config_service()
    config = config_service.config
    set_log_level(config.log.level)

    session_provider = SessionProvider()
    client = APIClient(config.api, session_provider=session_provider)
    store = RestApiTaskStore(client, poll_interval=config.sync.poll_interval)
    auth_service = AuthService(AuthAPI(client), session_provider, config_service)
    auth_service.restore_session()

    return AppContext(config_service, session_provider, client, store, auth_service)


@lru_cache(maxsize=1)
def get_app_context() -> AppContext:
    """Get the shared AppContext, building it on first use."""
    return build_app_context()
