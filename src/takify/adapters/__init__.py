"""Adapters module - TaskStore implementations for different backends.

- memory: In-process store with a live feed
- rest_api: Remote REST API backend
"""

from .memory import InMemoryTaskStore
from .rest_api import RestApiTaskStore

__all__ = [
    "InMemoryTaskStore",
    "RestApiTaskStore",
]
