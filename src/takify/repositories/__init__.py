"""Repository interfaces for Takify.

Implementations (Adapters) are in:
- takify.adapters.memory (in-process store)
- takify.adapters.rest_api (remote API)
"""

from .repository import TaskStore

__all__ = ["TaskStore"]
