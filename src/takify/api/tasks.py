"""Tasks API endpoints."""

from typing import Any

from takify.api.client import APIClient


class TasksAPI:
    """Tasks API client."""

    def __init__(self, client: APIClient):
        self.client = client

    async def list_tasks(self, owner_id: str, *, retry: int | None = None) -> list[dict]:
        """List all task documents owned by ``owner_id``.

        The backend answers either a bare list or ``{"tasks": [...]}``.
        """
        response = await self.client.get(
            "/v1/tasks", params={"userId": owner_id}, retry=retry
        )
        data = response.json()
        if isinstance(data, dict):
            return data.get("tasks", [])
        return data

    async def create_task(self, document: dict[str, Any]) -> str:
        """Create a task document and return its id."""
        response = await self.client.post("/v1/tasks", json=document)
        return response.json()["id"]

    async def update_task(self, task_id: str, fields: dict[str, Any]) -> None:
        """Merge fields into an existing task document."""
        await self.client.patch(f"/v1/tasks/{task_id}", json=fields)

    async def delete_task(self, task_id: str) -> None:
        """Delete a task document."""
        await self.client.delete(f"/v1/tasks/{task_id}")
